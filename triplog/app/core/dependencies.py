"""
FastAPI dependencies.

Authentication from the bearer token, and wiring of the trip repository,
the in-memory store and the trip services for each request.
"""

from datetime import datetime
from typing import Callable
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from triplog.app.core.clock import local_now
from triplog.app.core.config import settings
from triplog.app.core.exceptions import AuthenticationError, TokenRevokedError
from triplog.app.core.jwt import decode_access_token
from triplog.app.core.token_revocation import is_token_revoked
from triplog.app.db.session import get_db
from triplog.app.domain.trips.approval import ApprovalService
from triplog.app.domain.trips.authorization import Actor
from triplog.app.domain.trips.policy import EvidencePolicy
from triplog.app.models.enums import UserRole
from triplog.app.repositories.base import TripRepository
from triplog.app.repositories.sql import SqlTripRepository
from triplog.app.repositories.store import TripStore
from triplog.app.services.trip_service import DriverTripService

# HTTP Bearer security scheme
security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> dict:
    """
    FastAPI dependency for JWT authentication.

    Users may live in the spreadsheet backend, so the token itself is the
    source of truth: signature, expiry and the revocation list are checked,
    the user table is not.

    Returns:
        Decoded token payload (sub, user_id, name, role)

    Raises:
        AuthenticationError: invalid, expired or malformed token
        TokenRevokedError: token was logged out
    """
    token = credentials.credentials

    payload = decode_access_token(token)
    if payload is None:
        raise AuthenticationError("Could not validate credentials")

    if not payload.get("user_id") or not payload.get("role"):
        raise AuthenticationError("Invalid token payload")

    if await is_token_revoked(token):
        raise TokenRevokedError()

    payload["token"] = token
    return payload


def actor_from_user(current_user: dict) -> Actor:
    try:
        role = UserRole(current_user.get("role"))
    except ValueError:
        raise AuthenticationError("Invalid role in token")
    return Actor(
        id=str(current_user["user_id"]),
        name=current_user.get("name") or current_user.get("sub") or "",
        role=role,
    )


def get_trip_repository(request: Request, db: AsyncSession = Depends(get_db)) -> TripRepository:
    """Spreadsheet repository when configured, else the local database."""
    if settings.persistence_backend == "sheets":
        return request.app.state.sheets_repository
    return SqlTripRepository(db)


def get_trip_store(request: Request) -> TripStore:
    return request.app.state.trip_store


def get_evidence_policy() -> EvidencePolicy:
    return EvidencePolicy.from_settings(settings)


def get_clock() -> Callable[[], datetime]:
    return local_now


def get_driver_trip_service(
    repository: TripRepository = Depends(get_trip_repository),
    store: TripStore = Depends(get_trip_store),
    policy: EvidencePolicy = Depends(get_evidence_policy),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> DriverTripService:
    return DriverTripService(repository, store, policy, clock)


def get_approval_service(
    repository: TripRepository = Depends(get_trip_repository),
    store: TripStore = Depends(get_trip_store),
    policy: EvidencePolicy = Depends(get_evidence_policy),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> ApprovalService:
    return ApprovalService(repository, store, policy, clock)
