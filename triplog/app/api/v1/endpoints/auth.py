"""
Authentication API endpoints.

Provides register, login, logout and user info endpoints. Credentials are
checked by the configured trip repository, so users may live either in the
local database or in the spreadsheet backend.
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from triplog.app.db.session import get_db
from triplog.app.models.enums import UserRole
from triplog.app.schemas.auth import UserAccount, UserRegister, UserLogin, TokenResponse, UserResponse
from triplog.app.core.jwt import create_access_token
from triplog.app.core.dependencies import get_current_user, get_trip_repository
from triplog.app.core.exceptions import AuthenticationError, AuthorizationError
from triplog.app.core.token_revocation import revoke_token
from triplog.app.repositories.base import TripRepository
from triplog.app.services.audit import log_auth_event, AuditAction

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _issue_token(account: UserAccount) -> TokenResponse:
    jwt_payload = {
        "sub": account.id,
        "user_id": account.id,
        "name": account.name,
        "role": account.role.value,
    }
    return TokenResponse(
        access_token=create_access_token(data=jwt_payload),
        token_type="bearer",
        user_id=account.id,
        name=account.name,
        role=account.role,
    )


def _client_ip(request: Request):
    return request.client.host if request.client else None


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    request: Request,
    repository: TripRepository = Depends(get_trip_repository),
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new driver.

    Administrator accounts cannot be created via API; they are seeded.
    """
    if user_data.role and user_data.role != UserRole.DRIVER:
        raise AuthorizationError("Only drivers can self-register")

    account = UserAccount(
        id=user_data.id.strip(),
        name=user_data.name.strip(),
        email=user_data.email,
        role=UserRole.DRIVER,
    )
    account = await repository.register_user(account, user_data.password)

    await log_auth_event(
        db=db,
        action=AuditAction.USER_REGISTERED,
        user_id=account.id,
        name=account.name,
        ip_address=_client_ip(request)
    )

    return _issue_token(account)


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    request: Request,
    repository: TripRepository = Depends(get_trip_repository),
    db: AsyncSession = Depends(get_db)
):
    """
    Login user and return JWT token.

    Logs successful and failed login attempts for security monitoring.
    """
    account = await repository.authenticate(credentials.id.strip(), credentials.password)

    if account is None:
        await log_auth_event(
            db=db,
            action=AuditAction.LOGIN_FAILED,
            user_id=credentials.id,
            ip_address=_client_ip(request),
            metadata={"reason": "Invalid credentials"}
        )
        raise AuthenticationError("Invalid credentials")

    await log_auth_event(
        db=db,
        action=AuditAction.LOGIN_SUCCESS,
        user_id=account.id,
        name=account.name,
        ip_address=_client_ip(request)
    )

    return _issue_token(account)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: dict = Depends(get_current_user)):
    """Current authenticated user, as carried by the token."""
    return UserResponse(
        id=current_user["user_id"],
        name=current_user.get("name") or current_user["user_id"],
        role=current_user["role"],
    )


@router.post("/logout")
async def logout(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Revoke the presented token."""
    revoked = await revoke_token(current_user["token"], current_user["user_id"])

    await log_auth_event(
        db=db,
        action=AuditAction.LOGOUT,
        user_id=current_user["user_id"],
        name=current_user.get("name")
    )

    return {"status": "success", "revoked": revoked}
