"""
Trip persistence on the local SQL database.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from triplog.app.core.exceptions import PersistenceError, ValidationError
from triplog.app.core.security import get_password_hash, verify_password
from triplog.app.models.trip import TripRecord
from triplog.app.models.user import User
from triplog.app.repositories.base import SaveAck, TripRepository
from triplog.app.schemas.auth import UserAccount
from triplog.app.schemas.trip import Trip

logger = logging.getLogger(__name__)

# Columns copied one-to-one between Trip and TripRecord
TRIP_COLUMNS = (
    "driver_id", "driver_name", "vehicle_plate",
    "start_date", "start_time", "origin", "km_initial", "photo_initial",
    "factory_name", "factory_arrival_time", "factory_arrival_photo",
    "factory_departure_time", "factory_departure_photo",
    "end_date", "end_time", "destination", "km_final", "photo_final",
    "status", "numero_dt", "valor_comissao", "admin_comment", "created_at",
)


def record_to_trip(record: TripRecord) -> Trip:
    data = {column: getattr(record, column) for column in TRIP_COLUMNS}
    data["driver_name"] = data["driver_name"] or ""
    return Trip(id=str(record.id), **data)


class SqlTripRepository(TripRepository):
    """TripRepository backed by an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_trips(self) -> List[Trip]:
        try:
            result = await self.db.execute(select(TripRecord).order_by(TripRecord.id.desc()))
            records = result.scalars().all()
        except SQLAlchemyError as exc:
            logger.error("Failed to load trips: %s", exc)
            raise PersistenceError("Failed to load trips") from exc
        return [record_to_trip(record) for record in records]

    async def save_trip(self, trip: Trip) -> SaveAck:
        """
        Insert or overwrite a trip.

        Ids that are not integers (temporary client ids) or that are unknown
        produce an insert; the database assigns the durable id.
        """
        values = {column: getattr(trip, column) for column in TRIP_COLUMNS}
        try:
            record = None
            if trip.id.isdigit():
                record = await self.db.get(TripRecord, int(trip.id))

            if record is None:
                record = TripRecord(**values)
                self.db.add(record)
            else:
                for column, value in values.items():
                    setattr(record, column, value)

            await self.db.commit()
            await self.db.refresh(record)
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Failed to save trip %s: %s", trip.id, exc)
            raise PersistenceError("Failed to save trip", details={"trip_id": trip.id}) from exc

        return SaveAck(id=str(record.id))

    async def authenticate(self, user_id: str, password: str) -> Optional[UserAccount]:
        try:
            user = await self.db.get(User, user_id)
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to load user") from exc

        if not user or not user.is_active or not verify_password(password, user.hashed_password):
            return None
        return UserAccount.model_validate(user)

    async def register_user(self, account: UserAccount, password: str) -> UserAccount:
        try:
            if await self.db.get(User, account.id) is not None:
                raise ValidationError("User ID already registered", field="id")

            user = User(
                id=account.id,
                name=account.name,
                email=account.email,
                hashed_password=get_password_hash(password),
                role=account.role,
                is_active=True,
            )
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise PersistenceError("Failed to register user") from exc

        return UserAccount.model_validate(user)
