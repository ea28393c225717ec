"""
Trip database model.

Storage for trips when the local database is the persistence backend.
Dates and times are kept as the canonical strings of the trip record.
"""

from sqlalchemy import Column, Integer, String, Float, Text, DateTime, Enum
from sqlalchemy.sql import func
from triplog.app.db.session import Base
from triplog.app.models.trip_enums import TripStatus


class TripRecord(Base):
    """
    Trip model.

    One journey by one driver: departure, optional factory stop, destination,
    and the administrator's audit fields.
    """
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Driver (denormalized, never re-synced)
    driver_id = Column(String(64), nullable=False, index=True)
    driver_name = Column(String(120), nullable=False, default="")
    vehicle_plate = Column(String(16), nullable=True, index=True)

    # Departure
    start_date = Column(String(10), nullable=True, index=True)
    start_time = Column(String(5), nullable=True)
    origin = Column(String(255), nullable=True)
    km_initial = Column(Float, nullable=True)
    photo_initial = Column(Text, nullable=True)

    # Factory waypoint
    factory_name = Column(String(120), nullable=True)
    factory_arrival_time = Column(String(5), nullable=True)
    factory_arrival_photo = Column(Text, nullable=True)
    factory_departure_time = Column(String(5), nullable=True)
    factory_departure_photo = Column(Text, nullable=True)

    # Destination
    end_date = Column(String(10), nullable=True)
    end_time = Column(String(5), nullable=True)
    destination = Column(String(255), nullable=True)
    km_final = Column(Float, nullable=True)
    photo_final = Column(Text, nullable=True)

    # Status
    status = Column(Enum(TripStatus), default=TripStatus.IN_PROGRESS, nullable=False, index=True)

    # Audit fields
    numero_dt = Column(String(32), nullable=True)
    valor_comissao = Column(Float, nullable=True)
    admin_comment = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(String(40), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<TripRecord(id={self.id}, driver_id='{self.driver_id}', status='{self.status.value}')>"
