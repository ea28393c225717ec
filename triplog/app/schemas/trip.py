"""
Trip schemas.

`Trip` is the canonical trip record shared by the lifecycle engine, the
repositories and the API. Field aliases are the wire names used by the
spreadsheet backend and the web client.
"""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Union

from triplog.app.models.trip_enums import TripStatus


class Trip(BaseModel):
    """One journey by one driver in one vehicle."""
    id: str

    # Actor references (denormalized at creation, never re-synced)
    driver_id: str = Field(..., alias="driverId")
    driver_name: str = Field("", alias="driverName")
    vehicle_plate: Optional[str] = Field(None, alias="vehiclePlate")

    # Departure
    start_date: Optional[str] = Field(None, alias="startDate")  # YYYY-MM-DD
    start_time: Optional[str] = Field(None, alias="startTime")  # HH:MM
    origin: Optional[str] = None
    km_initial: Optional[float] = Field(None, alias="kmInitial")
    photo_initial: Optional[str] = Field(None, alias="photoInitial")

    # Factory waypoint
    factory_name: Optional[str] = Field(None, alias="factoryName")
    factory_arrival_time: Optional[str] = Field(None, alias="factoryArrivalTime")
    factory_arrival_photo: Optional[str] = Field(None, alias="factoryArrivalPhoto")
    factory_departure_time: Optional[str] = Field(None, alias="factoryDepartureTime")
    factory_departure_photo: Optional[str] = Field(None, alias="factoryDeparturePhoto")

    # Destination
    end_date: Optional[str] = Field(None, alias="endDate")
    end_time: Optional[str] = Field(None, alias="endTime")
    destination: Optional[str] = None
    km_final: Optional[float] = Field(None, alias="kmFinal")
    photo_final: Optional[str] = Field(None, alias="photoFinal")

    status: TripStatus

    # Audit fields (administrator only)
    numero_dt: Optional[str] = None
    valor_comissao: Optional[float] = None
    admin_comment: Optional[str] = Field(None, alias="adminComment")

    created_at: Optional[str] = Field(None, alias="createdAt")

    class Config:
        populate_by_name = True
        frozen = True


class TripStartRequest(BaseModel):
    """Schema for starting a trip. Numeric fields may arrive as strings."""
    vehicle_plate: Optional[str] = Field(None, alias="vehiclePlate")
    origin: Optional[str] = None
    km_initial: Optional[Union[float, str]] = Field(None, alias="kmInitial")
    photo_initial: Optional[str] = Field(None, alias="photoInitial")

    class Config:
        populate_by_name = True


class FactoryArrivalRequest(BaseModel):
    """Schema for confirming arrival at the factory."""
    factory_name: Optional[str] = Field(None, alias="factoryName")
    photo: Optional[str] = None

    class Config:
        populate_by_name = True


class FactoryDepartureRequest(BaseModel):
    """Schema for confirming departure from the factory."""
    photo: Optional[str] = None


class TripFinishRequest(BaseModel):
    """Schema for finishing a trip."""
    destination: Optional[str] = None
    km_final: Optional[Union[float, str]] = Field(None, alias="kmFinal")
    photo_final: Optional[str] = Field(None, alias="photoFinal")

    class Config:
        populate_by_name = True


class TripResponse(Trip):
    """Trip plus display-only data."""
    photo_urls: Dict[str, str] = Field(default_factory=dict, alias="photoUrls")
    available_actions: List[str] = Field(default_factory=list, alias="availableActions")


class TripActionResponse(BaseModel):
    """Response after any state-changing trip action."""
    trip: TripResponse
    persisted: bool
    notice: Optional[str] = None


class TripListResponse(BaseModel):
    """Schema for trip list."""
    trips: List[TripResponse]
    total: int
