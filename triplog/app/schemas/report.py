"""
Report schemas.

Flat rows for tabular export plus the aggregate totals.
"""

from pydantic import BaseModel, Field
from typing import List, Optional


class ReportRow(BaseModel):
    """One approved trip projected for export."""
    trip_id: str = Field(..., alias="tripId")
    date: Optional[str]
    end_date: Optional[str] = Field(None, alias="endDate")
    driver: str
    plate: Optional[str]
    origin: Optional[str]
    destination: Optional[str]
    start_time: Optional[str] = Field(None, alias="startTime")
    factory_name: Optional[str] = Field(None, alias="factoryName")
    factory_arrival_time: Optional[str] = Field(None, alias="factoryArrivalTime")
    factory_departure_time: Optional[str] = Field(None, alias="factoryDepartureTime")
    end_time: Optional[str] = Field(None, alias="endTime")
    km_initial: Optional[float] = Field(None, alias="kmInitial")
    km_final: Optional[float] = Field(None, alias="kmFinal")
    distance_km: float = Field(..., alias="distanceKm")
    numero_dt: Optional[str]
    valor_comissao: Optional[float]
    status: str
    comment: Optional[str]

    class Config:
        populate_by_name = True


class ReportFilters(BaseModel):
    """Filters applied to a report."""
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    vehicle_plate: Optional[str] = None


class TripReport(BaseModel):
    """Approved trips report."""
    filters: ReportFilters
    rows: List[ReportRow]
    trip_count: int
    total_distance_km: float
