"""
Trip review schemas.

Schemas for administrators to approve, reject and amend trips.
"""

from pydantic import BaseModel, Field
from typing import Optional, Union

from triplog.app.models.trip_enums import Decision


class TripDecisionRequest(BaseModel):
    """Schema for deciding a pending trip. Audit fields are required to approve."""
    decision: Decision
    comment: Optional[str] = Field(None, max_length=1000)
    numero_dt: Optional[Union[str, int]] = None
    valor_comissao: Optional[Union[float, str]] = None


class TripAmendRequest(BaseModel):
    """Schema for correcting the audit fields of an approved trip."""
    numero_dt: Optional[Union[str, int]] = None
    valor_comissao: Optional[Union[float, str]] = None
    comment: Optional[str] = Field(None, max_length=1000)
