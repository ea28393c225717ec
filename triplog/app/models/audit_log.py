"""
Audit Log Database Model.

Tracks logins and every trip lifecycle action for compliance review.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from triplog.app.db.session import Base


class AuditLog(Base):
    """
    Audit log model.

    Events logged:
    - LOGIN_SUCCESS / LOGIN_FAILED / LOGOUT / USER_REGISTERED
    - TRIP_STARTED / FACTORY_ARRIVED / FACTORY_DEPARTED / TRIP_FINISHED
    - TRIP_APPROVED / TRIP_REJECTED / TRIP_AMENDED
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Who performed the action (None for failed logins of unknown users)
    actor_id = Column(String(64), index=True, nullable=True)
    actor_name = Column(String(120), nullable=True)

    # What action was performed
    action = Column(String(100), nullable=False, index=True)

    # Trip acted upon, if any
    trip_id = Column(String(64), index=True, nullable=True)

    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)

    # IP address for login tracking
    ip_address = Column(String(50), nullable=True)

    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', actor={self.actor_id}, trip={self.trip_id})>"
