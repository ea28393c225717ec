"""
Notification Database Model.

In-app replacement for the e-mails sent when trips are started and decided.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, JSON, Enum
from sqlalchemy.sql import func
from triplog.app.db.session import Base
import enum


class NotificationType(str, enum.Enum):
    INFO = "INFO"
    TRIP_SUBMITTED = "TRIP_SUBMITTED"
    TRIP_APPROVED = "TRIP_APPROVED"
    TRIP_REJECTED = "TRIP_REJECTED"


class Notification(Base):
    """
    In-App Notification.

    Addressed either to one user (recipient_id) or to every user holding a
    role (recipient_role), so admins are reachable without a user lookup.
    """
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Recipient
    recipient_id = Column(String(64), nullable=True, index=True)
    recipient_role = Column(String(32), nullable=True, index=True)

    # Content
    type = Column(Enum(NotificationType), default=NotificationType.INFO, nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    metadata_payload = Column(JSON, nullable=True)

    # State
    is_read = Column(Boolean, default=False, nullable=False, index=True)
    read_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Notification(id={self.id}, to={self.recipient_id or self.recipient_role}, title='{self.title}')>"
