"""
Audit logging service for authentication events and trip actions.

Provides centralized logging for compliance and security monitoring.
"""

from typing import Optional, Dict, Any, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from triplog.app.models.audit_log import AuditLog


# Audit event constants
class AuditAction:
    """Standardized audit action constants."""
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILED = "LOGIN_FAILED"
    LOGOUT = "LOGOUT"
    USER_REGISTERED = "USER_REGISTERED"

    # Driver lifecycle
    TRIP_STARTED = "TRIP_STARTED"
    FACTORY_ARRIVED = "FACTORY_ARRIVED"
    FACTORY_DEPARTED = "FACTORY_DEPARTED"
    TRIP_FINISHED = "TRIP_FINISHED"

    # Review
    TRIP_APPROVED = "TRIP_APPROVED"
    TRIP_REJECTED = "TRIP_REJECTED"
    TRIP_AMENDED = "TRIP_AMENDED"


async def log_event(
    db: AsyncSession,
    action: str,
    actor_id: Optional[str] = None,
    actor_name: Optional[str] = None,
    trip_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None
) -> AuditLog:
    """
    Log an event to the audit log.

    Args:
        db: Database session
        action: Action being performed (use AuditAction constants)
        actor_id: ID of user performing the action
        actor_name: Display name of actor
        trip_id: Trip acted upon (if applicable)
        metadata: Additional context as JSON
        ip_address: IP address of the request

    Returns:
        Created AuditLog instance
    """
    audit_log = AuditLog(
        actor_id=actor_id,
        actor_name=actor_name,
        action=action,
        trip_id=trip_id,
        meta_data=metadata,
        ip_address=ip_address
    )

    db.add(audit_log)
    await db.commit()
    await db.refresh(audit_log)

    return audit_log


async def log_auth_event(
    db: AsyncSession,
    action: str,
    user_id: Optional[str],
    name: Optional[str] = None,
    ip_address: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """Log an authentication event (login success/failure, logout, registration)."""
    return await log_event(
        db=db,
        action=action,
        actor_id=user_id,
        actor_name=name,
        ip_address=ip_address,
        metadata=metadata
    )


async def get_trip_audit_trail(
    db: AsyncSession,
    trip_id: str,
    limit: int = 100
) -> List[AuditLog]:
    """
    Every recorded action on one trip, most recent first.
    """
    query = select(AuditLog).where(
        AuditLog.trip_id == trip_id
    ).order_by(desc(AuditLog.timestamp), desc(AuditLog.id)).limit(limit)

    result = await db.execute(query)
    return result.scalars().all()
