"""
Notification Service.

Handles creation and state management of in-app notifications. A
notification goes to one user or to everyone holding a role.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, or_
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List, Sequence

from triplog.app.models.notification import Notification, NotificationType
from triplog.app.models.enums import UserRole
from triplog.app.models.trip_enums import TripStatus


def _inbox(user_id: str, role: str):
    return or_(Notification.recipient_id == user_id, Notification.recipient_role == role)


class NotificationService:

    @staticmethod
    async def notify_user(
        db: AsyncSession,
        user_id: str,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Notification:
        """Create a single notification."""
        notif = Notification(
            recipient_id=user_id,
            type=type,
            title=title,
            message=message,
            metadata_payload=metadata
        )
        db.add(notif)
        await db.flush()  # Caller commits
        return notif

    @staticmethod
    async def notify_roles(
        db: AsyncSession,
        roles: Sequence[UserRole],
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        metadata: Optional[Dict[str, Any]] = None
    ) -> List[Notification]:
        """One notification per role inbox."""
        notifications = [
            Notification(
                recipient_role=UserRole(role).value,
                type=type,
                title=title,
                message=message,
                metadata_payload=metadata
            )
            for role in roles
        ]
        db.add_all(notifications)
        await db.flush()
        return notifications

    @staticmethod
    async def list_for(
        db: AsyncSession,
        user_id: str,
        role: str,
        unread_only: bool = False,
        limit: int = 50
    ) -> List[Notification]:
        query = select(Notification).where(_inbox(user_id, role))
        if unread_only:
            query = query.where(Notification.is_read == False)  # noqa: E712
        query = query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit)
        result = await db.execute(query)
        return result.scalars().all()

    @staticmethod
    async def mark_read(db: AsyncSession, notification_id: int, user_id: str, role: str) -> bool:
        """Mark a notification as read."""
        stmt = update(Notification).where(
            Notification.id == notification_id,
            _inbox(user_id, role)
        ).values(
            is_read=True,
            read_at=datetime.now(timezone.utc)
        )
        result = await db.execute(stmt)
        return result.rowcount > 0

    @staticmethod
    async def mark_all_read(db: AsyncSession, user_id: str, role: str) -> int:
        """Mark all notifications in the user's inbox as read."""
        stmt = update(Notification).where(
            _inbox(user_id, role),
            Notification.is_read == False  # noqa: E712
        ).values(
            is_read=True,
            read_at=datetime.now(timezone.utc)
        )
        result = await db.execute(stmt)
        return result.rowcount


NO_COMMENT = "Sem comentários."


async def notify_trip_started(db: AsyncSession, trip) -> List[Notification]:
    """Tell every administrator that a driver started a trip."""
    return await NotificationService.notify_roles(
        db,
        roles=[UserRole.ADMIN, UserRole.SUPER_ADMIN],
        title="Nova Solicitação de Viagem",
        message=f"O motorista {trip.driver_name} iniciou uma viagem saindo de {trip.origin}.",
        type=NotificationType.TRIP_SUBMITTED,
        metadata={"trip_id": trip.id}
    )


async def notify_trip_decided(db: AsyncSession, trip) -> Notification:
    """Tell the driver how their trip was decided."""
    approved = trip.status == TripStatus.APPROVED
    return await NotificationService.notify_user(
        db,
        user_id=trip.driver_id,
        title=f"Viagem {trip.status.value}",
        message=(
            f"Sua solicitação de {trip.origin} para {trip.destination} foi {trip.status.value.lower()}.\n"
            f"Comentário do Admin: {trip.admin_comment or NO_COMMENT}"
        ),
        type=NotificationType.TRIP_APPROVED if approved else NotificationType.TRIP_REJECTED,
        metadata={"trip_id": trip.id, "status": trip.status.value}
    )
