from datetime import datetime
from typing import Optional

from reservation_engine.shared_kernel import BookingStatus, DomainEvent, EntityId


class BookingCreated(DomainEvent):
    """Событие создания бронирования."""

    booking_id: EntityId
    user_id: EntityId
    resource_id: EntityId
    start_time: datetime
    end_time: datetime
    created_at: datetime


class BookingConfirmed(DomainEvent):
    """Событие подтверждения бронирования."""

    booking_id: EntityId
    user_id: EntityId
    resource_id: EntityId
    confirmed_at: datetime
    previous_status: BookingStatus = BookingStatus.PENDING


class BookingCancelled(DomainEvent):
    """Событие отмены бронирования."""

    booking_id: EntityId
    user_id: EntityId
    resource_id: EntityId
    cancelled_at: datetime
    reason: Optional[str] = None
    previous_status: BookingStatus = BookingStatus.PENDING
