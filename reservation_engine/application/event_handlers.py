"""
Обработчики событий жизненного цикла, ведущие журнал истории бронирований.
"""

from reservation_engine.domain import (
    BookingCancelled,
    BookingConfirmed,
    BookingCreated,
    BookingHistory,
)
from reservation_engine.shared_kernel import BookingStatus

from .interfaces import IBookingHistoryRepository

DEFAULT_CANCELLATION_REASON = "Booking cancelled"


async def on_booking_created(
    event: BookingCreated, history: "IBookingHistoryRepository"
) -> None:
    """Записывает создание бронирования (предыдущего статуса нет)."""
    await history.save(
        BookingHistory(
            booking_id=event.booking_id,
            user_id=event.user_id,
            resource_id=event.resource_id,
            previous_status=None,
            new_status=BookingStatus.PENDING,
            reason="Booking created",
            metadata={
                "start_time": event.start_time.isoformat(),
                "end_time": event.end_time.isoformat(),
                "created_at": event.created_at.isoformat(),
            },
        )
    )


async def on_booking_confirmed(
    event: BookingConfirmed, history: "IBookingHistoryRepository"
) -> None:
    """Записывает подтверждение бронирования."""
    await history.save(
        BookingHistory(
            booking_id=event.booking_id,
            user_id=event.user_id,
            resource_id=event.resource_id,
            previous_status=event.previous_status,
            new_status=BookingStatus.CONFIRMED,
            reason="Booking confirmed",
            metadata={"confirmed_at": event.confirmed_at.isoformat()},
        )
    )


async def on_booking_cancelled(
    event: BookingCancelled, history: "IBookingHistoryRepository"
) -> None:
    """Записывает отмену; пустая причина заменяется причиной по умолчанию."""
    await history.save(
        BookingHistory(
            booking_id=event.booking_id,
            user_id=event.user_id,
            resource_id=event.resource_id,
            previous_status=event.previous_status,
            new_status=BookingStatus.CANCELLED,
            reason=event.reason or DEFAULT_CANCELLATION_REASON,
            metadata={"cancelled_at": event.cancelled_at.isoformat()},
        )
    )
