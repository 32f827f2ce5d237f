"""
Сущность 'Бронирование' и ее машина состояний.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from reservation_engine.shared_kernel import (
    BookingStatus,
    EntityId,
    InvalidStateError,
    as_utc,
    now,
)

from .value_objects import BookingId, TimeSlot

ACTIVE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


class Booking(BaseModel):
    """Бронирование ресурса пользователем на интервал времени.

    Хранит только границы интервала, а не сам TimeSlot; при загрузке
    из хранилища интервал повторно не проверяется.
    """

    id: EntityId
    user_id: EntityId
    resource_id: EntityId
    start_time: datetime
    end_time: datetime
    status: BookingStatus = BookingStatus.PENDING
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    @field_validator("start_time", "end_time", "created_at", "updated_at")
    @classmethod
    def _normalize_timezone(cls, v: datetime) -> datetime:
        return as_utc(v)

    @classmethod
    def create(
        cls,
        booking_id: BookingId,
        user_id: EntityId,
        resource_id: EntityId,
        time_slot: TimeSlot,
        notes: Optional[str] = None,
    ) -> Booking:
        """Создает новое бронирование в статусе PENDING."""
        return cls(
            id=booking_id.value,
            user_id=user_id,
            resource_id=resource_id,
            start_time=time_slot.start_time,
            end_time=time_slot.end_time,
            notes=notes,
        )

    @property
    def booking_id(self) -> BookingId:
        return BookingId(self.id)

    def confirm(self) -> None:
        """Подтверждает бронирование."""
        if self.status != BookingStatus.PENDING:
            raise InvalidStateError("Only pending bookings can be confirmed")
        self.status = BookingStatus.CONFIRMED

    def cancel(self) -> None:
        """Отменяет бронирование из статусов PENDING и CONFIRMED."""
        if self.status == BookingStatus.CANCELLED:
            raise InvalidStateError("Booking is already cancelled")
        if self.status == BookingStatus.COMPLETED:
            raise InvalidStateError("Cannot cancel a completed booking")
        self.status = BookingStatus.CANCELLED

    def is_active(self) -> bool:
        """Бронирование занимает единицу вместимости ресурса."""
        return self.status in ACTIVE_STATUSES

    def is_overlapping(self, other: Booking) -> bool:
        """Проверяет пересечение с другим бронированием.

        Бронирования пересекаются, если они относятся к одному ресурсу,
        это разные бронирования, ни одно не отменено и их интервалы
        пересекаются. Бронирование, начинающееся ровно в момент окончания
        другого, с ним не пересекается.
        """
        return (
            self.resource_id == other.resource_id
            and self.id != other.id
            and self.status != BookingStatus.CANCELLED
            and other.status != BookingStatus.CANCELLED
            and self.start_time < other.end_time
            and self.end_time > other.start_time
        )
