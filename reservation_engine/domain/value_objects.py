"""
Объекты-значения контекста бронирования: интервал времени и идентификатор бронирования.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from reservation_engine.shared_kernel import ValidationError, add_years, as_utc, generate_id, now

MAX_ADVANCE_YEARS = 1


@dataclass(frozen=True)
class TimeSlot:
    """Интервал времени, на который запрашивается ресурс.

    Проверки выполняются при создании строго по порядку, первая
    нарушенная определяет сообщение об ошибке:

    1. начало раньше окончания;
    2. начало не в прошлом;
    3. начало не позже, чем через год от текущего момента.
    """

    start_time: datetime
    end_time: datetime

    def __post_init__(self):
        object.__setattr__(self, "start_time", as_utc(self.start_time))
        object.__setattr__(self, "end_time", as_utc(self.end_time))

        if self.start_time >= self.end_time:
            raise ValidationError("Start time must be before end time")

        current = now()
        if self.start_time < current:
            raise ValidationError("Cannot book in the past")

        if self.start_time > add_years(current, MAX_ADVANCE_YEARS):
            raise ValidationError("Cannot book more than 1 year in advance")

    def duration_in_hours(self) -> float:
        return (self.end_time - self.start_time) / timedelta(hours=1)

    def duration_in_minutes(self) -> float:
        return (self.end_time - self.start_time) / timedelta(minutes=1)

    def overlaps(self, other: TimeSlot) -> bool:
        """Интервалы пересекаются; касание границами пересечением не считается."""
        return self.start_time < other.end_time and self.end_time > other.start_time

    def contains(self, instant: datetime) -> bool:
        """Момент попадает в интервал, обе границы включительно."""
        instant = as_utc(instant)
        return self.start_time <= instant <= self.end_time

    @classmethod
    def create(cls, start_time: datetime, end_time: datetime) -> TimeSlot:
        return cls(start_time=start_time, end_time=end_time)

    @classmethod
    def create_from_duration(cls, start_time: datetime, hours: float) -> TimeSlot:
        return cls(start_time=start_time, end_time=start_time + timedelta(hours=hours))


@dataclass(frozen=True)
class BookingId:
    """Идентификатор бронирования.

    Новый идентификатор выдает только generate(); переданное значение
    сохраняется как есть, пустая строка считается ошибкой.
    """

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value:
            raise ValidationError("Booking ID must be a non-empty string")

    @classmethod
    def generate(cls) -> BookingId:
        return cls(generate_id())

    @classmethod
    def from_string(cls, value: str) -> BookingId:
        return cls(value)

    def __str__(self) -> str:
        return self.value
