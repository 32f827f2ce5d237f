"""
Сущность 'Ресурс' и расчет доступности с учетом вместимости.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Protocol

from pydantic import BaseModel, Field

from reservation_engine.shared_kernel import EntityId, ResourceType, generate_id, now

from .booking import Booking


class Interval(Protocol):
    """Все, у чего есть начало и конец: TimeSlot, Booking."""

    @property
    def start_time(self) -> datetime: ...

    @property
    def end_time(self) -> datetime: ...


class Resource(BaseModel):
    """Бронируемый ресурс: переговорная, рабочее место, транспорт и т.д.

    Вместимость ограничивает число одновременно активных пересекающихся
    бронирований. Места не распределяются: каждое активное бронирование
    занимает ровно одну единицу вместимости.
    """

    id: EntityId = Field(default_factory=generate_id)
    name: str
    type: ResourceType
    capacity: int = Field(1, ge=0)
    is_active: bool = True
    description: Optional[str] = None
    price_per_hour: Optional[Decimal] = Field(None, ge=0)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)
    # Снимок бронирований, загруженный репозиторием; ресурс их не изменяет
    bookings: List[Booking] = Field(default_factory=list, exclude=True)

    def _count_overlapping_active(self, slot: Interval) -> int:
        return sum(
            1
            for booking in self.bookings
            if booking.is_active()
            and booking.start_time < slot.end_time
            and booking.end_time > slot.start_time
        )

    def is_available(self, slot: Interval) -> bool:
        """Проверяет, остается ли свободная вместимость на интервале."""
        if not self.is_active:
            return False
        return self._count_overlapping_active(slot) < self.capacity

    def get_available_capacity(self, slot: Interval) -> int:
        """Оставшаяся вместимость на интервале, не меньше нуля."""
        if not self.is_active:
            return 0
        return max(0, self.capacity - self._count_overlapping_active(slot))
