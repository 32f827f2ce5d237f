"""
Запись журнала переходов статусов бронирования.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from reservation_engine.shared_kernel import BookingStatus, EntityId, generate_id, now


class BookingHistory(BaseModel):
    """Неизменяемая запись о переходе статуса.

    Создается ровно один раз на каждый переход и никогда не изменяется.
    previous_status равен None только у записи о создании бронирования.
    """

    model_config = ConfigDict(frozen=True)

    id: EntityId = Field(default_factory=generate_id)
    booking_id: EntityId
    user_id: EntityId
    resource_id: EntityId
    previous_status: Optional[BookingStatus] = None
    new_status: BookingStatus
    reason: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=now)

    @property
    def is_creation(self) -> bool:
        return self.previous_status is None
