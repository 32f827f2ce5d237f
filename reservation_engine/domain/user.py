from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from reservation_engine.shared_kernel import EntityId, generate_id, now


class User(BaseModel):
    """Пользователь, от имени которого создаются бронирования."""

    id: EntityId = Field(default_factory=generate_id)
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
