"""
Команды и запросы прикладного слоя.

Принимают пользовательский ввод (строковые идентификаторы, ISO-8601 даты,
свободный текст) и приводят его к типам домена.
"""

from datetime import datetime
from typing import Any, Optional, Type, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from reservation_engine.shared_kernel import BookingStatus, ResourceType, ValidationError

from .pagination import PaginationParams

T_Command = TypeVar("T_Command", bound=BaseModel)


class _Command(BaseModel):
    # Строки не нормализуются: идентификаторы, заметки и причины
    # передаются дальше в том виде, в каком их прислал вызывающий
    model_config = ConfigDict(frozen=True)


class CreateBookingCommand(_Command):
    """Запрос на создание бронирования."""

    user_id: str = Field(..., min_length=1)
    resource_id: str = Field(..., min_length=1)
    start_time: datetime
    end_time: datetime
    notes: Optional[str] = None


class ConfirmBookingCommand(_Command):
    """Запрос на подтверждение бронирования."""

    booking_id: str = Field(..., min_length=1)


class CancelBookingCommand(_Command):
    """Запрос на отмену бронирования."""

    booking_id: str = Field(..., min_length=1)
    reason: Optional[str] = None


class GetBookingQuery(_Command):
    booking_id: str = Field(..., min_length=1)


class GetUserBookingsQuery(_Command):
    user_id: str = Field(..., min_length=1)
    status: Optional[BookingStatus] = None
    pagination: Optional[PaginationParams] = None


class GetAvailableResourcesQuery(_Command):
    start_time: datetime
    end_time: datetime
    resource_type: Optional[ResourceType] = None
    pagination: Optional[PaginationParams] = None


class RegisterUserCommand(_Command):
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone: Optional[str] = None


def parse_command(command_class: Type[T_Command], **data: Any) -> T_Command:
    """Строит команду, переводя ошибки pydantic в доменную ValidationError."""
    try:
        return command_class(**data)
    except pydantic.ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        raise ValidationError(f"Invalid {command_class.__name__}: {details}") from exc
