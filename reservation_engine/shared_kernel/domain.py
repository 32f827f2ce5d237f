"""
Основные доменные типы и утилиты общего ядра.
"""

from datetime import datetime, timezone
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

# Общие типы идентификаторов
EntityId = str


def generate_id() -> str:
    """Генерирует новый строковый UUID."""
    return str(uuid4())


class DomainEvent(BaseModel):
    """Базовый класс для всех доменных событий."""

    model_config = ConfigDict(frozen=True)

    event_id: UUID = Field(default_factory=uuid4)
    occurred_on: datetime = Field(default_factory=lambda: now())


# Общие перечисления
class BookingStatus(str, Enum):
    """Статусы бронирования."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class ResourceType(str, Enum):
    """Типы бронируемых ресурсов."""

    MEETING_ROOM = "meeting_room"
    CONFERENCE_HALL = "conference_hall"
    HOTEL_ROOM = "hotel_room"
    EVENT_TICKET = "event_ticket"
    WORKSPACE = "workspace"
    VEHICLE = "vehicle"


# Общие исключения
class DomainException(Exception):
    """Базовое исключение для доменных ошибок."""

    pass


class NotFoundError(DomainException):
    """Пользователь, ресурс или бронирование не найдены."""

    pass


class ValidationError(DomainException):
    """Некорректные входные данные или нарушение инварианта значения."""

    pass


class ConflictError(DomainException):
    """Пересечение бронирований или недопустимый переход статуса."""

    pass


class InvalidStateError(DomainException):
    """Нарушение машины состояний бронирования.

    Не покидает прикладной слой: сервисы переводят его в ConflictError.
    """

    pass


# Общие утилиты
def now() -> datetime:
    """Возвращает текущие дату и время в UTC."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Приводит datetime к UTC; наивные значения считаются заданными в UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def add_years(value: datetime, years: int) -> datetime:
    """Сдвигает дату на календарные годы (29 февраля -> 28 февраля)."""
    try:
        return value.replace(year=value.year + years)
    except ValueError:
        return value.replace(year=value.year + years, day=28)
