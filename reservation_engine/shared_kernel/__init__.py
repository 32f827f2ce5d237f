"""
Общее ядро (Shared Kernel) системы бронирования ресурсов.

Содержит общие типы данных, исключения и утилиты, используемые всеми слоями.
"""

from .domain import (
    # Перечисления
    BookingStatus,
    ConflictError,
    DomainEvent,
    # Исключения
    DomainException,
    # Базовые типы
    EntityId,
    InvalidStateError,
    NotFoundError,
    ResourceType,
    ValidationError,
    # Утилиты
    add_years,
    as_utc,
    generate_id,
    now,
)

__all__ = [
    # Базовые типы
    "EntityId",
    "generate_id",
    "DomainEvent",
    # Перечисления
    "BookingStatus",
    "ResourceType",
    # Исключения
    "DomainException",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "InvalidStateError",
    # Утилиты
    "now",
    "as_utc",
    "add_years",
]
