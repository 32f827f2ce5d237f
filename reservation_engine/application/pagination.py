"""
Постраничная выдача и сортировка результатов запросов.

Поля сортировки ограничены перечислениями; каждому значению
соответствует типизированная функция ключа.
"""

import math
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, Field

from reservation_engine.domain import Booking, Resource
from reservation_engine.shared_kernel import ValidationError

T = TypeVar("T")
K = TypeVar("K", bound=Enum)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class BookingSortKey(str, Enum):
    CREATED_AT = "created_at"
    START_TIME = "start_time"
    END_TIME = "end_time"
    STATUS = "status"


class ResourceSortKey(str, Enum):
    NAME = "name"
    TYPE = "type"
    CAPACITY = "capacity"
    PRICE_PER_HOUR = "price_per_hour"
    CREATED_AT = "created_at"


BOOKING_SORT_KEYS: Dict[BookingSortKey, Callable[[Booking], Any]] = {
    BookingSortKey.CREATED_AT: lambda b: b.created_at,
    BookingSortKey.START_TIME: lambda b: b.start_time,
    BookingSortKey.END_TIME: lambda b: b.end_time,
    BookingSortKey.STATUS: lambda b: b.status.value,
}

RESOURCE_SORT_KEYS: Dict[ResourceSortKey, Callable[[Resource], Any]] = {
    ResourceSortKey.NAME: lambda r: r.name,
    ResourceSortKey.TYPE: lambda r: r.type.value,
    ResourceSortKey.CAPACITY: lambda r: r.capacity,
    # Ресурсы без цены всегда в конце при сортировке по возрастанию
    ResourceSortKey.PRICE_PER_HOUR: lambda r: (
        r.price_per_hour is None,
        r.price_per_hour if r.price_per_hour is not None else Decimal(0),
    ),
    ResourceSortKey.CREATED_AT: lambda r: r.created_at,
}


class PaginationParams(BaseModel):
    """Параметры страницы, переданные вызывающей стороной."""

    page: int = Field(1, ge=1)
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    sort_by: Optional[str] = None
    sort_order: SortOrder = SortOrder.DESC


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class PaginatedResponse(BaseModel, Generic[T]):
    data: List[T]
    pagination: PaginationMeta


def create_pagination_meta(page: int, limit: int, total: int) -> PaginationMeta:
    total_pages = math.ceil(total / limit)
    return PaginationMeta(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )


def resolve_sort_key(key_enum: Type[K], value: Optional[str], default: K) -> K:
    """Находит ключ сортировки по имени поля; неизвестное имя - ошибка."""
    if value is None:
        return default
    try:
        return key_enum(value)
    except ValueError:
        allowed = ", ".join(member.value for member in key_enum)
        raise ValidationError(
            f"Unsupported sort field '{value}'. Allowed: {allowed}"
        ) from None


def paginate(
    items: List[T],
    params: PaginationParams,
    key_functions: Dict[K, Callable[[T], Any]],
    default_key: K,
) -> PaginatedResponse[T]:
    """Сортирует и нарезает уже отфильтрованную коллекцию."""
    sort_key = resolve_sort_key(type(default_key), params.sort_by, default_key)
    ordered = sorted(
        items,
        key=key_functions[sort_key],
        reverse=params.sort_order == SortOrder.DESC,
    )
    skip = (params.page - 1) * params.limit
    return PaginatedResponse[Any](
        data=ordered[skip : skip + params.limit],
        pagination=create_pagination_meta(params.page, params.limit, len(items)),
    )
