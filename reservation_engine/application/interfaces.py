"""
Интерфейсы (порты) движка бронирования.

Прикладной слой работает с хранилищем и шиной событий только через них.
"""

from __future__ import annotations

from typing import (
    Any,
    AsyncContextManager,
    Awaitable,
    Callable,
    List,
    Optional,
    Protocol,
    Type,
    TypeVar,
)

from reservation_engine.domain import (
    Booking,
    BookingHistory,
    BookingId,
    Interval,
    Resource,
    User,
)
from reservation_engine.shared_kernel import (
    BookingStatus,
    DomainEvent,
    EntityId,
    ResourceType,
)

T_Event = TypeVar("T_Event", bound=DomainEvent)


class ILogger(Protocol):
    """Интерфейс для логгера."""

    def info(self, message: str, **kwargs: Any) -> None: ...
    def error(self, message: str, **kwargs: Any) -> None: ...
    def warning(self, message: str, **kwargs: Any) -> None: ...
    def debug(self, message: str, **kwargs: Any) -> None: ...


class IEventBus(Protocol):
    """Интерфейс для шины событий."""

    async def publish(self, event: DomainEvent) -> None: ...
    def subscribe(
        self, event_type: Type[T_Event], handler: Callable[[T_Event], Awaitable[None]]
    ) -> None: ...


class IBookingRepository(Protocol):
    """Интерфейс репозитория для бронирований."""

    async def save(self, booking: Booking) -> Booking: ...
    async def find_by_id(self, booking_id: BookingId) -> Optional[Booking]: ...
    async def find_by_user_id(self, user_id: EntityId) -> List[Booking]: ...
    async def find_by_resource_id(self, resource_id: EntityId) -> List[Booking]: ...
    async def find_overlapping_bookings(
        self, resource_id: EntityId, time_slot: Interval
    ) -> List[Booking]: ...
    async def find_bookings_by_status(self, status: BookingStatus) -> List[Booking]: ...
    async def find_active_bookings(self) -> List[Booking]: ...
    async def find_all(self) -> List[Booking]: ...
    async def delete(self, booking_id: BookingId) -> None: ...


class IResourceRepository(Protocol):
    """Интерфейс репозитория для ресурсов."""

    async def save(self, resource: Resource) -> Resource: ...
    async def find_by_id(self, resource_id: EntityId) -> Optional[Resource]: ...
    async def find_by_type(self, resource_type: ResourceType) -> List[Resource]: ...
    async def find_available(self, time_slot: Interval) -> List[Resource]: ...
    async def find_all(self) -> List[Resource]: ...
    async def find_active(self) -> List[Resource]: ...
    async def delete(self, resource_id: EntityId) -> None: ...


class IUserRepository(Protocol):
    """Интерфейс репозитория для пользователей."""

    async def save(self, user: User) -> User: ...
    async def find_by_id(self, user_id: EntityId) -> Optional[User]: ...
    async def find_by_email(self, email: str) -> Optional[User]: ...


class IBookingHistoryRepository(Protocol):
    """Интерфейс журнала истории бронирований (только добавление)."""

    async def save(self, history: BookingHistory) -> BookingHistory: ...
    async def find_by_booking_id(self, booking_id: EntityId) -> List[BookingHistory]: ...
    async def find_by_user_id(self, user_id: EntityId) -> List[BookingHistory]: ...
    async def find_by_resource_id(
        self, resource_id: EntityId
    ) -> List[BookingHistory]: ...
    async def find_all(self) -> List[BookingHistory]: ...


class IBookingUnitOfWork(Protocol):
    """Интерфейс Unit of Work для движка бронирования."""

    @property
    def bookings(self) -> IBookingRepository: ...
    @property
    def resources(self) -> IResourceRepository: ...
    @property
    def users(self) -> IUserRepository: ...
    @property
    def history(self) -> IBookingHistoryRepository: ...

    def resource_lock(self, resource_id: EntityId) -> AsyncContextManager[None]: ...

    async def __aenter__(self) -> IBookingUnitOfWork: ...
    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None: ...
    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
