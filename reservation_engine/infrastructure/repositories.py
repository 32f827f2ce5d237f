"""
Реализации репозиториев в памяти.

Репозитории хранят собственные копии сущностей и возвращают копии:
загруженный объект - снимок на момент чтения, изменения попадают
в хранилище только через save().
"""

import asyncio
from typing import Dict, List, Optional

from reservation_engine.application import interfaces as ports
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
    EntityId,
    ResourceType,
    now,
)


class InMemoryBookingRepository(ports.IBookingRepository):
    """Реализация репозитория бронирований в памяти.

    latency имитирует задержку хранилища: чтение и запись уступают
    управление циклу событий, как при обращении к настоящей БД.
    """

    def __init__(self, latency: float = 0.0) -> None:
        self._bookings: Dict[EntityId, Booking] = {}
        self._latency = latency

    async def save(self, booking: Booking) -> Booking:
        """Сохраняет бронирование и обновляет отметку updated_at."""
        await asyncio.sleep(self._latency)
        stored = booking.model_copy(deep=True)
        stored.updated_at = now()
        self._bookings[stored.id] = stored
        return stored.model_copy()

    async def find_by_id(self, booking_id: BookingId) -> Optional[Booking]:
        booking = self._bookings.get(booking_id.value)
        return booking.model_copy() if booking is not None else None

    async def find_by_user_id(self, user_id: EntityId) -> List[Booking]:
        bookings = [b for b in self._bookings.values() if b.user_id == user_id]
        return self._copies(sorted(bookings, key=lambda b: b.created_at, reverse=True))

    async def find_by_resource_id(self, resource_id: EntityId) -> List[Booking]:
        return self.snapshot_for_resource(resource_id)

    async def find_overlapping_bookings(
        self, resource_id: EntityId, time_slot: Interval
    ) -> List[Booking]:
        """Неотмененные бронирования ресурса, пересекающие интервал."""
        await asyncio.sleep(self._latency)
        return self._copies(
            b
            for b in self._bookings.values()
            if b.resource_id == resource_id
            and b.status != BookingStatus.CANCELLED
            and b.start_time < time_slot.end_time
            and b.end_time > time_slot.start_time
        )

    async def find_bookings_by_status(self, status: BookingStatus) -> List[Booking]:
        return self._copies(b for b in self._bookings.values() if b.status == status)

    async def find_active_bookings(self) -> List[Booking]:
        return self._copies(b for b in self._bookings.values() if b.is_active())

    async def find_all(self) -> List[Booking]:
        return self._copies(self._bookings.values())

    async def delete(self, booking_id: BookingId) -> None:
        self._bookings.pop(booking_id.value, None)

    def snapshot_for_resource(self, resource_id: EntityId) -> List[Booking]:
        """Бронирования ресурса по времени начала; используется при загрузке ресурса."""
        bookings = [b for b in self._bookings.values() if b.resource_id == resource_id]
        return self._copies(sorted(bookings, key=lambda b: b.start_time))

    @staticmethod
    def _copies(bookings) -> List[Booking]:
        return [b.model_copy() for b in bookings]


class InMemoryResourceRepository(ports.IResourceRepository):
    """Реализация репозитория ресурсов в памяти.

    При чтении к ресурсу подгружается снимок его бронирований.
    """

    def __init__(self, bookings: InMemoryBookingRepository):
        self._resources: Dict[EntityId, Resource] = {}
        self._bookings = bookings

    async def save(self, resource: Resource) -> Resource:
        stored = resource.model_copy(
            deep=True, update={"bookings": [], "updated_at": now()}
        )
        self._resources[stored.id] = stored
        return self._load(stored)

    async def find_by_id(self, resource_id: EntityId) -> Optional[Resource]:
        resource = self._resources.get(resource_id)
        return self._load(resource) if resource is not None else None

    async def find_by_type(self, resource_type: ResourceType) -> List[Resource]:
        """Активные ресурсы указанного типа, упорядоченные по названию."""
        return [
            resource
            for resource in await self.find_active()
            if resource.type == resource_type
        ]

    async def find_available(self, time_slot: Interval) -> List[Resource]:
        return [
            resource
            for resource in await self.find_active()
            if resource.is_available(time_slot)
        ]

    async def find_all(self) -> List[Resource]:
        return [self._load(r) for r in sorted(self._resources.values(), key=lambda r: r.name)]

    async def find_active(self) -> List[Resource]:
        return [r for r in await self.find_all() if r.is_active]

    async def delete(self, resource_id: EntityId) -> None:
        self._resources.pop(resource_id, None)

    def _load(self, resource: Resource) -> Resource:
        return resource.model_copy(
            deep=True,
            update={"bookings": self._bookings.snapshot_for_resource(resource.id)},
        )


class InMemoryUserRepository(ports.IUserRepository):
    """Реализация репозитория пользователей в памяти."""

    def __init__(self) -> None:
        self._users: Dict[EntityId, User] = {}
        self._email_index: Dict[str, EntityId] = {}

    async def save(self, user: User) -> User:
        email = user.email.lower()
        owner = self._email_index.get(email)
        if owner is not None and owner != user.id:
            raise ValueError(f"User with email {user.email} already exists")

        previous = self._users.get(user.id)
        if previous is not None:
            self._email_index.pop(previous.email.lower(), None)

        stored = user.model_copy(update={"updated_at": now()})
        self._users[stored.id] = stored
        self._email_index[email] = stored.id
        return stored.model_copy()

    async def find_by_id(self, user_id: EntityId) -> Optional[User]:
        user = self._users.get(user_id)
        return user.model_copy() if user is not None else None

    async def find_by_email(self, email: str) -> Optional[User]:
        user_id = self._email_index.get(email.lower())
        return await self.find_by_id(user_id) if user_id is not None else None


class InMemoryBookingHistoryRepository(ports.IBookingHistoryRepository):
    """Журнал истории в памяти: записи только добавляются."""

    def __init__(self) -> None:
        self._records: List[BookingHistory] = []
        self._ids: set = set()

    async def save(self, history: BookingHistory) -> BookingHistory:
        if history.id in self._ids:
            raise ValueError(f"History record with id {history.id} already exists")
        self._ids.add(history.id)
        self._records.append(history)
        return history

    async def find_by_booking_id(self, booking_id: EntityId) -> List[BookingHistory]:
        return [r for r in self._records if r.booking_id == booking_id]

    async def find_by_user_id(self, user_id: EntityId) -> List[BookingHistory]:
        return [r for r in self._records if r.user_id == user_id]

    async def find_by_resource_id(self, resource_id: EntityId) -> List[BookingHistory]:
        return [r for r in self._records if r.resource_id == resource_id]

    async def find_all(self) -> List[BookingHistory]:
        return list(self._records)
