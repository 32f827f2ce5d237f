"""
Единица работы для хранилища в памяти.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

from reservation_engine.application import interfaces as ports
from reservation_engine.shared_kernel import EntityId

from .logging_adapter import LoggingAdapter
from .repositories import (
    InMemoryBookingHistoryRepository,
    InMemoryBookingRepository,
    InMemoryResourceRepository,
    InMemoryUserRepository,
)


class BookingUnitOfWork(ports.IBookingUnitOfWork):
    """Единица работы движка бронирования.

    Проверка конфликтов и вставка бронирования должны выполняться под
    resource_lock(): блокировка на идентификатор ресурса делает пару
    "прочитать пересечения - записать бронирование" атомарной относительно
    других запросов к тому же ресурсу. Запросы к разным ресурсам друг
    друга не ждут.
    """

    def __init__(
        self,
        bookings_repo: Optional[InMemoryBookingRepository] = None,
        resources_repo: Optional[ports.IResourceRepository] = None,
        users_repo: Optional[ports.IUserRepository] = None,
        history_repo: Optional[ports.IBookingHistoryRepository] = None,
        logger: Optional[ports.ILogger] = None,
    ):
        self._bookings = bookings_repo or InMemoryBookingRepository()
        self._resources = resources_repo or InMemoryResourceRepository(self._bookings)
        self._users = users_repo or InMemoryUserRepository()
        self._history = history_repo or InMemoryBookingHistoryRepository()
        self._logger = logger or LoggingAdapter(__name__)
        self._locks: Dict[EntityId, asyncio.Lock] = {}
        self._lock_holders: Dict[EntityId, int] = {}

    @property
    def bookings(self) -> ports.IBookingRepository:
        return self._bookings

    @property
    def resources(self) -> ports.IResourceRepository:
        return self._resources

    @property
    def users(self) -> ports.IUserRepository:
        return self._users

    @property
    def history(self) -> ports.IBookingHistoryRepository:
        return self._history

    @asynccontextmanager
    async def resource_lock(self, resource_id: EntityId) -> AsyncIterator[None]:
        """Сериализует изменения бронирований одного ресурса.

        Блокировка живет, пока ее держат или ждут; последний вышедший
        удаляет ее из словаря.
        """
        lock = self._locks.setdefault(resource_id, asyncio.Lock())
        self._lock_holders[resource_id] = self._lock_holders.get(resource_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_holders[resource_id] -= 1
            if self._lock_holders[resource_id] == 0:
                del self._lock_holders[resource_id]
                del self._locks[resource_id]

    async def commit(self) -> None:
        """Фиксирует все изменения."""
        # Хранилище в памяти пишет сразу; у настоящей БД здесь commit транзакции
        self._logger.debug("BookingUnitOfWork committed")

    async def rollback(self) -> None:
        """Откатывает все изменения."""
        self._logger.warning("BookingUnitOfWork rolled back")

    async def __aenter__(self) -> "BookingUnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is None:
            await self.commit()
        else:
            await self.rollback()
