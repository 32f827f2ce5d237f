"""
Общие фикстуры тестов движка бронирования.
"""

from functools import partial

import pytest

from reservation_engine.application.event_handlers import (
    on_booking_cancelled,
    on_booking_confirmed,
    on_booking_created,
)
from reservation_engine.application.services import (
    BookingApplicationService,
    BookingHistoryService,
    ResourceApplicationService,
    UserApplicationService,
)
from reservation_engine.domain import (
    BookingCancelled,
    BookingConfirmed,
    BookingCreated,
    Resource,
    User,
)
from reservation_engine.infrastructure.event_bus import InMemoryEventBus
from reservation_engine.infrastructure.logging_adapter import LoggingAdapter
from reservation_engine.infrastructure.unit_of_work import BookingUnitOfWork
from reservation_engine.shared_kernel import ResourceType


@pytest.fixture
def uow() -> BookingUnitOfWork:
    return BookingUnitOfWork()


@pytest.fixture
def logger() -> LoggingAdapter:
    return LoggingAdapter("reservation_engine.tests")


@pytest.fixture
def event_bus(uow: BookingUnitOfWork) -> InMemoryEventBus:
    bus = InMemoryEventBus()
    bus.subscribe(BookingCreated, partial(on_booking_created, history=uow.history))
    bus.subscribe(BookingConfirmed, partial(on_booking_confirmed, history=uow.history))
    bus.subscribe(BookingCancelled, partial(on_booking_cancelled, history=uow.history))
    return bus


@pytest.fixture
def booking_service(uow, event_bus, logger) -> BookingApplicationService:
    return BookingApplicationService(uow, event_bus, logger)


@pytest.fixture
def resource_service(uow, logger) -> ResourceApplicationService:
    return ResourceApplicationService(uow, logger)


@pytest.fixture
def user_service(uow, logger) -> UserApplicationService:
    return UserApplicationService(uow, logger)


@pytest.fixture
def history_service(uow) -> BookingHistoryService:
    return BookingHistoryService(uow)


@pytest.fixture
async def user(uow) -> User:
    return await uow.users.save(
        User(email="john.doe@example.com", first_name="John", last_name="Doe")
    )


@pytest.fixture
async def other_user(uow) -> User:
    return await uow.users.save(
        User(email="jane.smith@example.com", first_name="Jane", last_name="Smith")
    )


@pytest.fixture
def make_resource(uow):
    """Фабрика ресурсов, сохраняемых в репозиторий."""

    async def _make(
        name: str = "Conference Room A",
        capacity: int = 1,
        resource_type: ResourceType = ResourceType.MEETING_ROOM,
        is_active: bool = True,
    ) -> Resource:
        return await uow.resources.save(
            Resource(name=name, type=resource_type, capacity=capacity, is_active=is_active)
        )

    return _make


@pytest.fixture
async def room(make_resource) -> Resource:
    """Переговорная на одного."""
    return await make_resource()
