from decimal import Decimal
from functools import partial
from typing import Any, Dict, Optional

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
from reservation_engine.config import EventDelivery, Settings, load_settings
from reservation_engine.domain import (
    BookingCancelled,
    BookingConfirmed,
    BookingCreated,
    Resource,
    User,
)
from reservation_engine.infrastructure.event_bus import InMemoryEventBus, QueuedEventBus
from reservation_engine.infrastructure.logging_adapter import LoggingAdapter, configure_logging
from reservation_engine.infrastructure.repositories import InMemoryBookingRepository
from reservation_engine.infrastructure.unit_of_work import BookingUnitOfWork
from reservation_engine.shared_kernel import ResourceType

SAMPLE_USERS = [
    User(
        id="a3db9897-93d3-46c1-8939-02d33b029950",
        email="john.doe@example.com",
        first_name="John",
        last_name="Doe",
        phone="+1234567890",
    ),
    User(
        id="a3db9897-93d3-46c1-8939-02d33b029951",
        email="jane.smith@example.com",
        first_name="Jane",
        last_name="Smith",
        phone="+1234567891",
    ),
    User(
        id="a3db9897-93d3-46c1-8939-02d33b029952",
        email="bob.johnson@example.com",
        first_name="Bob",
        last_name="Johnson",
        phone="+1234567892",
    ),
]

SAMPLE_RESOURCES = [
    Resource(
        id="a3db9897-93d3-46c1-8939-02d33b029953",
        name="Conference Room A",
        description="Large conference room with projector and whiteboard",
        type=ResourceType.MEETING_ROOM,
        capacity=20,
        price_per_hour=Decimal("50.00"),
        metadata={"has_projector": True, "has_whiteboard": True, "has_video_conference": True},
    ),
    Resource(
        id="a3db9897-93d3-46c1-8939-02d33b029954",
        name="Conference Room B",
        description="Medium conference room with basic amenities",
        type=ResourceType.MEETING_ROOM,
        capacity=10,
        price_per_hour=Decimal("30.00"),
        metadata={"has_projector": False, "has_whiteboard": True, "has_video_conference": False},
    ),
    Resource(
        id="a3db9897-93d3-46c1-8939-02d33b029955",
        name="Hotel Room 101",
        description="Deluxe hotel room with king bed",
        type=ResourceType.HOTEL_ROOM,
        capacity=2,
        price_per_hour=Decimal("100.00"),
        metadata={"bed_type": "king", "has_balcony": True, "has_minibar": True},
    ),
    Resource(
        id="a3db9897-93d3-46c1-8939-02d33b029956",
        name="Event Hall",
        description="Large event hall for conferences and weddings",
        type=ResourceType.CONFERENCE_HALL,
        capacity=200,
        price_per_hour=Decimal("500.00"),
        metadata={"has_stage": True, "has_sound_system": True, "has_lighting": True},
    ),
    Resource(
        id="a3db9897-93d3-46c1-8939-02d33b029957",
        name="Workspace Desk 1",
        description="Individual workspace desk in co-working space",
        type=ResourceType.WORKSPACE,
        capacity=1,
        price_per_hour=Decimal("15.00"),
        metadata={"has_monitor": True, "has_keyboard": True, "has_mouse": True},
    ),
]


async def seed_sample_data(uow: BookingUnitOfWork) -> None:
    """Добавляет демонстрационных пользователей и ресурсы, если их еще нет."""
    logger = LoggingAdapter(__name__)
    async with uow:
        for user in SAMPLE_USERS:
            if await uow.users.find_by_id(user.id) is None:
                await uow.users.save(user)
                logger.info(f"Created user: {user.email}")

        for resource in SAMPLE_RESOURCES:
            if await uow.resources.find_by_id(resource.id) is None:
                await uow.resources.save(resource)
                logger.info(f"Created resource: {resource.name}")


async def bootstrap_app(settings: Optional[Settings] = None) -> Dict[str, Any]:
    """Создает и настраивает все компоненты приложения."""
    settings = settings or load_settings()
    configure_logging(settings.log_level, settings.log_format)

    # 1. Хранилище и единица работы
    uow = BookingUnitOfWork(
        bookings_repo=InMemoryBookingRepository(latency=settings.storage_latency)
    )

    # 2. Шина событий
    if settings.event_delivery == EventDelivery.QUEUED:
        event_bus = QueuedEventBus()
    else:
        event_bus = InMemoryEventBus()

    # 3. Подписываем обработчики истории на события жизненного цикла
    event_bus.subscribe(BookingCreated, partial(on_booking_created, history=uow.history))
    event_bus.subscribe(BookingConfirmed, partial(on_booking_confirmed, history=uow.history))
    event_bus.subscribe(BookingCancelled, partial(on_booking_cancelled, history=uow.history))

    if settings.seed_sample_data:
        await seed_sample_data(uow)

    # 4. Сервисы приложения
    logger = LoggingAdapter("reservation_engine.application")

    # Возвращаем настроенные компоненты
    return {
        "settings": settings,
        "uow": uow,
        "event_bus": event_bus,
        "booking_service": BookingApplicationService(uow, event_bus, logger),
        "resource_service": ResourceApplicationService(uow, logger),
        "user_service": UserApplicationService(uow, logger),
        "history_service": BookingHistoryService(uow),
    }
