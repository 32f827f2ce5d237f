"""
Прикладной слой движка бронирования.

Сервисы координируют проверку ссылок на сущности, поиск конфликтов,
изменение бронирований, сохранение и публикацию событий жизненного цикла.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from reservation_engine.domain import (
    Booking,
    BookingCancelled,
    BookingConfirmed,
    BookingCreated,
    BookingHistory,
    BookingId,
    Resource,
    TimeSlot,
    User,
)
from reservation_engine.shared_kernel import (
    BookingStatus,
    ConflictError,
    DomainException,
    EntityId,
    InvalidStateError,
    NotFoundError,
    ResourceType,
    now,
)

from . import interfaces as ports
from .commands import (
    CancelBookingCommand,
    ConfirmBookingCommand,
    CreateBookingCommand,
    GetAvailableResourcesQuery,
    GetBookingQuery,
    GetUserBookingsQuery,
    RegisterUserCommand,
    parse_command,
)
from .pagination import (
    BOOKING_SORT_KEYS,
    RESOURCE_SORT_KEYS,
    BookingSortKey,
    PaginatedResponse,
    PaginationParams,
    ResourceSortKey,
    paginate,
)

TimeInput = Union[str, datetime]
PaginationInput = Union[PaginationParams, Dict[str, Any], None]


class BookingApplicationService:
    """Сервис приложения для жизненного цикла бронирований."""

    def __init__(
        self,
        uow: ports.IBookingUnitOfWork,
        event_bus: ports.IEventBus,
        logger: ports.ILogger,
    ):
        """Инициализирует сервис."""
        self._uow = uow
        self._event_bus = event_bus
        self._logger = logger

    async def create_booking(
        self,
        user_id: str,
        resource_id: str,
        start_time: TimeInput,
        end_time: TimeInput,
        notes: Optional[str] = None,
    ) -> Booking:
        """Создает бронирование в статусе PENDING.

        Проверка конфликтов и сохранение выполняются под блокировкой
        ресурса, поэтому параллельные запросы не могут вместе превысить
        его вместимость.
        """
        command = parse_command(
            CreateBookingCommand,
            user_id=user_id,
            resource_id=resource_id,
            start_time=start_time,
            end_time=end_time,
            notes=notes,
        )

        try:
            async with self._uow:
                user = await self._uow.users.find_by_id(command.user_id)
                if user is None:
                    raise NotFoundError(f"User with ID {command.user_id} not found")

                await self._get_resource(command.resource_id)

                async with self._uow.resource_lock(command.resource_id):
                    # Перечитываем под блокировкой: снимок бронирований мог устареть
                    resource = await self._get_resource(command.resource_id)

                    time_slot = TimeSlot(command.start_time, command.end_time)

                    overlapping = await self._uow.bookings.find_overlapping_bookings(
                        resource.id, time_slot
                    )
                    if overlapping and len(overlapping) >= resource.capacity:
                        raise ConflictError(
                            "Resource is not available for the requested time slot. "
                            f"Found {len(overlapping)} overlapping bookings."
                        )

                    if not resource.is_available(time_slot):
                        raise ConflictError(
                            "Resource is not available for the requested time slot"
                        )

                    booking = Booking.create(
                        booking_id=BookingId.generate(),
                        user_id=user.id,
                        resource_id=resource.id,
                        time_slot=time_slot,
                        notes=command.notes,
                    )
                    saved = await self._uow.bookings.save(booking)
        except DomainException as e:
            self._logger.warning(
                f"Booking creation rejected: {e}",
                user_id=command.user_id,
                resource_id=command.resource_id,
            )
            raise

        self._logger.info(
            "Booking created", booking_id=saved.id, resource_id=saved.resource_id
        )
        await self._event_bus.publish(
            BookingCreated(
                booking_id=saved.id,
                user_id=saved.user_id,
                resource_id=saved.resource_id,
                start_time=saved.start_time,
                end_time=saved.end_time,
                created_at=saved.created_at,
            )
        )
        return saved

    async def confirm_booking(self, booking_id: str) -> Booking:
        """Подтверждает бронирование."""
        command = parse_command(ConfirmBookingCommand, booking_id=booking_id)
        updated, previous_status = await self._transition(
            BookingId.from_string(command.booking_id), Booking.confirm
        )

        await self._event_bus.publish(
            BookingConfirmed(
                booking_id=updated.id,
                user_id=updated.user_id,
                resource_id=updated.resource_id,
                confirmed_at=now(),
                previous_status=previous_status,
            )
        )
        return updated

    async def cancel_booking(
        self, booking_id: str, reason: Optional[str] = None
    ) -> Booking:
        """Отменяет бронирование."""
        command = parse_command(CancelBookingCommand, booking_id=booking_id, reason=reason)
        updated, previous_status = await self._transition(
            BookingId.from_string(command.booking_id), Booking.cancel
        )

        await self._event_bus.publish(
            BookingCancelled(
                booking_id=updated.id,
                user_id=updated.user_id,
                resource_id=updated.resource_id,
                cancelled_at=now(),
                reason=command.reason,
                previous_status=previous_status,
            )
        )
        return updated

    async def _transition(
        self, booking_id: BookingId, action: Callable[[Booking], None]
    ) -> Tuple[Booking, BookingStatus]:
        """Применяет переход статуса и сохраняет бронирование.

        Возвращает сохраненное бронирование и статус до перехода.
        """
        try:
            async with self._uow:
                booking = await self._get_booking(booking_id)

                async with self._uow.resource_lock(booking.resource_id):
                    # Перечитываем под блокировкой: статус мог измениться
                    booking = await self._get_booking(booking_id)
                    previous_status = booking.status
                    try:
                        action(booking)
                    except InvalidStateError as e:
                        raise ConflictError(str(e)) from e

                    updated = await self._uow.bookings.save(booking)
        except DomainException as e:
            self._logger.warning(
                f"Booking transition rejected: {e}", booking_id=booking_id.value
            )
            raise

        self._logger.info(
            "Booking status changed",
            booking_id=updated.id,
            previous_status=previous_status.value,
            new_status=updated.status.value,
        )
        return updated, previous_status

    async def _get_resource(self, resource_id: EntityId) -> Resource:
        resource = await self._uow.resources.find_by_id(resource_id)
        if resource is None:
            raise NotFoundError(f"Resource with ID {resource_id} not found")
        return resource

    async def _get_booking(self, booking_id: BookingId) -> Booking:
        booking = await self._uow.bookings.find_by_id(booking_id)
        if booking is None:
            raise NotFoundError(f"Booking with ID {booking_id} not found")
        return booking

    async def get_booking(self, booking_id: str) -> Booking:
        """Возвращает бронирование по идентификатору."""
        query = parse_command(GetBookingQuery, booking_id=booking_id)
        return await self._get_booking(BookingId.from_string(query.booking_id))

    async def get_user_bookings(
        self,
        user_id: str,
        status: Optional[Union[BookingStatus, str]] = None,
        pagination: PaginationInput = None,
    ) -> Union[List[Booking], PaginatedResponse[Booking]]:
        """Возвращает бронирования пользователя, при необходимости по статусу."""
        query = parse_command(
            GetUserBookingsQuery, user_id=user_id, status=status, pagination=pagination
        )

        bookings = await self._uow.bookings.find_by_user_id(query.user_id)
        if query.status is not None:
            bookings = [b for b in bookings if b.status == query.status]

        if query.pagination is None:
            return bookings
        return paginate(
            bookings, query.pagination, BOOKING_SORT_KEYS, BookingSortKey.CREATED_AT
        )


class ResourceApplicationService:
    """Сервис приложения для работы с ресурсами."""

    def __init__(
        self, uow: ports.IBookingUnitOfWork, logger: ports.ILogger
    ):
        """Инициализирует сервис."""
        self._uow = uow
        self._logger = logger

    async def register_resource(
        self,
        name: str,
        resource_type: Union[ResourceType, str],
        capacity: int = 1,
        description: Optional[str] = None,
        price_per_hour: Optional[Decimal] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Resource:
        """Регистрирует новый ресурс."""
        resource = parse_command(
            Resource,
            name=name,
            type=resource_type,
            capacity=capacity,
            description=description,
            price_per_hour=price_per_hour,
            metadata=metadata or {},
        )
        async with self._uow:
            saved = await self._uow.resources.save(resource)

        self._logger.info(
            f"Resource registered: {saved.name}",
            resource_id=saved.id,
            capacity=saved.capacity,
        )
        return saved

    async def get_resource(self, resource_id: EntityId) -> Resource:
        """Возвращает ресурс вместе со снимком его бронирований."""
        resource = await self._uow.resources.find_by_id(resource_id)
        if resource is None:
            raise NotFoundError(f"Resource with ID {resource_id} not found")
        return resource

    async def deactivate_resource(self, resource_id: EntityId) -> Resource:
        """Снимает ресурс с бронирования; существующие брони не меняются."""
        async with self._uow:
            await self.get_resource(resource_id)
            async with self._uow.resource_lock(resource_id):
                resource = await self.get_resource(resource_id)
                resource.is_active = False
                saved = await self._uow.resources.save(resource)

        self._logger.info("Resource deactivated", resource_id=resource_id)
        return saved

    async def get_available_resources(
        self,
        start_time: TimeInput,
        end_time: TimeInput,
        resource_type: Optional[Union[ResourceType, str]] = None,
        pagination: PaginationInput = None,
    ) -> Union[List[Resource], PaginatedResponse[Resource]]:
        """Возвращает ресурсы со свободной вместимостью на интервале.

        С фильтром по типу доступность считается в процессе через
        Resource.is_available, без фильтра - запросом к хранилищу.
        """
        query = parse_command(
            GetAvailableResourcesQuery,
            start_time=start_time,
            end_time=end_time,
            resource_type=resource_type,
            pagination=pagination,
        )
        time_slot = TimeSlot(query.start_time, query.end_time)

        if query.resource_type is not None:
            resources = await self._uow.resources.find_by_type(query.resource_type)
            available = [r for r in resources if r.is_available(time_slot)]
        else:
            available = await self._uow.resources.find_available(time_slot)

        if query.pagination is None:
            return available
        return paginate(
            available, query.pagination, RESOURCE_SORT_KEYS, ResourceSortKey.NAME
        )


class UserApplicationService:
    """Сервис приложения для работы с пользователями."""

    def __init__(
        self, uow: ports.IBookingUnitOfWork, logger: ports.ILogger
    ):
        """Инициализирует сервис."""
        self._uow = uow
        self._logger = logger

    async def register_user(
        self,
        email: str,
        first_name: str,
        last_name: str,
        phone: Optional[str] = None,
    ) -> User:
        """Регистрирует нового пользователя."""
        command = parse_command(
            RegisterUserCommand,
            email=email,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
        )
        async with self._uow:
            existing = await self._uow.users.find_by_email(command.email)
            if existing is not None:
                raise ConflictError(f"User with email {command.email} already exists")

            user = User(
                email=command.email,
                first_name=command.first_name,
                last_name=command.last_name,
                phone=command.phone,
            )
            saved = await self._uow.users.save(user)

        self._logger.info("User registered", user_id=saved.id)
        return saved

    async def get_user(self, user_id: EntityId) -> User:
        user = await self._uow.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User with ID {user_id} not found")
        return user


class BookingHistoryService:
    """Чтение журнала переходов статусов."""

    def __init__(self, uow: ports.IBookingUnitOfWork):
        self._uow = uow

    async def get_booking_history(self, booking_id: EntityId) -> List[BookingHistory]:
        return await self._uow.history.find_by_booking_id(booking_id)

    async def get_user_history(self, user_id: EntityId) -> List[BookingHistory]:
        return await self._uow.history.find_by_user_id(user_id)

    async def get_resource_history(self, resource_id: EntityId) -> List[BookingHistory]:
        return await self._uow.history.find_by_resource_id(resource_id)

    async def get_all_history(self) -> List[BookingHistory]:
        return await self._uow.history.find_all()
