"""
Интеграционные тесты жизненного цикла бронирования через прикладной сервис.
"""

from datetime import timedelta

import pytest

from reservation_engine.application.services import BookingApplicationService
from reservation_engine.domain import Booking, BookingId
from reservation_engine.infrastructure.event_bus import InMemoryEventBus
from reservation_engine.infrastructure.repositories import InMemoryBookingRepository
from reservation_engine.infrastructure.unit_of_work import BookingUnitOfWork
from reservation_engine.shared_kernel import (
    BookingStatus,
    ConflictError,
    NotFoundError,
    ValidationError,
    now,
)
from reservation_engine.tests.helpers import at


class FailingBookingRepository(InMemoryBookingRepository):
    async def save(self, booking: Booking) -> Booking:
        raise RuntimeError("database is unavailable")


class TestCreateBooking:
    """Тесты создания бронирования."""

    async def test_create_booking(self, booking_service, user, room, uow):
        """Тест успешного создания бронирования."""
        booking = await booking_service.create_booking(
            user.id, room.id, at(10), at(12), notes="Planning"
        )

        assert booking.status == BookingStatus.PENDING
        assert booking.user_id == user.id
        assert booking.resource_id == room.id
        assert booking.start_time == at(10)
        assert booking.end_time == at(12)
        assert booking.notes == "Planning"

        stored = await uow.bookings.find_by_id(BookingId(booking.id))
        assert stored is not None
        assert stored.status == BookingStatus.PENDING

    async def test_accepts_iso_8601_strings(self, booking_service, user, room):
        booking = await booking_service.create_booking(
            user.id, room.id, at(10).isoformat(), at(12).isoformat()
        )

        assert booking.start_time == at(10)

    async def test_malformed_timestamp_is_rejected(self, booking_service, user, room):
        with pytest.raises(ValidationError, match="start_time"):
            await booking_service.create_booking(user.id, room.id, "tomorrow", at(12))

    async def test_unknown_user(self, booking_service, room):
        with pytest.raises(NotFoundError, match="User with ID missing not found"):
            await booking_service.create_booking("missing", room.id, at(10), at(12))

    async def test_unknown_resource(self, booking_service, user):
        with pytest.raises(NotFoundError, match="Resource with ID missing not found"):
            await booking_service.create_booking(user.id, "missing", at(10), at(12))

    async def test_user_is_checked_before_resource(self, booking_service):
        with pytest.raises(NotFoundError, match="User"):
            await booking_service.create_booking("nobody", "nothing", at(10), at(12))

    async def test_past_slot_is_rejected(self, booking_service, user, room):
        with pytest.raises(ValidationError, match="Cannot book in the past"):
            await booking_service.create_booking(
                user.id, room.id, at(10, days=-1), at(12, days=-1)
            )

    async def test_far_future_slot_is_rejected(self, booking_service, user, room):
        start = now() + timedelta(days=730)
        with pytest.raises(ValidationError, match="1 year in advance"):
            await booking_service.create_booking(
                user.id, room.id, start, start + timedelta(hours=2)
            )

    async def test_happy_path_and_conflict(self, booking_service, user, room):
        """Сценарий: бронь, подтверждение, пересекающийся запрос отклонен."""
        booking = await booking_service.create_booking(user.id, room.id, at(10), at(12))
        assert booking.status == BookingStatus.PENDING

        confirmed = await booking_service.confirm_booking(booking.id)
        assert confirmed.status == BookingStatus.CONFIRMED

        with pytest.raises(ConflictError, match="not available"):
            await booking_service.create_booking(user.id, room.id, at(11), at(13))

    async def test_conflict_reports_overlap_count(self, booking_service, user, room):
        await booking_service.create_booking(user.id, room.id, at(10), at(12))

        with pytest.raises(ConflictError, match="Found 1 overlapping bookings"):
            await booking_service.create_booking(user.id, room.id, at(11), at(13))

    async def test_adjacent_slot_is_accepted(self, booking_service, user, room):
        await booking_service.create_booking(user.id, room.id, at(10), at(12))

        booking = await booking_service.create_booking(user.id, room.id, at(12), at(14))

        assert booking.status == BookingStatus.PENDING

    async def test_capacity_two_resource(
        self, booking_service, user, other_user, make_resource
    ):
        """Сценарий: два пользователя делят ресурс вместимостью 2, третий запрос отклонен."""
        hall = await make_resource(name="Hotel Room 101", capacity=2)

        first = await booking_service.create_booking(user.id, hall.id, at(10), at(12))
        second = await booking_service.create_booking(
            other_user.id, hall.id, at(11), at(13)
        )

        assert first.id != second.id
        with pytest.raises(ConflictError):
            await booking_service.create_booking(user.id, hall.id, at(11), at(12))

    async def test_zero_capacity_resource_rejects_everything(
        self, booking_service, user, make_resource
    ):
        closed = await make_resource(name="Closed Room", capacity=0)

        with pytest.raises(
            ConflictError, match="^Resource is not available for the requested time slot$"
        ):
            await booking_service.create_booking(user.id, closed.id, at(10), at(12))

    async def test_notes_are_stored_verbatim(self, booking_service, user, room, uow):
        booking = await booking_service.create_booking(
            user.id, room.id, at(10), at(12), notes="  Planning  "
        )

        stored = await uow.bookings.find_by_id(BookingId(booking.id))
        assert stored.notes == "  Planning  "

    async def test_padded_ids_are_not_trimmed(self, booking_service, user, room):
        with pytest.raises(NotFoundError, match="User"):
            await booking_service.create_booking(f" {user.id} ", room.id, at(10), at(12))

        with pytest.raises(NotFoundError, match="Resource"):
            await booking_service.create_booking(user.id, f"{room.id} ", at(10), at(12))

    async def test_inactive_resource_is_rejected(
        self, booking_service, user, make_resource
    ):
        retired = await make_resource(name="Old Van", capacity=3, is_active=False)

        with pytest.raises(
            ConflictError, match="^Resource is not available for the requested time slot$"
        ):
            await booking_service.create_booking(user.id, retired.id, at(10), at(12))

    async def test_cancellation_frees_capacity(self, booking_service, user, room):
        booking = await booking_service.create_booking(user.id, room.id, at(10), at(12))
        await booking_service.cancel_booking(booking.id)

        again = await booking_service.create_booking(user.id, room.id, at(10), at(12))

        assert again.status == BookingStatus.PENDING

    async def test_failed_save_propagates_and_publishes_nothing(
        self, user, room, uow, logger
    ):
        """Тест: ошибка хранилища пробрасывается, событие не публикуется."""
        failing_uow = BookingUnitOfWork(
            bookings_repo=FailingBookingRepository(),
            resources_repo=uow.resources,
            users_repo=uow.users,
            history_repo=uow.history,
        )
        published = []
        bus = InMemoryEventBus()
        bus.publish = _recording(published)
        service = BookingApplicationService(failing_uow, bus, logger)

        with pytest.raises(RuntimeError, match="database is unavailable"):
            await service.create_booking(user.id, room.id, at(10), at(12))

        assert published == []


def _recording(sink):
    async def publish(event):
        sink.append(event)

    return publish


class TestConfirmBooking:
    """Тесты подтверждения бронирования."""

    async def test_confirm_unknown_booking(self, booking_service):
        with pytest.raises(NotFoundError, match="Booking with ID missing not found"):
            await booking_service.confirm_booking("missing")

    async def test_confirm_empty_id(self, booking_service):
        with pytest.raises(ValidationError):
            await booking_service.confirm_booking("")

    async def test_confirm_twice_is_a_conflict(self, booking_service, user, room, uow):
        booking = await booking_service.create_booking(user.id, room.id, at(10), at(12))
        await booking_service.confirm_booking(booking.id)

        with pytest.raises(ConflictError, match="Only pending bookings can be confirmed"):
            await booking_service.confirm_booking(booking.id)

        stored = await uow.bookings.find_by_id(BookingId(booking.id))
        assert stored.status == BookingStatus.CONFIRMED

    async def test_confirm_cancelled_booking_is_a_conflict(
        self, booking_service, user, room
    ):
        booking = await booking_service.create_booking(user.id, room.id, at(10), at(12))
        await booking_service.cancel_booking(booking.id)

        with pytest.raises(ConflictError):
            await booking_service.confirm_booking(booking.id)


class TestCancelBooking:
    """Тесты отмены бронирования."""

    async def test_cancel_confirmed_booking(self, booking_service, user, room):
        booking = await booking_service.create_booking(user.id, room.id, at(10), at(12))
        await booking_service.confirm_booking(booking.id)

        cancelled = await booking_service.cancel_booking(booking.id, reason="Emergency")

        assert cancelled.status == BookingStatus.CANCELLED

    async def test_cancel_twice_is_a_conflict(self, booking_service, user, room, uow):
        booking = await booking_service.create_booking(user.id, room.id, at(10), at(12))
        await booking_service.cancel_booking(booking.id)

        with pytest.raises(ConflictError, match="Booking is already cancelled"):
            await booking_service.cancel_booking(booking.id)

        stored = await uow.bookings.find_by_id(BookingId(booking.id))
        assert stored.status == BookingStatus.CANCELLED

    async def test_cancel_completed_booking_is_a_conflict(
        self, booking_service, user, room, uow
    ):
        booking = await booking_service.create_booking(user.id, room.id, at(10), at(12))
        booking.status = BookingStatus.COMPLETED
        await uow.bookings.save(booking)

        with pytest.raises(ConflictError, match="Cannot cancel a completed booking"):
            await booking_service.cancel_booking(booking.id)

    async def test_cancel_unknown_booking(self, booking_service):
        with pytest.raises(NotFoundError):
            await booking_service.cancel_booking("missing")
