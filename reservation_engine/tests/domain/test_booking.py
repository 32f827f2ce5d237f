import pytest

from reservation_engine.domain import Booking, BookingId, TimeSlot
from reservation_engine.shared_kernel import BookingStatus, InvalidStateError
from reservation_engine.tests.helpers import at


def make_booking(start=10, end=12, resource_id="room-1", notes=None) -> Booking:
    return Booking.create(
        booking_id=BookingId.generate(),
        user_id="user-1",
        resource_id=resource_id,
        time_slot=TimeSlot(at(start), at(end)),
        notes=notes,
    )


def test_booking_creation():
    """Тест: новое бронирование создается в статусе PENDING."""
    booking = make_booking(notes="Quarterly review")

    assert booking.status == BookingStatus.PENDING
    assert booking.start_time == at(10)
    assert booking.end_time == at(12)
    assert booking.notes == "Quarterly review"
    assert booking.is_active()
    assert str(booking.booking_id) == booking.id


def test_confirm_pending_booking():
    booking = make_booking()

    booking.confirm()

    assert booking.status == BookingStatus.CONFIRMED
    assert booking.is_active()


def test_confirm_twice_fails_and_keeps_status():
    """Тест: повторное подтверждение вызывает ошибку и не меняет статус."""
    booking = make_booking()
    booking.confirm()

    with pytest.raises(InvalidStateError, match="Only pending bookings can be confirmed"):
        booking.confirm()
    assert booking.status == BookingStatus.CONFIRMED


def test_confirm_cancelled_booking_fails():
    booking = make_booking()
    booking.cancel()

    with pytest.raises(InvalidStateError, match="Only pending bookings can be confirmed"):
        booking.confirm()


@pytest.mark.parametrize("confirm_first", [False, True])
def test_cancel_from_pending_or_confirmed(confirm_first):
    booking = make_booking()
    if confirm_first:
        booking.confirm()

    booking.cancel()

    assert booking.status == BookingStatus.CANCELLED
    assert not booking.is_active()


def test_cancel_twice_fails_and_keeps_status():
    """Тест: повторная отмена вызывает ошибку, статус остается CANCELLED."""
    booking = make_booking()
    booking.cancel()

    with pytest.raises(InvalidStateError, match="Booking is already cancelled"):
        booking.cancel()
    assert booking.status == BookingStatus.CANCELLED


def test_cancel_completed_booking_fails():
    booking = make_booking()
    booking.status = BookingStatus.COMPLETED

    with pytest.raises(InvalidStateError, match="Cannot cancel a completed booking"):
        booking.cancel()
    assert booking.status == BookingStatus.COMPLETED
    assert not booking.is_active()


def test_booking_never_overlaps_itself():
    booking = make_booking()

    assert not booking.is_overlapping(booking)


def test_overlapping_bookings_on_same_resource():
    first = make_booking(10, 12)
    second = make_booking(11, 13)

    assert first.is_overlapping(second)
    assert second.is_overlapping(first)


def test_touching_bookings_do_not_overlap():
    """Тест: бронирование, начинающееся в момент окончания другого, не пересекается с ним."""
    first = make_booking(10, 12)
    second = make_booking(12, 14)

    assert not first.is_overlapping(second)


def test_bookings_on_different_resources_do_not_overlap():
    first = make_booking(10, 12, resource_id="room-1")
    second = make_booking(10, 12, resource_id="room-2")

    assert not first.is_overlapping(second)


def test_cancelled_booking_does_not_overlap():
    first = make_booking(10, 12)
    second = make_booking(10, 12)
    second.cancel()

    assert not first.is_overlapping(second)
    assert not second.is_overlapping(first)
