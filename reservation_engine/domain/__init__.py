"""
Доменная модель бронирования ресурсов.
"""

from .booking import ACTIVE_STATUSES, Booking
from .booking_history import BookingHistory
from .events import BookingCancelled, BookingConfirmed, BookingCreated
from .resource import Interval, Resource
from .user import User
from .value_objects import BookingId, TimeSlot

__all__ = [
    "ACTIVE_STATUSES",
    "Booking",
    "BookingCancelled",
    "BookingConfirmed",
    "BookingCreated",
    "BookingHistory",
    "BookingId",
    "Interval",
    "Resource",
    "TimeSlot",
    "User",
]
