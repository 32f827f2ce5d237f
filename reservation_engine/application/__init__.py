"""
Прикладной слой: сервисы жизненного цикла бронирования, команды и порты.
"""

from .pagination import PaginatedResponse, PaginationParams, SortOrder
from .services import (
    BookingApplicationService,
    BookingHistoryService,
    ResourceApplicationService,
    UserApplicationService,
)

__all__ = [
    "BookingApplicationService",
    "BookingHistoryService",
    "PaginatedResponse",
    "PaginationParams",
    "ResourceApplicationService",
    "SortOrder",
    "UserApplicationService",
]
