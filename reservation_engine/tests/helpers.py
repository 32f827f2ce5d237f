from datetime import datetime, timedelta

from reservation_engine.shared_kernel import now


def at(hour: int, days: int = 1, minute: int = 0) -> datetime:
    """Момент времени через `days` дней в указанный час (UTC)."""
    return (now() + timedelta(days=days)).replace(
        hour=hour, minute=minute, second=0, microsecond=0
    )
