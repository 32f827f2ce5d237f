"""
Настройки движка бронирования.

Значения читаются из переменных окружения с префиксом RESERVATION_,
отсутствующие берутся по умолчанию.
"""

import os
from enum import Enum
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from reservation_engine.infrastructure.logging_adapter import DEFAULT_FORMAT

ENV_PREFIX = "RESERVATION_"


class EventDelivery(str, Enum):
    """Способ доставки событий жизненного цикла обработчикам истории."""

    SYNC = "sync"
    QUEUED = "queued"


class Settings(BaseModel):
    """Неизменяемый снимок настроек."""

    model_config = ConfigDict(frozen=True)

    log_level: str = "INFO"
    log_format: str = DEFAULT_FORMAT
    event_delivery: EventDelivery = EventDelivery.SYNC
    seed_sample_data: bool = False
    # Искусственная задержка хранилища в секундах (для нагрузочных сценариев)
    storage_latency: float = Field(0.0, ge=0)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Загружает настройки из окружения."""
    if env is None:
        env = os.environ

    values = {}
    for name in Settings.model_fields:
        raw = env.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None:
            values[name] = raw
    return Settings(**values)
