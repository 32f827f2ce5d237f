"""
Реализация порта ILogger поверх стандартного модуля logging.
"""

import json
import logging
from typing import Any, Optional

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class LoggingAdapter:
    """Логгер с контекстом в виде именованных аргументов.

    Контекст выводится после сообщения одной строкой JSON.
    """

    def __init__(self, name: str = "reservation_engine", logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(name)

    def _log(self, level: int, message: str, context: dict) -> None:
        if not self._logger.isEnabledFor(level):
            return
        if context:
            message = f"{message} | {json.dumps(context, default=str, ensure_ascii=False)}"
        self._logger.log(level, message)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)


def configure_logging(level: str = "INFO", fmt: str = DEFAULT_FORMAT) -> None:
    """Настраивает корневой логгер приложения."""
    logging.basicConfig(level=level.upper(), format=fmt)
    logging.getLogger("reservation_engine").setLevel(level.upper())
