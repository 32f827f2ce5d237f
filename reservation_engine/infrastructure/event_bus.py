"""
Шины событий в памяти.

Ошибка обработчика не отменяет уже сохраненное бронирование:
шина записывает ее в лог и продолжает доставку остальным обработчикам.
"""

import asyncio
from typing import Awaitable, Callable, Dict, List, Optional, Type

from reservation_engine.application import interfaces as ports
from reservation_engine.shared_kernel import DomainEvent

from .logging_adapter import LoggingAdapter

Handler = Callable[[DomainEvent], Awaitable[None]]


class InMemoryEventBus(ports.IEventBus):
    """Реализация шины событий в памяти.

    publish() дожидается всех обработчиков, вызывая их в порядке подписки.
    """

    def __init__(self, logger: Optional[ports.ILogger] = None):
        self._subscribers: Dict[Type[DomainEvent], List[Handler]] = {}
        self._logger = logger or LoggingAdapter(__name__)

    async def publish(self, event: DomainEvent) -> None:
        """Публикует событие."""
        await self._dispatch(event)

    def subscribe(self, event_type: Type[DomainEvent], handler: Handler) -> None:
        """Подписывает обработчик на события указанного типа."""
        self._subscribers.setdefault(event_type, []).append(handler)
        self._logger.debug(f"Subscribed handler to {event_type.__name__} events")

    async def _dispatch(self, event: DomainEvent) -> None:
        event_type = type(event)
        handlers = self._subscribers.get(event_type)
        if not handlers:
            self._logger.debug(f"No subscribers for event type {event_type.__name__}")
            return

        self._logger.info(
            f"Publishing event: {event_type.__name__}",
            event=event.model_dump(mode="json"),
        )
        for handler in handlers:
            try:
                await handler(event)
            except Exception as e:
                self._logger.error(
                    f"Error in event handler for {event_type.__name__}",
                    error=str(e),
                    event=event.model_dump(mode="json"),
                )


class QueuedEventBus(InMemoryEventBus):
    """Шина с отложенной доставкой через очередь.

    publish() только ставит событие в очередь; единственный потребитель
    доставляет события строго в порядке публикации.
    """

    def __init__(self, logger: Optional[ports.ILogger] = None):
        super().__init__(logger)
        self._queue: "asyncio.Queue[DomainEvent]" = asyncio.Queue()
        self._worker: Optional[asyncio.Task] = None

    async def publish(self, event: DomainEvent) -> None:
        """Ставит событие в очередь на доставку."""
        if self._worker is None:
            self.start()
        await self._queue.put(event)

    def start(self) -> None:
        """Запускает потребителя очереди в текущем цикле событий."""
        if self._worker is None or self._worker.done():
            self._worker = asyncio.get_running_loop().create_task(self._consume())

    async def join(self) -> None:
        """Ждет доставки всех опубликованных событий."""
        await self._queue.join()

    async def stop(self) -> None:
        """Доставляет оставшиеся события и останавливает потребителя."""
        if self._worker is None:
            return
        await self._queue.join()
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None

    async def _consume(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await self._dispatch(event)
            finally:
                self._queue.task_done()
