"""
Central domain event bus (Mediator Pattern).

The mount controller never talks to presenters directly: it publishes
events here and whoever renders state (WebSocket clients, a tray menu)
subscribes.
"""
import asyncio
import logging
from collections import defaultdict
from typing import Awaitable, Callable, Dict, List, Type

from .domain_event import DomainEvent

EventHandler = Callable[[DomainEvent], Awaitable[None]]


class DomainEventBus:
    """
    Asynchronous publish/subscribe bus keyed by event class.

    A failing handler is logged and never prevents the remaining handlers
    from running, so a broken presenter cannot stall mount handling.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[EventHandler]] = defaultdict(list)
        self._lock = asyncio.Lock()

    async def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        """
        Subscribes a handler to a specific event type.

        Args:
            event_type: The class of the domain event to subscribe to.
            handler: The asynchronous function to call when the event is published.
        """
        async with self._lock:
            self._handlers[event_type].append(handler)
            logging.debug(
                f"Handler {getattr(handler, '__name__', handler)} subscribed to {event_type.__name__}"
            )

    async def unsubscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> bool:
        async with self._lock:
            handlers = self._handlers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)
                return True
            return False

    def handler_count(self, event_type: Type[DomainEvent]) -> int:
        return len(self._handlers.get(event_type, []))

    async def publish(self, event: DomainEvent) -> None:
        """
        Publishes a domain event to every handler subscribed to its exact type.

        Handlers run concurrently; exceptions are logged per handler.
        """
        event_type = type(event)
        handlers = list(self._handlers.get(event_type, []))

        if not handlers:
            logging.debug(f"No handlers for event {event_type.__name__}")
            return

        logging.debug(f"Publishing {event_type.__name__} to {len(handlers)} handler(s)")
        await asyncio.gather(*(self._safe_execute(handler, event) for handler in handlers))

    async def _safe_execute(self, handler: EventHandler, event: DomainEvent) -> None:
        try:
            await handler(event)
        except Exception as e:
            logging.error(
                f"Unhandled exception in handler '{getattr(handler, '__name__', handler)}' "
                f"for event '{type(event).__name__}': {e}",
                exc_info=True,
            )
