"""
Message Bus

Routes domain events to the handlers that apps register in their
AppConfig.ready(). One event type may have many handlers.
"""

from typing import Callable, Dict, Iterable, List, Type
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class MessageBus:
    def __init__(self):
        self._handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler):
        handlers = self._handlers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)
            logger.debug(f"Subscribed {handler.__name__} to {event_type.__name__}")

    def publish_events(self, events: Iterable[DomainEvent]):
        """
        Deliver each event to every subscribed handler.

        The database work behind the events is already committed, so a
        failing handler is logged and the remaining handlers still run.
        """
        for event in events:
            event_type = type(event)
            handlers = self._handlers.get(event_type, [])
            if not handlers:
                logger.debug(f"No handlers for {event_type.__name__}")
                continue

            logger.info(f"Publishing {event_type.__name__} (ID: {event.event_id})")
            for handler in handlers:
                try:
                    handler(event)
                except Exception as e:
                    logger.error(
                        f"Handler {handler.__name__} failed for {event_type.__name__}: {e}",
                        exc_info=True,
                    )


message_bus = MessageBus()
