"""
Unit of Work

Wraps a command handler in one database transaction and hands the
domain events recorded by its aggregates to the message bus once the
transaction has committed.
"""

from typing import List
import logging

from django.db import transaction

from shared.domain.base import Aggregate, DomainEvent

logger = logging.getLogger(__name__)


class DjangoUnitOfWork:
    """
    Usage:
        with DjangoUnitOfWork() as uow:
            booking = booking_repo.get_by_id(booking_id, lock=True)
            booking.cancel(reason, refund)
            booking_repo.save(booking)
            uow.collect_events(booking)
        # BookingCancelled is published after commit

    Leaving the block with an exception rolls the transaction back and
    drops every collected event.
    """

    def __init__(self, bus=None):
        self._events: List[DomainEvent] = []
        self._atomic = None
        self._bus = bus

    def __enter__(self):
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self._schedule_publish()
            else:
                logger.warning(f"Rolling back, discarding {len(self._events)} events")
                self._events.clear()
        finally:
            self._atomic.__exit__(exc_type, exc_val, exc_tb)

    def collect_events(self, aggregate: Aggregate):
        """Move the aggregate's pending events into this unit of work"""
        new_events = aggregate.events
        if not new_events:
            return
        self._events.extend(new_events)
        aggregate.clear_events()
        logger.debug(
            f"Collected {len(new_events)} events from "
            f"{aggregate.__class__.__name__} #{aggregate.id}"
        )

    def _schedule_publish(self):
        events = self._events.copy()
        self._events.clear()
        if events:
            transaction.on_commit(lambda: self._publish(events))

    def _publish(self, events: List[DomainEvent]):
        if self._bus is None:
            from shared.application.message_bus import message_bus
            self._bus = message_bus

        logger.info(f"Publishing {len(events)} domain events after commit")
        self._bus.publish_events(events)
