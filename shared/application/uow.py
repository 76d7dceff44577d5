"""
Unit of Work

One database transaction per booking command. Domain events recorded
inside the block reach the message bus only after the commit succeeds.
"""

from typing import List
import logging

from django.db import transaction

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class DjangoUnitOfWork:
    """
    Wraps ``transaction.atomic()`` and buffers domain events.

    A coupon redeemed inside the block is rolled back together with the
    reservation insert when anything later in the block raises.

    Usage:
        with DjangoUnitOfWork() as uow:
            workspace = workspace_repo.get(workspace_id, lock=True)
            reservation = reservation_repo.create(...)
            uow.add_event(ReservationCreated(...))
    """

    def __init__(self):
        self._events: List[DomainEvent] = []
        self._atomic = None

    def __enter__(self):
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self._schedule_publication()
            else:
                self._discard_events()
        finally:
            self._atomic.__exit__(exc_type, exc_val, exc_tb)

    def add_event(self, event: DomainEvent):
        self._events.append(event)
        logger.debug(f"Recorded {event.__class__.__name__} (aggregate {event.aggregate_id})")

    def _schedule_publication(self):
        pending, self._events = self._events, []
        if pending:
            # Dropped by Django if the outer transaction rolls back.
            transaction.on_commit(lambda: self._publish(pending))

    def _discard_events(self):
        if self._events:
            logger.warning(f"Transaction rolled back, dropping {len(self._events)} events")
        self._events = []

    @staticmethod
    def _publish(events: List[DomainEvent]):
        from shared.application.message_bus import message_bus

        logger.info(f"Publishing {len(events)} domain events after commit")
        try:
            message_bus.publish_events(events)
        except Exception as e:
            logger.error(f"Error publishing events: {e}", exc_info=True)
