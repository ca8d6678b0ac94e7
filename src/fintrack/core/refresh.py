#!/usr/bin/env python3
"""
Refresh Bus - change propagation for read-models

Typed publish/subscribe hub. Mutations to the ledger publish a RefreshEvent;
subscribers re-query the aggregator for whatever derived data they show.
Events carry no payload, so a subscriber can never act on a partial or stale
copy of the data.

Delivery rules:
- Synchronous: publish() returns after every subscriber has been called
- Insertion order, over a snapshot of the subscriber list
- A publish issued from inside a listener is dropped with a warning
- A failing listener is logged and skipped; the others still run
"""

import logging
import threading
from collections.abc import Callable
from enum import Enum

logger = logging.getLogger(__name__)


class RefreshEvent(Enum):
    """Kinds of derived data that can be invalidated."""

    TRANSACTIONS = "transactions"
    BUDGETS = "budgets"
    CURRENCY = "currency"
    SETTINGS = "settings"
    ADVICE = "advice"
    ALL = "all"


RefreshListener = Callable[[RefreshEvent], None]


def _listener_name(listener: RefreshListener) -> str:
    return getattr(listener, "__qualname__", None) or type(listener).__name__


class RefreshBus:
    """
    Publish/subscribe hub for RefreshEvents.

    Publishes from different threads are serialized by an internal lock; a
    publish re-entering from the delivering thread is detected by the
    publishing flag and dropped.
    """

    def __init__(self) -> None:
        self._listeners: list[RefreshListener] = []
        self._lock = threading.RLock()
        self._publishing = False

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners)

    @property
    def is_publishing(self) -> bool:
        return self._publishing

    def subscribe(self, listener: RefreshListener) -> None:
        """Register a listener. Registering the same listener twice has no effect."""
        with self._lock:
            if listener in self._listeners:
                return
            self._listeners.append(listener)
        logger.debug("Added refresh listener: %s", _listener_name(listener))

    def unsubscribe(self, listener: RefreshListener) -> None:
        """Remove a listener if registered."""
        with self._lock:
            if listener not in self._listeners:
                return
            self._listeners.remove(listener)
        logger.debug("Removed refresh listener: %s", _listener_name(listener))

    def publish(self, event: RefreshEvent) -> bool:
        """
        Deliver an event to every subscriber.

        Args:
            event: Kind of data that changed

        Returns:
            True if the event was delivered, False if it was dropped as a
            re-entrant publish
        """
        with self._lock:
            if self._publishing:
                logger.warning("Recursive refresh call detected for %s, skipping", event.name)
                return False

            self._publishing = True
            try:
                listeners = list(self._listeners)
                logger.info("Notifying %d listeners of %s refresh", len(listeners), event.name)
                for listener in listeners:
                    try:
                        listener(event)
                    except Exception:
                        logger.exception("Error notifying refresh listener %s", _listener_name(listener))
            finally:
                self._publishing = False
        return True

    def refresh_transactions(self) -> bool:
        return self.publish(RefreshEvent.TRANSACTIONS)

    def refresh_budgets(self) -> bool:
        return self.publish(RefreshEvent.BUDGETS)

    def refresh_all(self) -> bool:
        return self.publish(RefreshEvent.ALL)
