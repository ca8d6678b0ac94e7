#!/usr/bin/env python3
"""Tests for the refresh bus."""

import logging
import threading

import pytest

from fintrack.core.refresh import RefreshBus, RefreshEvent


@pytest.mark.refresh
class TestRefreshBus:
    """Test publish/subscribe delivery rules."""

    def setup_method(self):
        self.bus = RefreshBus()
        self.received: list[tuple[str, RefreshEvent]] = []

    def _recorder(self, name: str):
        def listener(event: RefreshEvent) -> None:
            self.received.append((name, event))

        return listener

    def test_delivers_in_subscription_order(self):
        self.bus.subscribe(self._recorder("a"))
        self.bus.subscribe(self._recorder("b"))
        self.bus.subscribe(self._recorder("c"))

        assert self.bus.publish(RefreshEvent.TRANSACTIONS) is True
        assert self.received == [
            ("a", RefreshEvent.TRANSACTIONS),
            ("b", RefreshEvent.TRANSACTIONS),
            ("c", RefreshEvent.TRANSACTIONS),
        ]

    def test_subscribe_is_idempotent(self):
        listener = self._recorder("a")
        self.bus.subscribe(listener)
        self.bus.subscribe(listener)

        self.bus.publish(RefreshEvent.BUDGETS)
        assert self.bus.subscriber_count == 1
        assert len(self.received) == 1

    def test_unsubscribe_stops_delivery(self):
        listener = self._recorder("a")
        self.bus.subscribe(listener)
        self.bus.unsubscribe(listener)
        self.bus.unsubscribe(listener)

        self.bus.publish(RefreshEvent.ALL)
        assert self.received == []

    def test_publish_without_subscribers(self):
        assert self.bus.publish(RefreshEvent.ALL) is True

    def test_reentrant_publish_is_dropped(self, caplog):
        """A listener that publishes again is ignored; each subscriber sees one event."""
        nested_results = []

        def republisher(event: RefreshEvent) -> None:
            self.received.append(("republisher", event))
            nested_results.append(self.bus.publish(RefreshEvent.ALL))

        self.bus.subscribe(republisher)
        self.bus.subscribe(self._recorder("b"))

        with caplog.at_level(logging.WARNING, logger="fintrack.core.refresh"):
            assert self.bus.publish(RefreshEvent.TRANSACTIONS) is True

        assert nested_results == [False]
        assert self.received == [("republisher", RefreshEvent.TRANSACTIONS), ("b", RefreshEvent.TRANSACTIONS)]
        assert "Recursive refresh" in caplog.text
        assert not self.bus.is_publishing

    def test_failing_listener_is_isolated(self, caplog):
        def broken(event: RefreshEvent) -> None:
            raise RuntimeError("view exploded")

        self.bus.subscribe(broken)
        self.bus.subscribe(self._recorder("b"))

        with caplog.at_level(logging.ERROR, logger="fintrack.core.refresh"):
            assert self.bus.publish(RefreshEvent.BUDGETS) is True

        assert self.received == [("b", RefreshEvent.BUDGETS)]
        assert "view exploded" in caplog.text
        assert not self.bus.is_publishing

    def test_listener_subscribing_during_delivery_waits_for_next_publish(self):
        late = self._recorder("late")

        def subscriber(event: RefreshEvent) -> None:
            self.bus.subscribe(late)

        self.bus.subscribe(subscriber)
        self.bus.publish(RefreshEvent.TRANSACTIONS)
        assert self.received == []

        self.bus.publish(RefreshEvent.BUDGETS)
        assert self.received == [("late", RefreshEvent.BUDGETS)]

    def test_convenience_publishers(self):
        self.bus.subscribe(self._recorder("a"))
        self.bus.refresh_transactions()
        self.bus.refresh_budgets()
        self.bus.refresh_all()

        assert [event for _, event in self.received] == [
            RefreshEvent.TRANSACTIONS,
            RefreshEvent.BUDGETS,
            RefreshEvent.ALL,
        ]

    def test_publishes_from_threads_are_serialized(self):
        active = []
        overlaps = []
        lock = threading.Lock()

        def slow_listener(event: RefreshEvent) -> None:
            with lock:
                active.append(event)
                if len(active) > 1:
                    overlaps.append(event)
            threading.Event().wait(0.01)
            with lock:
                active.remove(event)

        self.bus.subscribe(slow_listener)
        threads = [threading.Thread(target=self.bus.publish, args=(RefreshEvent.ALL,)) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert overlaps == []
