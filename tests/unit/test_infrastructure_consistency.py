"""Unit tests for ConsistencyTracker."""

import threading

import pytest
from authzed.api.v1.core_pb2 import ZedToken

from relauthz.infrastructure.authorization.consistency import ConsistencyTracker


@pytest.mark.unit
class TestConsistencyTracker:
    """Test token tracking and the derived consistency requirement."""

    def test_starts_empty(self):
        tracker = ConsistencyTracker()

        assert tracker.load() is None

    def test_minimize_latency_before_first_write(self):
        consistency = ConsistencyTracker().consistency()

        assert consistency.WhichOneof("requirement") == "minimize_latency"
        assert consistency.minimize_latency is True

    def test_store_then_load(self):
        tracker = ConsistencyTracker()

        tracker.store(ZedToken(token="rev-1"))

        assert tracker.load().token == "rev-1"

    def test_at_least_as_fresh_after_write(self):
        tracker = ConsistencyTracker()
        tracker.store(ZedToken(token="rev-7"))

        consistency = tracker.consistency()

        assert consistency.WhichOneof("requirement") == "at_least_as_fresh"
        assert consistency.at_least_as_fresh.token == "rev-7"

    def test_last_store_wins(self):
        tracker = ConsistencyTracker()

        tracker.store(ZedToken(token="rev-2"))
        tracker.store(ZedToken(token="rev-1"))

        assert tracker.load().token == "rev-1"

    @pytest.mark.parametrize("token", [None, ZedToken(token="")])
    def test_empty_tokens_are_ignored(self, token):
        tracker = ConsistencyTracker()
        tracker.store(ZedToken(token="rev-3"))

        tracker.store(token)

        assert tracker.load().token == "rev-3"

    def test_concurrent_stores_leave_one_stored_token(self):
        tracker = ConsistencyTracker()
        stored = [f"rev-{i}" for i in range(50)]

        threads = [
            threading.Thread(target=tracker.store, args=(ZedToken(token=token),))
            for token in stored
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert tracker.load().token in stored
