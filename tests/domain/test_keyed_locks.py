"""Tests for the per-key lock registry."""

import threading

from storefront.domain.service.keyed_locks import KeyedLocks


class TestKeyedLocks:

    def test_registry_empties_after_use(self):
        locks = KeyedLocks()

        for order_id in range(200):
            with locks.hold(order_id):
                assert len(locks) == 1

        assert len(locks) == 0

    def test_entry_released_when_body_raises(self):
        locks = KeyedLocks()

        try:
            with locks.hold(("alice", "k-1")):
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        assert len(locks) == 0

    def test_same_key_is_mutually_exclusive(self):
        locks = KeyedLocks()
        inside = 0
        peak = 0
        guard = threading.Lock()

        def work():
            nonlocal inside, peak
            with locks.hold("order-1"):
                with guard:
                    inside += 1
                    peak = max(peak, inside)
                with guard:
                    inside -= 1

        threads = [threading.Thread(target=work) for _ in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert peak == 1
        assert len(locks) == 0

