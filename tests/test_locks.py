"""
Per-(owner, date) locking used by recap ingestion.
"""
import threading
import time
from datetime import date

from cadence.services.locks import KeyedLocks

D = date(2025, 1, 11)
D_MINUS_1 = date(2025, 1, 10)


class TestKeyedLocks:
    def test_entries_are_dropped_when_idle(self):
        locks = KeyedLocks()
        with locks.hold(("a", D_MINUS_1), ("a", D)):
            assert len(locks) == 2
        assert len(locks) == 0

    def test_duplicate_keys_held_once(self):
        locks = KeyedLocks()
        with locks.hold(("a", D), ("a", D)):
            assert len(locks) == 1

    def test_released_on_error(self):
        locks = KeyedLocks()
        try:
            with locks.hold(("a", D)):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        with locks.hold(("a", D)):
            pass
        assert len(locks) == 0

    def test_overlapping_dates_serialize(self):
        # D+1 needs (D, D+1) and D needs (D-1, D); both share (owner, D).
        locks = KeyedLocks()
        order = []

        def worker(name, keys, delay):
            with locks.hold(*keys):
                order.append(f"{name}-in")
                time.sleep(delay)
                order.append(f"{name}-out")

        first = threading.Thread(target=worker, args=("first", [("a", D_MINUS_1), ("a", D)], 0.1))
        first.start()
        time.sleep(0.02)
        second = threading.Thread(target=worker, args=("second", [("a", date(2025, 1, 12)), ("a", D)], 0))
        second.start()
        first.join(2)
        second.join(2)
        assert order == ["first-in", "first-out", "second-in", "second-out"]

    def test_other_owner_not_blocked(self):
        locks = KeyedLocks()
        entered = threading.Event()

        def worker():
            with locks.hold(("b", D)):
                entered.set()

        with locks.hold(("a", D)):
            t = threading.Thread(target=worker)
            t.start()
            assert entered.wait(1)
        t.join(1)
