import gc
import threading

from savebox_lib.core import PathLocks


def test_same_key_shares_a_lock_while_held():
    locks = PathLocks()
    with locks.hold("a"):
        assert len(locks) == 1
        with locks.hold("a"):
            assert len(locks) == 1
        with locks.hold("b"):
            assert len(locks) == 2


def test_released_locks_are_dropped():
    locks = PathLocks()
    for i in range(100):
        with locks.hold(f"file{i}"):
            pass
    gc.collect()
    assert len(locks) == 0


def test_hold_excludes_other_threads():
    locks = PathLocks()
    entered = threading.Event()
    events = []

    def other():
        entered.wait(timeout=5)
        with locks.hold("a"):
            events.append("other")

    t = threading.Thread(target=other)
    with locks.hold("a"):
        t.start()
        entered.set()
        t.join(timeout=0.1)
        events.append("owner")
    t.join(timeout=5)
    assert events == ["owner", "other"]
