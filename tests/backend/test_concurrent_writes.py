"""Concurrent read-modify-write on one save file, without and with locking."""
import threading
import time

from savebox_lib.settings import SaveSettings
from savebox_lib.storage import FileSystemBackend
from tests.helpers import make_store

SETTINGS = SaveSettings(file_name="shared.json")


class BarrierBackend(FileSystemBackend):
    """Holds each thread at its first existence check until both threads arrive."""

    def __init__(self, data_dir, parties=2):
        super().__init__(data_dir)
        self.barrier = threading.Barrier(parties, timeout=5)
        self.local = threading.local()

    def exists(self, path):
        found = super().exists(path)
        if not getattr(self.local, "synced", False):
            self.local.synced = True
            self.barrier.wait()
        return found


class SlowBackend(FileSystemBackend):
    def exists(self, path):
        time.sleep(0.02)
        return super().exists(path)


def run_pair(store):
    results = {}

    def writer(key):
        results[key] = store.set_key(key, key.upper(), SETTINGS)

    threads = [threading.Thread(target=writer, args=(k,)) for k in ("a", "b")]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)
    return results


def test_unlocked_writers_lose_an_update(tmp_path):
    store = make_store(tmp_path, backend=BarrierBackend(tmp_path), serialize_access=False)
    results = run_pair(store)
    assert results == {"a": True, "b": True}
    # Both writers read the empty file before either wrote: last write wins.
    keys = store.list_keys(SETTINGS)
    assert len(keys) == 1
    assert keys[0] in ("a", "b")


def test_locked_writers_keep_both_updates(tmp_path):
    store = make_store(tmp_path, backend=SlowBackend(tmp_path))
    assert store.serialize_access is True
    results = run_pair(store)
    assert results == {"a": True, "b": True}
    assert store.load_dictionary(SETTINGS) == {"a": "A", "b": "B"}


def test_many_locked_writers(tmp_path):
    store = make_store(tmp_path)
    threads = [threading.Thread(target=store.set_key, args=(f"k{i}", i, SETTINGS)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)
    assert store.load_dictionary(SETTINGS) == {f"k{i}": i for i in range(8)}


def test_encrypted_and_plain_variants_share_a_lock(tmp_path):
    store = make_store(tmp_path)
    encrypted = SETTINGS.with_overrides(encryption="aes", password="pw")
    assert store.resolver.identity_path(SETTINGS) == store.resolver.identity_path(encrypted)
