"""Tests for the reader/writer lock."""

import threading
import time

from funcy_invoke.rwlock import ReadWriteLock


def _wait_until(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not reached")
        time.sleep(0.005)


class TestReaders:
    """Readers share the lock."""

    def test_readers_hold_lock_together(self):
        """Readers should hold the lock together."""
        lock = ReadWriteLock()
        both_inside = threading.Barrier(2, timeout=2)
        errors = []

        def reader():
            try:
                with lock.read_locked():
                    both_inside.wait()
            except threading.BrokenBarrierError as e:
                errors.append(e)

        threads = [threading.Thread(target=reader) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)

        assert errors == []
        assert lock.readers == 0


class TestWriters:
    """Writers exclude readers and each other."""

    def test_writer_waits_for_reader(self):
        """Writers should wait for active readers."""
        lock = ReadWriteLock()
        acquired = threading.Event()

        def writer():
            with lock.write_locked():
                acquired.set()

        lock.acquire_read()
        t = threading.Thread(target=writer)
        t.start()

        assert not acquired.wait(0.1)
        lock.release_read()
        t.join(timeout=2)
        assert acquired.is_set()

    def test_writers_are_exclusive(self):
        """Writers should exclude each other."""
        lock = ReadWriteLock()
        inside = []
        overlap = []

        def writer():
            for _ in range(50):
                with lock.write_locked():
                    inside.append(1)
                    if len(inside) > 1:
                        overlap.append(True)
                    inside.pop()

        threads = [threading.Thread(target=writer) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)

        assert overlap == []

    def test_waiting_writer_blocks_new_readers(self):
        """A waiting writer should go before new readers."""
        lock = ReadWriteLock()
        order = []

        def writer():
            with lock.write_locked():
                order.append("writer")

        def reader():
            with lock.read_locked():
                order.append("reader")

        lock.acquire_read()
        w = threading.Thread(target=writer)
        w.start()
        _wait_until(lambda: lock._writers_waiting == 1)

        r = threading.Thread(target=reader)
        r.start()
        time.sleep(0.05)
        assert order == []

        lock.release_read()
        w.join(timeout=2)
        r.join(timeout=2)
        assert order == ["writer", "reader"]
