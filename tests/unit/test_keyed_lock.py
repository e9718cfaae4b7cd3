"""
Name: KeyedLock Tests

Responsibilities:
  - Validate mutual exclusion per key
  - Validate that idle entries are released
"""

import threading
import time

import pytest

from timetracker.crosscutting.locks import KeyedLock

pytestmark = pytest.mark.unit


def test_entries_are_released_after_use():
    lock = KeyedLock()
    with lock.hold("a"):
        with lock.hold("b"):
            assert len(lock) == 2
    assert len(lock) == 0


def test_same_key_is_serialized():
    lock = KeyedLock()
    events: list[str] = []

    def worker(name: str) -> None:
        with lock.hold("user"):
            events.append(f"{name}:in")
            time.sleep(0.02)
            events.append(f"{name}:out")

    threads = [threading.Thread(target=worker, args=(n,)) for n in ("a", "b")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    # R: sin intercalado: cada "in" va seguido de su propio "out".
    assert events[0].split(":")[0] == events[1].split(":")[0]
    assert events[2].split(":")[0] == events[3].split(":")[0]
    assert len(lock) == 0
