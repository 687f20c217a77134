import threading
import time

import pytest

from iconcraft.utils.concurrency import run_all


def test_results_in_task_order():
    def make(i):
        def task():
            time.sleep(0.01 * (5 - i))
            return i
        return task

    assert run_all([make(i) for i in range(5)]) == [0, 1, 2, 3, 4]


def test_empty():
    assert run_all([]) == []


def test_first_failure_is_raised_and_pending_cancelled():
    started = []
    lock = threading.Lock()

    def ok(i):
        def task():
            with lock:
                started.append(i)
            time.sleep(0.05)
        return task

    def boom():
        raise ValueError("bad asset")

    tasks = [boom] + [ok(i) for i in range(20)]
    with pytest.raises(ValueError, match="bad asset"):
        run_all(tasks, max_workers=1)

    # Single worker: boom ran first, nothing queued behind it should have started
    assert len(started) <= 1
