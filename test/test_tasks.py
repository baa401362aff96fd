from typing import List

from vaultcat.tasks import PeriodicTask


def test_ready_after_first_success():
    outcomes = [False, True, False]
    task = PeriodicTask("test", 60, lambda: outcomes.pop(0))
    assert not task.run_once()
    assert not task.ready.is_set()
    assert task.run_once()
    assert task.ready.is_set()
    assert not task.run_once()
    assert task.ready.is_set()


def test_exceptions_do_not_stop_the_task():
    calls: List[int] = []

    def fn():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("boom")
        return True

    task = PeriodicTask("test", 60, fn)
    assert not task.run_once()
    assert task.run_once()
    assert len(calls) == 2


def test_runs_periodically_until_stopped():
    calls: List[int] = []

    def fn():
        calls.append(1)
        return len(calls) >= 3

    task = PeriodicTask("test", 0.01, fn)
    task.start()
    try:
        assert task.ready.wait(5)
    finally:
        task.stop()
        task.join(5)
    assert not task.is_alive()
    assert len(calls) >= 3


def test_stop_interrupts_the_wait():
    task = PeriodicTask("test", 3600, lambda: True)
    task.start()
    assert task.ready.wait(5)
    task.stop()
    task.join(5)
    assert not task.is_alive()
