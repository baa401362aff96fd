"""
Periodic background tasks.
"""

import logging
from threading import Event, Thread
from typing import Any, Callable

logger = logging.getLogger(__name__)


class PeriodicTask(Thread):
    """
    Runs ``fn`` right after start and then every ``interval`` seconds,
    until :meth:`stop` is called.

    The interval is fixed: a failed cycle is retried on the next tick,
    without backoff. Exceptions raised by ``fn`` are logged and don't stop
    the task.

    :attr:`ready` is set once, after the first cycle in which ``fn``
    returned a truthy value.

    Args:
        name: task name, used for the thread and in logs
        interval: seconds between the end of a cycle and the start of the next one
        fn: cycle body, returns ``True`` on success
    """

    #: Seconds between cycles
    interval: float
    #: Set after the first successful cycle
    ready: Event

    def __init__(self, name: str, interval: float, fn: Callable[[], Any]):
        super().__init__(name=name, daemon=True)
        self.interval = interval
        self.ready = Event()
        self._fn = fn
        self._stopped = Event()

    def run(self):
        while not self._stopped.is_set():
            self.run_once()
            self._stopped.wait(self.interval)

    def run_once(self) -> bool:
        """
        Run a single cycle.

        Returns:
            ``True`` if the cycle succeeded
        """
        try:
            succeeded = bool(self._fn())
        except Exception:
            logger.error("Task %s failed", self.name, exc_info=True)
            succeeded = False
        if succeeded and not self.ready.is_set():
            self.ready.set()
            logger.info("Task %s is ready", self.name)
        return succeeded

    def stop(self):
        """
        Stop the task after the current cycle
        """
        self._stopped.set()
