"""Background scheduler that repeats sync cycles on a fixed interval."""

from __future__ import annotations

import threading
from typing import Optional, Protocol

from clubfeed.errors import SyncError
from clubfeed.utils.logging import get_logger

logger = get_logger(__name__)


class Cycle(Protocol):
    def run_cycle(self) -> object: ...  # noqa: D401


class SyncScheduler:
    """Runs one cycle, idles for ``interval_seconds``, repeats until stopped.

    Exactly one cycle is in flight at a time: the loop runs on a single
    thread and each cycle finishes, idle included, before the next starts.
    Cancellation is checked before every cycle; a stop requested during the
    idle phase wakes the loop immediately, but a cycle already in progress
    is never interrupted.
    """

    def __init__(self, service: Cycle, interval_seconds: float, *, name: str = "clubfeed-sync") -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._service = service
        self._interval = float(interval_seconds)
        self._name = name
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self.cycles_attempted = 0

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        with self._lock:
            if self.is_running:
                return
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
            self._thread.start()
        logger.info("scheduler.start", extra={"interval_seconds": self._interval})

    def stop(self, timeout: Optional[float] = None) -> None:
        with self._lock:
            thread = self._thread
            self._stop_event.set()
        if thread is not None:
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("scheduler.stop.timeout", extra={"timeout": timeout})
                return
        with self._lock:
            self._thread = None

    def _run(self) -> None:
        while not self._stop_event.is_set():
            self.run_once()
            if self._stop_event.wait(self._interval):
                break
        logger.info("scheduler.stop", extra={"cycles_attempted": self.cycles_attempted})

    def run_once(self) -> None:
        """Run a single cycle, logging instead of raising on failure."""
        self.cycles_attempted += 1
        try:
            self._service.run_cycle()
        except SyncError as exc:
            logger.warning("sync.cycle.failed", extra={"kind": exc.kind, "error": str(exc)})
        except Exception:  # noqa: BLE001 - a broken cycle must not end the loop
            logger.exception("sync.cycle.crashed")
