# portfolio/sweeper.py
import logging
import threading
from dataclasses import dataclass
from datetime import timedelta

from .clock import utc_now
from .events import log_event

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 60 * 60
DEFAULT_RETENTION = timedelta(days=7)


@dataclass(frozen=True)
class SweepReport:
    credentials_removed: int
    requests_removed: int


class ExpirySweeper:
    """Background eviction of expired passwords and stale requests.

    Every run recomputes from the current time; nothing about previous
    runs is remembered.
    """

    def __init__(
        self,
        requests,
        credentials,
        clock=utc_now,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        retention: timedelta = DEFAULT_RETENTION,
        hook=log_event,
        lock=None,
    ):
        self.requests = requests
        self.credentials = credentials
        self.clock = clock
        self.interval_seconds = interval_seconds
        self.retention = retention
        self.hook = hook
        # pass AccessWorkflow.decision_lock so purges wait for in-flight decisions
        self.lock = lock if lock is not None else threading.Lock()
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()

    def run_once(self) -> SweepReport:
        credentials_removed = self.credentials.sweep_expired()

        requests_removed = 0
        with self.lock:
            cutoff = self.clock() - self.retention
            for request_id in self.requests.list_older_than(cutoff):
                if self.requests.delete(request_id):
                    requests_removed += 1

        report = SweepReport(credentials_removed, requests_removed)
        if credentials_removed or requests_removed:
            self.hook(
                "sweep_completed",
                credentials_removed=credentials_removed,
                requests_removed=requests_removed,
            )
        return report

    def _worker(self):
        while not self._stop_event.is_set():
            try:
                self.run_once()
            except Exception as exc:
                logger.exception("Expiry sweep failed")
                self.hook("sweep_failed", error=str(exc))
            self._stop_event.wait(self.interval_seconds)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._worker, name="expiry-sweeper", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 5.0):
        self._stop_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)
        self._thread = None
