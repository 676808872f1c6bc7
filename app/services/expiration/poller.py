"""Background loop that runs the expiration detector on a fixed interval."""

import asyncio
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas.expiration import ExpirationCheckResult
from app.services.expiration.detector import PolicyExpirationService
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

DetectorFactory = Callable[[AsyncSession], PolicyExpirationService]


class PollerState(str, Enum):
    """Lifecycle states of the expiration poller."""

    STARTING = "starting"
    IDLE_WAIT = "idle_wait"
    SCANNING = "scanning"
    STOPPING = "stopping"
    STOPPED = "stopped"


class PolicyExpirationPoller:
    """Single-task control loop around ``PolicyExpirationService``.

    Each iteration opens a fresh session from ``session_factory`` and closes
    it when the scan ends. A failed scan is logged and followed by
    ``error_backoff_seconds`` of waiting; it never ends the loop. ``stop()``
    is observed only while waiting (warm-up or between scans), so a scan in
    progress always runs to completion.
    """

    def __init__(
        self,
        session_factory: Callable[[], Any],
        check_interval_seconds: float,
        max_hours_since_expiration: int,
        startup_delay_seconds: float = 10.0,
        error_backoff_seconds: float = 60.0,
        detector_factory: Optional[DetectorFactory] = None,
    ):
        """Initialize the poller.

        Args:
            session_factory: Callable returning an async context manager that yields a session
            check_interval_seconds: Wait after a successful scan
            max_hours_since_expiration: Threshold passed to the detector
            startup_delay_seconds: Warm-up wait before the first scan
            error_backoff_seconds: Wait after a failed scan
            detector_factory: Builds the detector for a session; defaults to PolicyExpirationService
        """
        self.session_factory = session_factory
        self.check_interval_seconds = check_interval_seconds
        self.max_hours_since_expiration = max_hours_since_expiration
        self.startup_delay_seconds = startup_delay_seconds
        self.error_backoff_seconds = error_backoff_seconds
        self.detector_factory = detector_factory or self._default_detector

        self.state = PollerState.STOPPED
        self.scan_count = 0
        self.failure_count = 0
        self.last_scan_at: Optional[datetime] = None
        self.last_error: Optional[str] = None

        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    def _default_detector(self, session: AsyncSession) -> PolicyExpirationService:
        return PolicyExpirationService(session, self.max_hours_since_expiration)

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Schedule the loop on the running event loop; no-op if already running."""
        if self.is_running:
            return self._task
        self._stop_event.clear()
        self._task = asyncio.create_task(self.run(), name="policy-expiration-poller")
        return self._task

    async def stop(self) -> None:
        """Request shutdown and wait for the loop to finish its current step."""
        self._stop_event.set()
        if self._task is not None:
            await self._task
            self._task = None

    async def _wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds``; return True if a stop was requested."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
            return True
        except asyncio.TimeoutError:
            return False

    async def run_once(self) -> ExpirationCheckResult:
        """Run one scan inside its own session scope."""
        async with self.session_factory() as session:
            detector = self.detector_factory(session)
            return await detector.check_and_log_expired_policies()

    async def run(self) -> None:
        """Loop until ``stop()`` is called or the task is cancelled."""
        self.state = PollerState.STARTING
        LOGGER.info(
            f"Policy expiration poller started at {datetime.now().isoformat()}. "
            f"Check interval: {self.check_interval_seconds}s"
        )

        try:
            stop_requested = await self._wait(self.startup_delay_seconds)

            while not stop_requested:
                self.state = PollerState.SCANNING
                LOGGER.debug(f"Checking for expired policies at {datetime.now().isoformat()}")
                try:
                    await self.run_once()
                    delay = self.check_interval_seconds
                except Exception as e:
                    self.failure_count += 1
                    self.last_error = str(e)
                    LOGGER.error(
                        "Error occurred while checking for expired policies.",
                        exc_info=True,
                        extra={"error": str(e), "failures": self.failure_count},
                    )
                    delay = self.error_backoff_seconds
                finally:
                    self.scan_count += 1
                    self.last_scan_at = datetime.now()

                self.state = PollerState.IDLE_WAIT
                stop_requested = await self._wait(delay)

            self.state = PollerState.STOPPING
        finally:
            self.state = PollerState.STOPPED
            LOGGER.info(f"Policy expiration poller stopped at {datetime.now().isoformat()}.")

    def status(self) -> dict:
        """Snapshot of the poller for health reporting."""
        return {
            "state": self.state.value,
            "scans": self.scan_count,
            "failures": self.failure_count,
            "last_scan_at": self.last_scan_at.isoformat() if self.last_scan_at else None,
            "last_error": self.last_error,
        }
