"""Job poller: queries a video job until the vendor reports a terminal state."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

import structlog

from src.live_auctioneer.errors import PollingFailure
from src.live_auctioneer.models.video import Job, JobState

logger = structlog.get_logger()

LIVE_NOTICE = "Auction Live!"
VENDOR_ERROR_NOTICE = "Error starting auction"


class PollerState(str, Enum):
    submitted = "submitted"
    polling = "polling"
    completed = "completed"
    failed = "failed"
    cancelled = "cancelled"


@dataclass
class PollOutcome:
    job_id: str
    state: PollerState
    attempts: int
    result_url: str | None = None
    error: PollingFailure | None = None


class JobPoller:
    """Polls ``fetch_status`` immediately, then every ``interval`` seconds.

    Without ``max_attempts`` the loop has no cap: a job that never turns
    terminal keeps it running until ``cancel()``. Transport or parse errors end
    the loop at once; only "still processing" answers are retried.
    """

    def __init__(
        self,
        fetch_status: Callable[[str], Awaitable[Job]],
        interval: float = 2.0,
        max_attempts: int | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_notice: Callable[[str], None] | None = None,
    ) -> None:
        self.fetch_status = fetch_status
        self.interval = interval
        self.max_attempts = max_attempts
        self._sleep = sleep
        self._on_notice = on_notice
        self.state = PollerState.submitted
        self.transitions: list[PollerState] = []
        self._task: asyncio.Task | None = None

    def _enter(self, state: PollerState) -> None:
        self.state = state
        self.transitions.append(state)

    def _notify(self, notice: str) -> None:
        if self._on_notice is not None:
            self._on_notice(notice)

    def _fail(self, job_id: str, attempts: int, error: PollingFailure, notice: str) -> PollOutcome:
        self._enter(PollerState.failed)
        self._notify(notice)
        return PollOutcome(job_id=job_id, state=self.state, attempts=attempts, error=error)

    async def run(self, job_id: str) -> PollOutcome:
        attempts = 0
        try:
            while True:
                self._enter(PollerState.polling)
                attempts += 1
                try:
                    job = await self.fetch_status(job_id)
                except Exception as e:
                    logger.error("Error checking video status", job_id=job_id, error=str(e))
                    message = getattr(e, "message", None) or str(e) or "Unknown error"
                    return self._fail(
                        job_id, attempts, PollingFailure(message), f"Error: {message}"
                    )

                if job.state == JobState.done and job.result_url:
                    self._enter(PollerState.completed)
                    logger.info("Video ready", job_id=job_id, attempts=attempts)
                    self._notify(LIVE_NOTICE)
                    return PollOutcome(
                        job_id=job_id,
                        state=self.state,
                        attempts=attempts,
                        result_url=job.result_url,
                    )

                if job.state == JobState.error:
                    logger.warning("Vendor reported job error", job_id=job_id)
                    return self._fail(
                        job_id, attempts, PollingFailure(VENDOR_ERROR_NOTICE), VENDOR_ERROR_NOTICE
                    )

                self._notify(f"Preparing: {job.raw_status}")

                if self.max_attempts is not None and attempts >= self.max_attempts:
                    logger.warning("Polling gave up", job_id=job_id, attempts=attempts)
                    message = f"Video not ready after {attempts} checks"
                    return self._fail(
                        job_id, attempts, PollingFailure(message), f"Error: {message}"
                    )

                await self._sleep(self.interval)
        except asyncio.CancelledError:
            self._enter(PollerState.cancelled)
            logger.info("Polling cancelled", job_id=job_id, attempts=attempts)
            raise

    def start(self, job_id: str) -> asyncio.Task:
        """Run the loop as a background task on the current event loop."""
        self._task = asyncio.get_running_loop().create_task(self.run(job_id))
        return self._task

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
