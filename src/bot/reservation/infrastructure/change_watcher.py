"""Background loop driving change notification polls.

Runs as an asyncio task inside the FastAPI application, started and stopped
by the application lifespan.
"""

from __future__ import annotations

import asyncio

from reservation.application.services import ChangeNotificationService
from reservation.infrastructure.observability import (
    ChangeWatcherProbe,
    DefaultChangeWatcherProbe,
)
from shared_kernel.observability_context import ObservationContext


class ChangeWatcher:
    """Calls ChangeNotificationService.poll_once on a fixed interval.

    A failed cycle is logged and the loop continues with the next tick.
    Stopping is cooperative: no new cycle starts once stop() is called, and
    a cycle already running is allowed to finish.
    """

    def __init__(
        self,
        service: ChangeNotificationService,
        poll_interval_seconds: float = 60,
        probe: ChangeWatcherProbe | None = None,
    ):
        if poll_interval_seconds <= 0:
            raise ValueError("poll_interval_seconds must be positive")
        self._service = service
        self._poll_interval = poll_interval_seconds
        self._probe = probe or DefaultChangeWatcherProbe()
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task | None = None
        self._poll_cycle = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def poll_cycle(self) -> int:
        """Number of cycles started so far."""
        return self._poll_cycle

    async def start(self) -> None:
        """Start the polling loop. Calling start twice is a no-op."""
        if self.is_running:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run())
        self._probe.watcher_started(poll_interval_seconds=self._poll_interval)

    async def stop(self) -> None:
        """Signal the loop to stop and wait for the current cycle to finish."""
        if self._task is None:
            return
        self._stop_event.set()
        await self._task
        self._task = None
        self._probe.watcher_stopped()

    async def run_once(self) -> None:
        """Run one poll cycle, logging instead of raising on failure."""
        self._poll_cycle += 1
        probe = self._probe.with_context(
            ObservationContext().with_poll_cycle(self._poll_cycle)
        )
        try:
            result = await self._service.poll_once()
        except Exception as e:
            probe.poll_cycle_failed(error=e)
            return
        probe.poll_completed(
            event_count=result.event_count,
            failure_count=len(result.failures),
        )

    async def _run(self) -> None:
        while not self._stop_event.is_set():
            await self.run_once()
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._poll_interval)
            except TimeoutError:
                continue
