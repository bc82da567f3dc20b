"""Periodic market data refresh on the event loop."""

import asyncio
import logging
from typing import Optional

from stockfolio.services.dashboard_service import DashboardService

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """
    Calls :meth:`DashboardService.refresh` every ``interval_seconds``.

    The blocking refresh runs in a worker thread so the loop stays free.
    Overlapping ticks are skipped by the dashboard's own refresh lock.
    """

    def __init__(self, dashboard: DashboardService, interval_seconds: float = 60.0):
        self._dashboard = dashboard
        self._interval = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self) -> None:
        while True:
            try:
                await asyncio.to_thread(self._dashboard.refresh)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Scheduled market data refresh failed")
            await asyncio.sleep(self._interval)

    def start(self) -> None:
        """Start the loop on the running event loop (no-op if already running)."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info("Market data refresh every %.0fs", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
