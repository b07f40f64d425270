"""
Refresh scheduler.

Runs LeaderboardService.refresh_all on a fixed interval until stopped.
Tests do not need it: they call refresh_all directly.
"""

import asyncio
import logging
from typing import Optional

from arena.services.leaderboard_service import LeaderboardService

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """Periodic refresh loop with an explicit stop event."""

    def __init__(self, leaderboard: LeaderboardService, interval_seconds: float = 30.0):
        self.leaderboard = leaderboard
        self.interval_seconds = max(1.0, interval_seconds)
        self._task: Optional[asyncio.Task] = None
        self._stop_event = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the background loop (idempotent)."""
        if self.running:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run_loop(), name="leaderboard-refresh")
        logger.info(f"⏱️ Leaderboard refresh every {self.interval_seconds:.0f}s")

    async def stop(self) -> None:
        """Stop the loop and wait for the current cycle to finish or cancel."""
        self._stop_event.set()
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None

    async def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                await self.leaderboard.refresh_all()
            except Exception:
                logger.exception("Refresh cycle failed")

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                pass
