"""Scheduled event runner.

Drains the hook registry's scheduled events (upload batches) on a fixed
interval. Uses asyncio tasks, no external scheduler dependency.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .config import load_settings
from .hooks import HookRegistry

logger = logging.getLogger(__name__)


class EventScheduler:
    """Runs `HookRegistry.run_scheduled` in a background loop."""

    def __init__(self, hooks: HookRegistry, interval_seconds: Optional[int] = None):
        self.hooks = hooks
        self._task: asyncio.Task | None = None
        self._running = False
        self._interval_seconds = interval_seconds or load_settings().cron_interval_seconds

    @property
    def running(self) -> bool:
        return self._running

    async def start(self):
        """Start the background drain loop."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info("Event scheduler started (interval: %d seconds)", self._interval_seconds)

    async def stop(self):
        """Stop the loop, then dispatch anything still pending."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        await self.run_pending()
        logger.info("Event scheduler stopped")

    async def run_pending(self) -> int:
        """Dispatch pending events now."""
        return await self.hooks.run_scheduled()

    async def _run_loop(self):
        while self._running:
            try:
                await asyncio.sleep(self._interval_seconds)
                if not self._running:
                    break
                await self.run_pending()
            except asyncio.CancelledError:
                break
            except Exception as exc:
                logger.error("Scheduled event run failed: %s", exc, exc_info=True)
