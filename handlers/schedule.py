"""Fixed-rate trigger that invokes the entry point on a timer."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional
from uuid import uuid4

from core import ProcessResult


logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any]], Awaitable[ProcessResult]]

DEFAULT_INTERVAL_SEC = 300.0


def build_trigger_event(source: str = "legobot.schedule") -> Dict[str, Any]:
    return {
        "id": uuid4().hex,
        "source": source,
        "detail-type": "Scheduled Event",
        "time": datetime.now(timezone.utc).isoformat(timespec="seconds"),
    }


class PeriodicTrigger:
    """
    Runs ``handler`` every ``interval_sec`` seconds until stopped.

    Invocations are sequential; a slow one delays the next tick instead of
    overlapping it.
    """

    def __init__(self, handler: Handler, interval_sec: float = DEFAULT_INTERVAL_SEC) -> None:
        if interval_sec <= 0:
            raise ValueError("interval_sec must be positive")
        self._handler = handler
        self.interval_sec = float(interval_sec)
        self._running = False
        self._task: Optional[asyncio.Task] = None
        self._stop_event = asyncio.Event()
        self.results: List[ProcessResult] = []

    @property
    def is_running(self) -> bool:
        return self._running

    async def tick(self) -> ProcessResult:
        """Invoke the handler once with a fresh trigger event."""
        result = await self._handler(build_trigger_event())
        self.results.append(result)
        if result.success:
            logger.info("Invocation succeeded")
        else:
            logger.warning("Invocation failed: %s", result.error.message if result.error else "unknown")
        return result

    async def start(self) -> None:
        if self._running:
            logger.warning("PeriodicTrigger is already running")
            return
        self._running = True
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run_loop())
        logger.info("PeriodicTrigger started, every %.0f seconds", self.interval_sec)

    async def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self._stop_event.set()
        if self._task is not None:
            try:
                await self._task
            finally:
                self._task = None
        logger.info("PeriodicTrigger stopped")

    async def run_forever(self) -> None:
        await self.start()
        if self._task is not None:
            await self._task

    async def _run_loop(self) -> None:
        while self._running:
            try:
                await self.tick()
            except Exception as e:
                logger.exception("Error in trigger loop: %s", e)

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_sec)
                break
            except asyncio.TimeoutError:
                continue
