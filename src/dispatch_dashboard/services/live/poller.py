"""Fixed-interval simulation advance and live refresh."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Callable, Optional, Protocol

from ...config import settings
from ...errors import DashboardError
from .store import LiveOperationsStore

logger = logging.getLogger(__name__)


class SimulationBackend(Protocol):
    async def step_simulation(self) -> None: ...


class SimulationPoller:
    """Cancellable background task driving the simulation tick.

    Each tick asks the backend to advance the simulation, refreshes the store
    whether or not that succeeded, then calls ``on_tick`` to redraw. Unless
    overlap is allowed, an interval that fires while a tick is still in flight
    is skipped.
    """

    def __init__(
        self,
        backend: SimulationBackend,
        store: LiveOperationsStore,
        on_tick: Callable[[], None],
        interval_ms: int | None = None,
        allow_overlap: bool | None = None,
    ) -> None:
        self.backend = backend
        self.store = store
        self.on_tick = on_tick
        self.interval_ms = interval_ms if interval_ms is not None else settings.poll_interval_ms
        self.allow_overlap = allow_overlap if allow_overlap is not None else settings.allow_overlapping_ticks
        self._task: Optional[asyncio.Task] = None
        self._in_flight: set[asyncio.Task] = set()
        self.ticks_started = 0
        self.ticks_completed = 0
        self.ticks_skipped = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def tick_pending(self) -> bool:
        return bool(self._in_flight)

    def start(self) -> None:
        if self.running:
            return
        logger.info(f"Starting simulation poller every {self.interval_ms} ms")
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        """Cancel the timer and any tick still in flight."""
        tasks = [task for task in (self._task, *self._in_flight) if task is not None]
        self._task = None
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._in_flight.clear()
        if tasks:
            logger.info(
                f"Simulation poller stopped after {self.ticks_completed} ticks ({self.ticks_skipped} skipped)"
            )

    async def _run(self) -> None:
        interval = self.interval_ms / 1000.0
        while True:
            self._launch_tick()
            await asyncio.sleep(interval)

    def _launch_tick(self) -> None:
        if self._in_flight and not self.allow_overlap:
            self.ticks_skipped += 1
            logger.debug("Previous tick still in flight; skipping this interval")
            return
        self.ticks_started += 1
        task = asyncio.get_running_loop().create_task(self.tick())
        self._in_flight.add(task)
        task.add_done_callback(self._tick_done)

    def _tick_done(self, task: asyncio.Task) -> None:
        self._in_flight.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Simulation tick crashed: {exc!r}")

    async def tick(self) -> None:
        try:
            await self.backend.step_simulation()
        except DashboardError as exc:
            logger.warning(f"Simulation step failed: {exc}")
        await self.store.refresh()
        self.ticks_completed += 1
        self.on_tick()
