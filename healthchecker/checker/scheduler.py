"""Periodic driver for the check units.

One cycle runs every unit concurrently; units share nothing but the gauge
registry, where each writes only its own metrics.  At most one cycle is in
flight: a cycle requested while another runs is skipped, and ticks missed
because a cycle overran the interval are dropped rather than queued.

Stopping is cooperative.  ``stop()`` wakes the loop immediately if it is
waiting between ticks, but never interrupts a cycle already in progress.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence

from healthchecker.checker.base import CheckUnit
from healthchecker.observability.logging import get_logger

_log = get_logger("checker.scheduler")


class CheckScheduler:
    """Runs all check units on a fixed interval until stopped."""

    def __init__(self, units: Sequence[CheckUnit], interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self._units = tuple(units)
        self._interval = interval_seconds
        self._cycle_lock = asyncio.Lock()
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self._cycles_completed = 0

    @property
    def cycles_completed(self) -> int:
        return self._cycles_completed

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_cycle(self) -> bool:
        """Run every unit once.  Returns False if skipped because a cycle is in flight."""
        if self._cycle_lock.locked():
            _log.warning("check_cycle_skipped", reason="previous cycle still running")
            return False

        async with self._cycle_lock:
            cycle = self._cycles_completed + 1
            t_start = time.monotonic()
            _log.info("check_cycle_started", cycle=cycle)
            await asyncio.gather(*(self._run_unit(unit) for unit in self._units))
            self._cycles_completed = cycle
            _log.info(
                "check_cycle_completed",
                cycle=cycle,
                duration_ms=round((time.monotonic() - t_start) * 1000.0, 1),
            )
        return True

    async def _run_unit(self, unit: CheckUnit) -> None:
        # FetchError is handled inside the unit; anything else is a bug, but it
        # must not take down sibling units or the loop.
        try:
            await unit.run()
        except Exception as exc:  # noqa: BLE001
            _log.error("check_unit_crashed", check=unit.name, error=str(exc), exc_info=True)
            unit.fail_closed()

    async def _wait_for_stop(self, timeout: float) -> bool:
        """Sleep up to *timeout* seconds.  Returns True if stop was requested."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=timeout)
        except TimeoutError:
            return False
        return True

    async def run(self, initial_pass: bool = True) -> None:
        """Run cycles until ``stop()`` is called.

        With *initial_pass* a cycle runs immediately; otherwise the first
        cycle runs one interval from now.
        """
        loop = asyncio.get_running_loop()
        _log.info("scheduler started", interval_seconds=self._interval, units=[u.name for u in self._units])

        if initial_pass and not self._stop_event.is_set():
            await self.run_cycle()

        next_run = loop.time() + self._interval
        while not self._stop_event.is_set():
            if await self._wait_for_stop(max(0.0, next_run - loop.time())):
                break
            await self.run_cycle()

            next_run += self._interval
            now = loop.time()
            if next_run <= now:
                missed = int((now - next_run) // self._interval) + 1
                _log.warning("check_ticks_dropped", missed=missed, interval_seconds=self._interval)
                next_run += missed * self._interval

        _log.info("scheduler stopped", cycles_completed=self._cycles_completed)

    def start(self, initial_pass: bool = True) -> asyncio.Task[None]:
        """Launch ``run()`` as a background task."""
        if self.running:
            raise RuntimeError("scheduler already running")
        self._stop_event.clear()
        self._task = asyncio.create_task(self.run(initial_pass=initial_pass), name="check-scheduler")
        return self._task

    async def stop(self) -> None:
        """Stop scheduling new cycles and wait for any in-flight cycle to finish."""
        self._stop_event.set()
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)
            self._task = None
