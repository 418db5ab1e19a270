"""
Sliding-window latency tracker.

Times arbitrary awaitables and keeps the samples that settled within the
configured window. A background cleanup cycle prunes stale samples and
recomputes the window average on a fixed cadence, independent of sample
arrival, so the reported average may trail live data by up to one cleanup
interval.
"""

from __future__ import annotations

import asyncio
import inspect
import math
import time
from typing import Any, Awaitable, Callable, TypeVar

from cachelab.logging import Logger
from cachelab.logging.cachelab_logging_models import TrackerDebug, TrackerInfo

from .latency_record import LatencyRecord
from .latency_tracker_config import LatencyTrackerConfig

T = TypeVar("T")

Operation = Awaitable[T] | Callable[[], Awaitable[T]]


class LatencyTracker:
    """
    Tracks completion latency of instrumented operations over a time window.

    All state is touched from a single event loop, so no locking is
    required. Records are appended in completion order.
    """

    def __init__(
        self,
        window: str | float = 5.0,
        cleanup_interval: str | float = 1.0,
        max_samples: int | None = None,
        clock: Callable[[], float] = time.monotonic,
        logger: Logger | None = None,
    ) -> None:
        self._config = LatencyTrackerConfig(
            window=window,
            cleanup_interval=cleanup_interval,
            max_samples=max_samples,
        )
        self._clock = clock

        self._owns_logger = logger is None
        self._logger = logger if logger is not None else Logger()

        self._records: list[LatencyRecord] = []
        self._average: int | None = None

        self._running = False
        self._cleanup_task: asyncio.Task | None = None

    @classmethod
    def from_config(
        cls,
        config: LatencyTrackerConfig,
        clock: Callable[[], float] = time.monotonic,
        logger: Logger | None = None,
    ) -> LatencyTracker:
        return cls(
            window=config.window,
            cleanup_interval=config.cleanup_interval,
            max_samples=config.max_samples,
            clock=clock,
            logger=logger,
        )

    @property
    def config(self) -> LatencyTrackerConfig:
        return self._config

    @property
    def window(self) -> float:
        return self._config.window

    @property
    def cleanup_interval(self) -> float:
        return self._config.cleanup_interval

    @property
    def running(self) -> bool:
        return self._running

    @property
    def average(self) -> int | None:
        return self._average

    @property
    def records(self) -> list[LatencyRecord]:
        return list(self._records)

    def configure(
        self,
        window: str | float,
        cleanup_interval: str | float = 1.0,
    ) -> None:
        """
        Replace the window and cleanup cadence.

        Raises pydantic.ValidationError (a ValueError) for non-positive or
        unparseable durations, leaving the current configuration in place.
        A running cleanup cycle is restarted on the new cadence.
        """
        self._config = LatencyTrackerConfig(
            window=window,
            cleanup_interval=cleanup_interval,
            max_samples=self._config.max_samples,
        )

        if self._running:
            self._restart_cleanup()

    async def start(self) -> None:
        if self._running:
            return

        self._running = True
        self._cleanup_task = asyncio.ensure_future(self._run_cleanup())

        await self._logger.log(
            TrackerInfo(
                message=f"Latency tracker started with {self._config.window}s window",
                window=self._config.window,
                sample_count=len(self._records),
            ),
            name="latency_tracker",
        )

    async def track(self, operation: Operation[T]) -> T:
        """
        Await operation, recording its latency whether it succeeds or fails.

        The operation's result is returned unchanged and any exception it
        raises is re-raised after the sample is recorded.
        """
        start = self._clock()

        try:
            if callable(operation) and not inspect.isawaitable(operation):
                operation = operation()

            return await operation

        finally:
            self._append(
                LatencyRecord(
                    timestamp=start,
                    latency=(self._clock() - start) * 1000.0,
                )
            )

    def cleanup(self, now: float | None = None) -> int | None:
        """
        Run one cleanup pass: drop records older than the window, then
        recompute the average. Returns the new average.
        """
        current_time = self._clock() if now is None else now
        window = self._config.window

        self._records = [
            record
            for record in self._records
            if current_time - record.timestamp <= window
        ]

        self._calculate_average()

        return self._average

    def current_average(self) -> int | None:
        return self._average

    def raw_samples(self) -> list[LatencyRecord]:
        return list(self._records)

    def stats(self) -> dict[str, Any]:
        return {
            "window": self._config.window,
            "cleanup_interval": self._config.cleanup_interval,
            "max_samples": self._config.max_samples,
            "sample_count": len(self._records),
            "average_ms": self._average,
            "running": self._running,
        }

    async def dispose(self) -> None:
        """
        Cancel the cleanup cycle. Operations already being tracked still
        record their samples, which then accumulate without pruning. An
        owned logger is closed whether or not the cycle was started.
        """
        if self._running:
            self._running = False
            await self._cancel_cleanup()

            await self._logger.log(
                TrackerInfo(
                    message="Latency tracker disposed",
                    window=self._config.window,
                    sample_count=len(self._records),
                ),
                name="latency_tracker",
            )

        if self._owns_logger:
            await self._logger.close()

    async def __aenter__(self) -> LatencyTracker:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.dispose()

    def _append(self, record: LatencyRecord) -> None:
        self._records.append(record)

        max_samples = self._config.max_samples
        if max_samples is not None and len(self._records) > max_samples:
            del self._records[: len(self._records) - max_samples]

    def _calculate_average(self) -> None:
        if len(self._records) < 1:
            self._average = None
            return

        total = sum(record.latency for record in self._records)

        # Half-up rounding; round() would round halves to even.
        self._average = math.floor(total / len(self._records) + 0.5)

    async def _run_cleanup(self) -> None:
        while self._running:
            await asyncio.sleep(self._config.cleanup_interval)

            self.cleanup()

            await self._logger.log(
                TrackerDebug(
                    message=f"Pruned latency window, average is now {self._average}ms",
                    window=self._config.window,
                    sample_count=len(self._records),
                ),
                name="latency_tracker",
            )

    def _restart_cleanup(self) -> None:
        if self._cleanup_task and not self._cleanup_task.done():
            self._cleanup_task.cancel()

        self._cleanup_task = asyncio.ensure_future(self._run_cleanup())

    async def _cancel_cleanup(self) -> None:
        if self._cleanup_task is None:
            return

        task = self._cleanup_task
        self._cleanup_task = None

        if not task.done():
            task.cancel()

        try:
            await task

        except asyncio.CancelledError:
            pass
