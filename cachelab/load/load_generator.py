"""
Tick-driven synthetic load.

Every tick fires `frequency` concurrent requests, each timed by a
LatencyTracker, without waiting on earlier ticks. There is no backpressure:
when frequency times request latency exceeds the tick, in-flight requests
grow without bound.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

from cachelab.logging import Logger
from cachelab.logging.cachelab_logging_models import LoadDebug, LoadError, LoadInfo
from cachelab.tracking import LatencyTracker

from .load_generator_config import LoadGeneratorConfig


class LoadGenerator:
    def __init__(
        self,
        request: Callable[[], Awaitable[Any]],
        tracker: LatencyTracker,
        frequency: int = 1,
        tick: str | float = 1.0,
        min_frequency: int = 1,
        max_frequency: int = 200,
        logger: Logger | None = None,
    ) -> None:
        self._request = request
        self._tracker = tracker
        self._config = LoadGeneratorConfig(
            frequency=frequency,
            tick=tick,
            min_frequency=min_frequency,
            max_frequency=max_frequency,
        )

        self._owns_logger = logger is None
        self._logger = logger if logger else Logger()

        self._running = False
        self._tick_task: asyncio.Task | None = None
        self._remaining_ticks: int | None = None
        self._in_flight: set[asyncio.Task] = set()

        self._ticks_fired = 0
        self._requests_fired = 0
        self._requests_failed = 0

    @classmethod
    def from_config(
        cls,
        config: LoadGeneratorConfig,
        request: Callable[[], Awaitable[Any]],
        tracker: LatencyTracker,
        logger: Logger | None = None,
    ) -> LoadGenerator:
        return cls(
            request,
            tracker,
            frequency=config.frequency,
            tick=config.tick,
            min_frequency=config.min_frequency,
            max_frequency=config.max_frequency,
            logger=logger,
        )

    @property
    def config(self) -> LoadGeneratorConfig:
        return self._config

    @property
    def frequency(self) -> int:
        return self._config.frequency

    @property
    def tick(self) -> float:
        return self._config.tick

    @property
    def running(self) -> bool:
        return self._running

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    @property
    def ticks_fired(self) -> int:
        return self._ticks_fired

    @property
    def requests_fired(self) -> int:
        return self._requests_fired

    @property
    def requests_failed(self) -> int:
        return self._requests_failed

    def set_frequency(self, frequency: int) -> None:
        """
        Change requests per tick. Out of bounds values raise ValueError.

        While running, the tick loop is restarted so the very next tick
        fires at the new rate.
        """
        self._config = LoadGeneratorConfig(
            **{
                **self._config.model_dump(),
                "frequency": frequency,
            }
        )

        if self._running:
            self._restart_ticks()

            self._logger.schedule(
                LoadInfo(
                    message=f"Load frequency set to {frequency} requests per tick",
                    frequency=frequency,
                    tick=self._config.tick,
                ),
                name="load_generator",
            )

    async def start(self, ticks: int | None = None) -> None:
        """
        Begin ticking. The first tick fires one tick period after start.
        When ticks is given the generator stops itself after that many.
        """
        if ticks is not None and ticks < 1:
            raise ValueError("Err. - ticks must be at least 1")

        if self._running:
            return

        self._running = True
        self._remaining_ticks = ticks
        self._tick_task = asyncio.ensure_future(self._run_ticks())

        await self._logger.log(
            LoadInfo(
                message=f"Load generator started at {self._config.frequency} requests per {self._config.tick}s",
                frequency=self._config.frequency,
                tick=self._config.tick,
            ),
            name="load_generator",
        )

    async def stop(self) -> None:
        """Stop scheduling ticks. Requests already in flight keep running."""
        if self._running is False and self._tick_task is None:
            return

        self._running = False

        task = self._tick_task
        self._tick_task = None

        if task and not task.done():
            task.cancel()

            try:
                await task

            except asyncio.CancelledError:
                pass

        await self._logger.log(
            LoadInfo(
                message=f"Load generator stopped with {len(self._in_flight)} requests in flight",
                frequency=self._config.frequency,
                tick=self._config.tick,
            ),
            name="load_generator",
        )

    async def wait_for_in_flight(self) -> None:
        if self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    async def wait_until_stopped(self) -> None:
        if self._tick_task:
            try:
                await self._tick_task

            except asyncio.CancelledError:
                pass

    async def close(self) -> None:
        await self.stop()

        if self._owns_logger:
            await self._logger.close()

    def stats(self) -> dict[str, Any]:
        return {
            "frequency": self._config.frequency,
            "tick": self._config.tick,
            "running": self._running,
            "in_flight": len(self._in_flight),
            "ticks_fired": self._ticks_fired,
            "requests_fired": self._requests_fired,
            "requests_failed": self._requests_failed,
        }

    async def __aenter__(self) -> LoadGenerator:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _run_ticks(self) -> None:
        while self._running:
            await asyncio.sleep(self._config.tick)

            self._fire_tick()

            if self._remaining_ticks is not None:
                self._remaining_ticks -= 1

                if self._remaining_ticks < 1:
                    self._running = False

    def _fire_tick(self) -> None:
        frequency = self._config.frequency
        self._ticks_fired += 1

        for _ in range(frequency):
            task = asyncio.ensure_future(self._issue_request())
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)

        self._requests_fired += frequency

        self._logger.schedule(
            LoadDebug(
                message=f"Tick {self._ticks_fired} fired {frequency} requests, {len(self._in_flight)} in flight",
                frequency=frequency,
                tick=self._config.tick,
            ),
            name="load_generator",
        )

    async def _issue_request(self) -> None:
        try:
            await self._tracker.track(self._request)

        except Exception as err:
            self._requests_failed += 1

            await self._logger.log(
                LoadError(
                    message=f"Request failed - {err}",
                    frequency=self._config.frequency,
                    tick=self._config.tick,
                ),
                name="load_generator",
            )

    def _restart_ticks(self) -> None:
        if self._tick_task and not self._tick_task.done():
            self._tick_task.cancel()

        self._tick_task = asyncio.ensure_future(self._run_ticks())
