"""
Composes the cache-aside client, latency tracker, and load generator into
one session driven by an Env. External displays read HarnessSnapshot;
operators drive it through set_frequency, set_cache_enabled, start_load,
and stop_load.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from cachelab.cache import CacheAsideClient, InMemoryCacheTier, MockStore
from cachelab.env import Env
from cachelab.logging import Logger, LoggingConfig
from cachelab.logging.cachelab_logging_models import HarnessInfo
from cachelab.load import LoadGenerator
from cachelab.tracking import LatencyRecord, LatencyTracker


@dataclass(slots=True, frozen=True)
class HarnessSnapshot:
    average_ms: int | None
    samples: list[LatencyRecord] = field(default_factory=list)
    frequency: int = 1
    running: bool = False
    cache_enabled: bool = False
    in_flight: int = 0


class LatencyHarness:
    def __init__(
        self,
        env: Env | None = None,
        request: Callable[[], Awaitable[Any]] | None = None,
        rng: random.Random | None = None,
        logger: Logger | None = None,
    ) -> None:
        if env is None:
            env = Env()

        self._env = env

        logging_config = LoggingConfig()
        logging_config.update(
            log_level=env.CACHELAB_LOG_LEVEL,
            log_output=env.CACHELAB_LOG_OUTPUT,
        )

        self._owns_logger = logger is None
        self._logger = logger if logger else Logger()

        rng = rng or random.Random()

        self.store = MockStore(
            delay_min=env.CACHELAB_STORE_DELAY_MIN,
            delay_max=env.CACHELAB_STORE_DELAY_MAX,
            rng=rng,
        )
        self.cache = InMemoryCacheTier(
            max_entries=env.CACHELAB_CACHE_MAX_ENTRIES,
            delay=env.CACHELAB_CACHE_DELAY,
            mode=env.CACHELAB_CACHE_MODE,
            max_bytes=env.CACHELAB_CACHE_MAX_BYTES,
        )
        self.client = CacheAsideClient(
            store=self.store,
            cache=self.cache,
            cache_enabled=env.CACHELAB_CACHE_ENABLED,
            rng=rng,
            logger=self._logger,
        )
        self.tracker = LatencyTracker(
            window=env.CACHELAB_LATENCY_WINDOW,
            cleanup_interval=env.CACHELAB_LATENCY_CLEANUP_INTERVAL,
            max_samples=env.CACHELAB_LATENCY_MAX_SAMPLES,
            logger=self._logger,
        )
        self.generator = LoadGenerator(
            request if request else self.client.random_fetch,
            self.tracker,
            frequency=env.CACHELAB_LOAD_FREQUENCY,
            tick=env.CACHELAB_LOAD_TICK,
            min_frequency=env.CACHELAB_LOAD_MIN_FREQUENCY,
            max_frequency=env.CACHELAB_LOAD_MAX_FREQUENCY,
            logger=self._logger,
        )

    @property
    def env(self) -> Env:
        return self._env

    async def start(self) -> None:
        await self.tracker.start()

        await self._logger.log(
            HarnessInfo(
                message="Latency harness started",
                cache_enabled=self.client.cache_enabled,
                frequency=self.generator.frequency,
            ),
            name="latency_harness",
        )

    async def seed_random(
        self,
        count: int | None = None,
        size: int | None = None,
    ) -> list[str]:
        return await self.client.seed_random(
            self._env.CACHELAB_SEED_COUNT if count is None else count,
            self._env.CACHELAB_SEED_SIZE if size is None else size,
        )

    async def start_load(self, ticks: int | None = None) -> None:
        await self.generator.start(ticks=ticks)

    async def stop_load(self) -> None:
        await self.generator.stop()

    def set_frequency(self, frequency: int) -> None:
        self.generator.set_frequency(frequency)

    def set_cache_enabled(self, enabled: bool) -> None:
        self.client.set_cache_enabled(enabled)

    def snapshot(self) -> HarnessSnapshot:
        return HarnessSnapshot(
            average_ms=self.tracker.current_average(),
            samples=self.tracker.raw_samples(),
            frequency=self.generator.frequency,
            running=self.generator.running,
            cache_enabled=self.client.cache_enabled,
            in_flight=self.generator.in_flight,
        )

    async def close(self) -> None:
        await self.generator.stop()
        await self.generator.wait_for_in_flight()
        await self.client.drain()
        await self.tracker.dispose()

        await self._logger.log(
            HarnessInfo(
                message="Latency harness closed",
                cache_enabled=self.client.cache_enabled,
                frequency=self.generator.frequency,
            ),
            name="latency_harness",
        )

        if self._owns_logger:
            await self._logger.close()

    async def __aenter__(self) -> LatencyHarness:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
