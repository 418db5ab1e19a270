"""
Pytest configuration shared by the cachelab test suite.

Async tests are marked with @pytest.mark.asyncio (pytest-asyncio).
"""

import asyncio
import random
from unittest.mock import AsyncMock, MagicMock

import pytest

from cachelab.cache import CacheAsideClient, InMemoryCacheTier, MockStore
from cachelab.logging.models import Entry, LogLevel


class FakeClock:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


def create_mock_stream_writer() -> MagicMock:
    mock_writer = MagicMock(spec=asyncio.StreamWriter)
    mock_writer.write = MagicMock()
    mock_writer.drain = AsyncMock()
    mock_writer.close = MagicMock()
    mock_writer.wait_closed = AsyncMock()
    mock_writer.is_closing = MagicMock(return_value=False)
    return mock_writer


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_stdout_writer() -> MagicMock:
    return create_mock_stream_writer()


@pytest.fixture
def mock_stderr_writer() -> MagicMock:
    return create_mock_stream_writer()


@pytest.fixture
def temp_log_directory(tmp_path) -> str:
    return str(tmp_path)


@pytest.fixture
def sample_entry() -> Entry:
    return Entry(
        message="Test log message",
        level=LogLevel.INFO,
    )


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1337)


@pytest.fixture
def fast_store(rng: random.Random) -> MockStore:
    return MockStore(delay_min=0.01, delay_max=0.02, rng=rng)


@pytest.fixture
def cache_tier() -> InMemoryCacheTier:
    return InMemoryCacheTier(max_entries=64)


@pytest.fixture
def client(
    fast_store: MockStore,
    cache_tier: InMemoryCacheTier,
    rng: random.Random,
) -> CacheAsideClient:
    return CacheAsideClient(
        store=fast_store,
        cache=cache_tier,
        cache_enabled=True,
        rng=rng,
    )
