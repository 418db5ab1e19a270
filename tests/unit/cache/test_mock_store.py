import asyncio
import random
import string

import pytest

from cachelab.cache import MockStore, generate_random_string


class TestMockStore:
    """Test the simulated backing store."""

    @pytest.mark.asyncio
    async def test_read_incurs_delay(self) -> None:
        loop = asyncio.get_running_loop()
        store = MockStore(delay_min=0.05, delay_max=0.06)
        store.put("k", "v")

        started = loop.time()
        value = await store.read("k")

        assert value == "v"
        assert loop.time() - started >= 0.045
        assert store.reads == 1

    @pytest.mark.asyncio
    async def test_missing_key_still_delays(self) -> None:
        loop = asyncio.get_running_loop()
        store = MockStore(delay_min="50ms", delay_max="60ms")

        started = loop.time()

        assert await store.read("absent") is None
        assert loop.time() - started >= 0.045
        assert store.reads == 1

    @pytest.mark.parametrize(
        "delay_min,delay_max",
        [
            (-0.1, 0.2),
            (0.4, 0.2),
            ("-50ms", "100ms"),
            ("50ms", "1.0.0s"),
        ],
    )
    def test_rejects_invalid_delay_range(self, delay_min, delay_max) -> None:
        with pytest.raises(ValueError):
            MockStore(delay_min=delay_min, delay_max=delay_max)

    def test_default_delay_range(self) -> None:
        assert MockStore().delay_range == (0.2, 0.4)

    def test_random_key(self) -> None:
        store = MockStore(rng=random.Random(3))

        assert store.random_key() is None

        store.put("a", "1")
        store.put("b", "2")

        assert store.random_key() in ("a", "b")
        assert sorted(store.keys()) == ["a", "b"]


class TestGenerateRandomString:
    def test_length_and_alphabet(self) -> None:
        value = generate_random_string(64, rng=random.Random(1))

        assert len(value) == 64
        assert set(value) <= set(string.ascii_letters + string.digits)

    def test_seeded_rng_is_deterministic(self) -> None:
        assert generate_random_string(16, rng=random.Random(9)) == generate_random_string(
            16, rng=random.Random(9)
        )

    def test_rejects_negative_length(self) -> None:
        with pytest.raises(ValueError):
            generate_random_string(-1)
