import asyncio
import random
import string

from cachelab.env.time_parser import TimeParser


ALPHANUMERIC = string.ascii_letters + string.digits


def generate_random_string(length: int, rng: random.Random | None = None) -> str:
    if length < 0:
        raise ValueError("Err. - length must not be negative")

    rng = rng or random
    return "".join(rng.choices(ALPHANUMERIC, k=length))


class MockStore:
    """
    In-memory stand-in for a backing database.

    Every read sleeps for a delay drawn uniformly from [delay_min, delay_max]
    before answering, whether or not the key exists. Entries are never
    evicted.
    """

    def __init__(
        self,
        delay_min: str | float = 0.2,
        delay_max: str | float = 0.4,
        rng: random.Random | None = None,
    ) -> None:
        self._delay_min = TimeParser(delay_min).time
        self._delay_max = TimeParser(delay_max).time

        if self._delay_min < 0 or self._delay_max < self._delay_min:
            raise ValueError(
                "Err. - store delay range must satisfy 0 <= delay_min <= delay_max"
            )

        self._rng = rng or random.Random()
        self._data: dict[str, str] = {}
        self.reads = 0

    @property
    def delay_range(self) -> tuple[float, float]:
        return self._delay_min, self._delay_max

    async def read(self, key: str) -> str | None:
        await asyncio.sleep(self._rng.uniform(self._delay_min, self._delay_max))
        self.reads += 1

        return self._data.get(key)

    def put(self, key: str, value: str) -> None:
        self._data[key] = value

    def keys(self) -> list[str]:
        return list(self._data)

    def random_key(self) -> str | None:
        if len(self._data) < 1:
            return None

        return self._rng.choice(list(self._data))

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)
