from typing import Callable, Dict, Literal, Union

from pydantic import BaseModel, StrictBool, StrictInt, StrictStr

PrimaryType = Union[str, int, float, bytes, bool]


def to_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Env(BaseModel):
    CACHELAB_LOG_LEVEL: StrictStr = "info"
    CACHELAB_LOG_OUTPUT: Literal["stdout", "stderr"] = "stderr"
    CACHELAB_LATENCY_WINDOW: StrictStr = "5s"
    CACHELAB_LATENCY_CLEANUP_INTERVAL: StrictStr = "1s"
    CACHELAB_LATENCY_MAX_SAMPLES: StrictInt | None = None
    CACHELAB_STORE_DELAY_MIN: StrictStr = "200ms"
    CACHELAB_STORE_DELAY_MAX: StrictStr = "400ms"
    CACHELAB_CACHE_MAX_ENTRIES: StrictInt = 1024
    CACHELAB_CACHE_MODE: Literal["item", "capacity", "unlimited"] = "item"
    CACHELAB_CACHE_MAX_BYTES: StrictInt = 1048576
    CACHELAB_CACHE_DELAY: StrictStr = "0s"
    CACHELAB_CACHE_ENABLED: StrictBool = False
    CACHELAB_LOAD_TICK: StrictStr = "1s"
    CACHELAB_LOAD_FREQUENCY: StrictInt = 1
    CACHELAB_LOAD_MIN_FREQUENCY: StrictInt = 1
    CACHELAB_LOAD_MAX_FREQUENCY: StrictInt = 200
    CACHELAB_SEED_COUNT: StrictInt = 100
    CACHELAB_SEED_SIZE: StrictInt = 1024

    @classmethod
    def types_map(cls) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "CACHELAB_LOG_LEVEL": str,
            "CACHELAB_LOG_OUTPUT": str,
            "CACHELAB_LATENCY_WINDOW": str,
            "CACHELAB_LATENCY_CLEANUP_INTERVAL": str,
            "CACHELAB_LATENCY_MAX_SAMPLES": int,
            "CACHELAB_STORE_DELAY_MIN": str,
            "CACHELAB_STORE_DELAY_MAX": str,
            "CACHELAB_CACHE_MAX_ENTRIES": int,
            "CACHELAB_CACHE_MODE": str,
            "CACHELAB_CACHE_MAX_BYTES": int,
            "CACHELAB_CACHE_DELAY": str,
            "CACHELAB_CACHE_ENABLED": to_bool,
            "CACHELAB_LOAD_TICK": str,
            "CACHELAB_LOAD_FREQUENCY": int,
            "CACHELAB_LOAD_MIN_FREQUENCY": int,
            "CACHELAB_LOAD_MAX_FREQUENCY": int,
            "CACHELAB_SEED_COUNT": int,
            "CACHELAB_SEED_SIZE": int,
        }
