from dataclasses import dataclass
from enum import Enum


class CacheLookupStatus(Enum):
    HIT = "HIT"
    MISS = "MISS"
    UNAVAILABLE = "UNAVAILABLE"


@dataclass(slots=True, frozen=True)
class CacheLookup:
    key: str
    status: CacheLookupStatus
    value: str | None = None
    error: Exception | None = None

    @property
    def hit(self) -> bool:
        return self.status == CacheLookupStatus.HIT
