from __future__ import annotations

from enum import Enum
from typing import Literal

CacheModeName = Literal[
    "item",
    "capacity",
    "unlimited",
]


class CacheMode(Enum):
    """
    How an in-memory cache tier bounds its contents.

    ITEM caps the number of entries, CAPACITY caps the total encoded size
    of the stored values in bytes, and UNLIMITED never evicts.
    """

    ITEM = "item"
    CAPACITY = "capacity"
    UNLIMITED = "unlimited"

    @classmethod
    def parse(cls, mode: CacheMode | str) -> CacheMode:
        if isinstance(mode, CacheMode):
            return mode

        try:
            return cls(mode.lower())

        except ValueError:
            raise ValueError(
                f"Err. - unknown cache mode {mode!r}, expected one of "
                f"{', '.join(member.value for member in cls)}"
            ) from None
