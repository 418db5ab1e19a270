from pydantic import BaseModel, ConfigDict, StrictInt, field_validator

from cachelab.env.time_parser import TimeParser


class LatencyTrackerConfig(BaseModel):
    """
    Window and cleanup cadence for a LatencyTracker.

    Durations accept seconds or time strings ("500ms", "5s") and must be
    positive. max_samples optionally caps the retained set, dropping the
    oldest records on append.
    """

    model_config = ConfigDict(frozen=True)

    window: float
    cleanup_interval: float = 1.0
    max_samples: StrictInt | None = None

    @field_validator("window", "cleanup_interval", mode="before")
    @classmethod
    def parse_duration(cls, value: str | int | float) -> float:
        if isinstance(value, bool):
            raise ValueError("Err. - duration must be a number or time string")

        return TimeParser(value).time

    @field_validator("window", "cleanup_interval")
    @classmethod
    def check_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Err. - duration must be greater than zero")

        return value

    @field_validator("max_samples")
    @classmethod
    def check_max_samples(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            raise ValueError("Err. - max_samples must be at least 1")

        return value
