from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class LatencyRecord:
    """A single settled operation: when timing began and how long it took."""

    timestamp: float  # monotonic seconds at invocation
    latency: float  # milliseconds
