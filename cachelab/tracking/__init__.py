from .latency_record import LatencyRecord as LatencyRecord
from .latency_tracker import LatencyTracker as LatencyTracker
from .latency_tracker_config import LatencyTrackerConfig as LatencyTrackerConfig
