from .cache import CacheAsideClient as CacheAsideClient
from .env import Env as Env, load_env as load_env
from .harness import HarnessSnapshot as HarnessSnapshot, LatencyHarness as LatencyHarness
from .load import LoadGenerator as LoadGenerator
from .tracking import LatencyRecord as LatencyRecord, LatencyTracker as LatencyTracker
