from .models import Entry, LogLevel


class TrackerDebug(Entry, kw_only=True):
    window: float
    sample_count: int
    level: LogLevel = LogLevel.DEBUG

class TrackerInfo(Entry, kw_only=True):
    window: float
    sample_count: int
    level: LogLevel = LogLevel.INFO

class CacheAccessDebug(Entry, kw_only=True):
    key: str
    cache_enabled: bool
    level: LogLevel = LogLevel.DEBUG

class CacheAccessInfo(Entry, kw_only=True):
    key: str
    cache_enabled: bool
    level: LogLevel = LogLevel.INFO

class CacheAccessError(Entry, kw_only=True):
    key: str
    cache_enabled: bool
    level: LogLevel = LogLevel.ERROR

class LoadDebug(Entry, kw_only=True):
    frequency: int
    tick: float
    level: LogLevel = LogLevel.DEBUG

class LoadInfo(Entry, kw_only=True):
    frequency: int
    tick: float
    level: LogLevel = LogLevel.INFO

class LoadError(Entry, kw_only=True):
    frequency: int
    tick: float
    level: LogLevel = LogLevel.ERROR

class HarnessInfo(Entry, kw_only=True):
    cache_enabled: bool
    frequency: int
    level: LogLevel = LogLevel.INFO
