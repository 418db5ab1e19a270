from __future__ import annotations

from enum import Enum
from typing import Literal

LogLevelName = Literal[
    "trace",
    "debug",
    "info",
    "warn",
    "error",
    "critical",
    "fatal",
]


class LogLevel(Enum):
    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"
    FATAL = "FATAL"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @classmethod
    def to_level(cls, level: LogLevelName | LogLevel) -> LogLevel:
        if isinstance(level, LogLevel):
            return level

        try:
            return cls(level.upper())

        except ValueError:
            raise ValueError(f"Err. - unknown log level {level!r}") from None


_SEVERITY = {level: severity for severity, level in enumerate(LogLevel)}
