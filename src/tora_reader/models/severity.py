"""
Severity model for syslog-style log levels.
"""

from dataclasses import dataclass
from enum import Enum


class SeverityLevel(Enum):
    """Known syslog levels, plus CUSTOM for anything unrecognized."""

    DEBUG = "Debug"
    INFO = "Info"
    WARN = "Warn"
    NOTICE = "Notice"
    ERROR = "Error"
    CUSTOM = "Custom"


SYSLOG_SEVERITIES = {
    "debug": SeverityLevel.DEBUG,
    "info": SeverityLevel.INFO,
    "warning": SeverityLevel.WARN,
    "notice": SeverityLevel.NOTICE,
    "err": SeverityLevel.ERROR,
}


@dataclass(frozen=True)
class Severity:
    """
    Severity of a log entry.

    Unrecognized values are never rejected: they become CUSTOM and keep
    the original text in `raw`.

    Attributes:
        level: One of the known levels, or SeverityLevel.CUSTOM.
        raw: The severity string exactly as the backend sent it.
    """

    level: SeverityLevel
    raw: str

    @classmethod
    def from_syslog(cls, raw: str) -> "Severity":
        """
        Map a syslog severity string to a Severity.

        Args:
            raw: Value of the `syslog.severity` field.

        Returns:
            Severity instance.
        """
        return cls(level=SYSLOG_SEVERITIES.get(raw, SeverityLevel.CUSTOM), raw=raw)

    @property
    def is_custom(self) -> bool:
        return self.level is SeverityLevel.CUSTOM

    def __str__(self) -> str:
        if self.is_custom:
            return f"Custom({self.raw})"
        return self.level.value
