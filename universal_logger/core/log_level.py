"""
Severity enumeration and category table

Every named log category resolves to one of six ordered severities.
"""

from enum import IntEnum
from typing import Dict, Union


class Severity(IntEnum):
    """
    Log severity enumeration.

    Values are the numeric ranks used by the level gate.
    """

    TRACE = 0   # Most verbose, detailed tracing
    DEBUG = 1   # Debug information
    INFO = 2    # Informational messages
    WARN = 3    # Warning conditions
    ERROR = 4   # Error conditions
    FATAL = 5   # Critical failures

    def __str__(self) -> str:
        """String representation of severity."""
        return self.name.lower()

    @property
    def label(self) -> str:
        """Lower-case name used in records and as a category."""
        return self.name.lower()

    @classmethod
    def from_string(cls, level_str: str) -> "Severity":
        """
        Convert string to Severity.

        Args:
            level_str: Severity name (case-insensitive). "warning" and
                "critical" are accepted as aliases.

        Returns:
            Severity enum value

        Raises:
            ValueError: If level_str is not valid
        """
        key = level_str.strip().upper()
        key = _ALIASES.get(key, key)
        if key in cls.__members__:
            return cls[key]
        raise ValueError(f"Invalid severity: {level_str}")

    @classmethod
    def coerce(cls, value: Union["Severity", str, int, None], default: "Severity") -> "Severity":
        """Convert value to a Severity, falling back to default when invalid."""
        if isinstance(value, Severity):
            return value
        try:
            if isinstance(value, str):
                return cls.from_string(value)
            if isinstance(value, int) and not isinstance(value, bool):
                return cls(value)
        except ValueError:
            pass
        return default


_ALIASES = {"WARNING": "WARN", "CRITICAL": "FATAL"}


# Category name -> severity. Severities map to themselves.
CATEGORY_SEVERITY: Dict[str, Severity] = {
    "trace": Severity.TRACE,
    "debug": Severity.DEBUG,
    "info": Severity.INFO,
    "warn": Severity.WARN,
    "error": Severity.ERROR,
    "fatal": Severity.FATAL,

    # Development & debug
    "verbose": Severity.DEBUG,
    "silly": Severity.TRACE,
    "test": Severity.DEBUG,
    "mock": Severity.DEBUG,

    # API & web
    "http": Severity.INFO,
    "request": Severity.INFO,
    "response": Severity.INFO,
    "graphql": Severity.INFO,
    "websocket": Severity.INFO,
    "api": Severity.INFO,

    # Security & access control
    "security": Severity.WARN,
    "audit": Severity.INFO,
    "auth": Severity.INFO,
    "access": Severity.INFO,
    "firewall": Severity.WARN,

    # Data & storage
    "database": Severity.INFO,
    "query": Severity.DEBUG,
    "migration": Severity.INFO,
    "cache": Severity.DEBUG,

    # Performance
    "performance": Severity.INFO,
    "metric": Severity.INFO,
    "benchmark": Severity.DEBUG,
    "memory": Severity.WARN,

    # System
    "system": Severity.INFO,
    "process": Severity.INFO,
    "cpu": Severity.INFO,
    "disk": Severity.INFO,
    "network": Severity.INFO,

    # Cloud & containers
    "kubernetes": Severity.INFO,
    "docker": Severity.INFO,
    "cloud": Severity.INFO,
    "serverless": Severity.INFO,

    # Business
    "business": Severity.INFO,
    "transaction": Severity.INFO,
    "workflow": Severity.INFO,
    "event": Severity.INFO,

    # Integration
    "integration": Severity.INFO,
    "webhook": Severity.INFO,
    "external": Severity.INFO,

    # UI & analytics
    "ui": Severity.INFO,
    "interaction": Severity.INFO,
    "analytics": Severity.INFO,
    "tracking": Severity.INFO,

    # Background processing
    "job": Severity.INFO,
    "queue": Severity.INFO,
    "cron": Severity.INFO,
    "task": Severity.INFO,

    # Mobile & offline
    "mobile": Severity.INFO,
    "push": Severity.INFO,
    "offline": Severity.INFO,
    "sync": Severity.INFO,

    "success": Severity.INFO,
}

# Categories that are not themselves severities
CATEGORIES = tuple(
    name for name in CATEGORY_SEVERITY if name not in {s.label for s in Severity}
)


def severity_rank(severity: Severity) -> int:
    """Numeric rank of a severity (trace=0 .. fatal=5)."""
    return int(severity)


def category_severity(category: str) -> Severity:
    """
    Resolve a category to its severity.

    Unknown categories resolve to INFO, so new categories can be logged
    without touching the filtering logic.
    """
    return CATEGORY_SEVERITY.get(category.lower(), Severity.INFO)
