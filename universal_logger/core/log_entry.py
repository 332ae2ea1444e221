"""
Log record data structure

One immutable record is produced per logging call and handed to every sink.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Mapping
import time

from universal_logger.core.log_level import Severity, category_severity


@dataclass(frozen=True)
class LogRecord:
    """
    Log record data structure.

    Contains the category label, its resolved severity, the message, the
    display timestamp and the (already masked and merged) metadata.
    """

    category: str
    severity: Severity
    message: str
    timestamp: str = ""
    metadata: Mapping[str, Any] = field(default_factory=dict)
    created: float = field(default_factory=time.time)

    def __post_init__(self):
        """Validate record after initialization."""
        if not isinstance(self.severity, Severity):
            raise TypeError("severity must be Severity enum")
        if not isinstance(self.message, str):
            object.__setattr__(self, "message", str(self.message))
        if not isinstance(self.metadata, MappingProxyType):
            object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata or {})))

    @classmethod
    def create(cls, category: str, message: str, **kwargs) -> "LogRecord":
        """Create a record, resolving the category's severity."""
        return cls(
            category=category,
            severity=category_severity(category),
            message=message,
            **kwargs,
        )

    @property
    def has_category_tag(self) -> bool:
        """True when the category differs from the severity name."""
        return self.category != self.severity.label

    @property
    def iso_timestamp(self) -> str:
        """Creation time as ISO 8601 UTC with milliseconds."""
        moment = datetime.fromtimestamp(self.created, tz=timezone.utc)
        return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert record to the canonical file representation.

        Returns:
            Dictionary with level, optional type, message, timestamp, metadata
        """
        data: Dict[str, Any] = {"level": self.severity.label}
        if self.has_category_tag:
            data["type"] = self.category
        data["message"] = self.message
        data["timestamp"] = self.iso_timestamp
        data["metadata"] = dict(self.metadata)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogRecord":
        """
        Create record from its canonical dictionary form.

        Args:
            data: Dictionary as produced by to_dict

        Returns:
            New LogRecord instance
        """
        created = datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00"))
        return cls(
            category=data.get("type", data["level"]),
            severity=Severity.from_string(data["level"]),
            message=data["message"],
            timestamp=data["timestamp"],
            metadata=data.get("metadata", {}),
            created=created.timestamp(),
        )

    def __str__(self) -> str:
        """String representation."""
        tag = f"[{self.category.upper()}]" if self.has_category_tag else ""
        return f"{self.timestamp} [{self.severity.name}]{tag} {self.message}"
