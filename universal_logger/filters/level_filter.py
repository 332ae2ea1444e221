"""
Severity-based filter

Filters log records based on a severity range
"""

from typing import Optional
from universal_logger.core.log_entry import LogRecord
from universal_logger.core.log_level import Severity, severity_rank
from universal_logger.filters.base_filter import BaseFilter


class LevelFilter(BaseFilter):
    """
    Filter log records based on severity.

    Allows filtering by minimum and/or maximum severity. The category of a
    record plays no part beyond the severity it resolves to.
    """

    def __init__(
        self,
        min_severity: Optional[Severity] = None,
        max_severity: Optional[Severity] = None
    ):
        """
        Initialize level filter.

        Args:
            min_severity: Minimum severity (inclusive). If None, no minimum.
            max_severity: Maximum severity (inclusive). If None, no maximum.

        Example:
            # Only log WARN and above
            filter = LevelFilter(min_severity=Severity.WARN)

            # Only log DEBUG to INFO
            filter = LevelFilter(min_severity=Severity.DEBUG, max_severity=Severity.INFO)
        """
        self.min_severity = min_severity
        self.max_severity = max_severity

    def allows(self, severity: Severity) -> bool:
        """Check a severity against the configured range."""
        rank = severity_rank(severity)
        if self.min_severity is not None and rank < severity_rank(self.min_severity):
            return False

        if self.max_severity is not None and rank > severity_rank(self.max_severity):
            return False

        return True

    def should_log(self, record: LogRecord) -> bool:
        """
        Check if the record's severity is within the specified range.

        Args:
            record: Log record to check

        Returns:
            True if severity is within range, False otherwise
        """
        return self.allows(record.severity)

    def __repr__(self) -> str:
        """String representation."""
        return f"LevelFilter(min={self.min_severity}, max={self.max_severity})"
