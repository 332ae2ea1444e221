"""
JSON formatters for structured logging

JSONFormatter renders console lines; JSONLinesFormatter renders the
canonical file representation.
"""

import json

from universal_logger.core.log_entry import LogRecord
from universal_logger.formatters.base_formatter import BaseFormatter
from universal_logger.formatters.value_formatter import to_jsonable


class JSONFormatter(BaseFormatter):
    """
    Format log records as flat JSON objects.

    Metadata keys are spread into the top level next to timestamp, level
    and message. "type" holds the category when it differs from the level.
    """

    def __init__(self, indent: int = None, ensure_ascii: bool = False):
        """
        Initialize JSON formatter.

        Args:
            indent: JSON indentation (None for compact, 2 for readable)
            ensure_ascii: Escape non-ASCII characters

        Example:
            # Compact JSON (one line per record)
            formatter = JSONFormatter()

            # Pretty-printed JSON
            formatter = JSONFormatter(indent=2)
        """
        self.indent = indent
        self.ensure_ascii = ensure_ascii

    def format(self, record: LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON string
        """
        log_dict = {
            "timestamp": record.timestamp,
            "level": record.severity.label,
        }
        if record.has_category_tag:
            log_dict["type"] = record.category
        log_dict["message"] = record.message
        log_dict.update(record.metadata)

        return json.dumps(
            to_jsonable(log_dict),
            indent=self.indent,
            ensure_ascii=self.ensure_ascii,
            allow_nan=False,
        )

    def __repr__(self) -> str:
        """String representation."""
        return f"JSONFormatter(indent={self.indent})"


class JSONLinesFormatter(BaseFormatter):
    """Format records as single-line JSON objects for log files."""

    def format(self, record: LogRecord) -> str:
        return json.dumps(to_jsonable(record.to_dict()), ensure_ascii=False, allow_nan=False)
