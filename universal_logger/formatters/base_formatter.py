"""
Base formatter interface
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping

from universal_logger.core.log_entry import LogRecord
from universal_logger.formatters.value_formatter import render


class BaseFormatter(ABC):
    """
    Abstract base class for log formatters.

    Formatters convert LogRecord objects into output lines.
    """

    @abstractmethod
    def format(self, record: LogRecord) -> str:
        """
        Format a log record into a string.

        Args:
            record: The log record to format

        Returns:
            Formatted string representation of the record
        """
        pass

    def __call__(self, record: LogRecord) -> str:
        """Allow formatters to be callable."""
        return self.format(record)

    @staticmethod
    def format_metadata(metadata: Mapping[str, Any], key_style=str, value_style=str) -> str:
        """
        Render metadata as indented "key: value" lines.

        Multi-line values are placed in their own indented block below the
        key. The "source" key is skipped since it is shown on the first line.
        """
        lines = []
        for key, value in metadata.items():
            if key == "source":
                continue
            rendered = render(value).split("\n")
            if len(rendered) == 1:
                lines.append(f"  {key_style(key)}: {value_style(rendered[0])}")
            else:
                block = "\n    ".join(rendered)
                lines.append(f"  {key_style(key)}:\n    {value_style(block)}")
        return "\n".join(lines)
