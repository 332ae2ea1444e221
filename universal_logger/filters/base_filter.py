"""
Base filter interface
"""

from abc import ABC, abstractmethod
from universal_logger.core.log_entry import LogRecord


class BaseFilter(ABC):
    """
    Abstract base class for log filters.

    Filters determine whether a log record should be processed or discarded.
    """

    @abstractmethod
    def should_log(self, record: LogRecord) -> bool:
        """
        Determine if a log record should be logged.

        Args:
            record: The log record to filter

        Returns:
            True if the record should be logged, False otherwise
        """
        pass

    def __call__(self, record: LogRecord) -> bool:
        """Allow filters to be callable."""
        return self.should_log(record)
