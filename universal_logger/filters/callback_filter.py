"""
Callback-based filter

Filters log records using custom callback functions
"""

import sys
from typing import Callable, Optional
from universal_logger.core.log_entry import LogRecord
from universal_logger.filters.base_filter import BaseFilter


class CallbackFilter(BaseFilter):
    """
    Filter log records using a custom callback function.

    Provides maximum flexibility for filtering logic.
    """

    def __init__(
        self,
        callback: Callable[[LogRecord], bool],
        on_error: Optional[Callable[[BaseException, LogRecord], None]] = None,
    ):
        """
        Initialize callback filter.

        Args:
            callback: Function that takes LogRecord and returns bool.
                     Should return True to log the record, False to discard it.
            on_error: Called with (error, record) when the callback raises.
                     Default prints a diagnostic to stderr.

        Example:
            # Drop health-check noise
            def not_health_check(record):
                return record.metadata.get("path") != "/health"

            filter = CallbackFilter(not_health_check)

            # Complex condition
            def complex_filter(record):
                return (record.severity >= Severity.WARN or
                        "payment" in record.message.lower())

            filter = CallbackFilter(complex_filter)
        """
        if not callable(callback):
            raise TypeError("callback must be callable")

        self.callback = callback
        self.on_error = on_error

    def should_log(self, record: LogRecord) -> bool:
        """
        Use callback to determine if record should be logged.

        Args:
            record: Log record to check

        Returns:
            Result of callback function; True if the callback raised
        """
        try:
            return bool(self.callback(record))
        except Exception as e:
            # Report the error and allow the record through
            if self.on_error is not None:
                self.on_error(e, record)
            else:
                print(f"Filter callback error: {e}", file=sys.stderr)
            return True

    def __repr__(self) -> str:
        """String representation."""
        callback_name = getattr(self.callback, '__name__', repr(self.callback))
        return f"CallbackFilter(callback={callback_name})"
