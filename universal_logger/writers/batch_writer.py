"""
Batch writer for buffered file output

Buffers log records and writes them in batches to reduce I/O overhead.
"""

from __future__ import annotations

import sys
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any, Callable, List, Optional

if TYPE_CHECKING:
    from universal_logger.core.log_entry import LogRecord


@dataclass
class BatchStats:
    """
    Statistics for batch writing monitoring.

    Tracks batch counts, buffer usage, and flush metrics.
    """

    entries_written: int = 0
    entries_dropped: int = 0
    entries_failed: int = 0
    batches_flushed: int = 0
    total_flush_time_ms: float = 0.0
    last_flush_time: Optional[datetime] = None
    max_buffer_size_reached: int = 0

    def record_write(self, buffer_size: int) -> None:
        """Record a record accepted into the buffer."""
        self.entries_written += 1
        if buffer_size > self.max_buffer_size_reached:
            self.max_buffer_size_reached = buffer_size

    def record_drop(self) -> None:
        """Record a record dropped due to buffer overflow."""
        self.entries_dropped += 1

    def record_flush(self, flush_time_ms: float) -> None:
        """Record a batch flush operation."""
        self.batches_flushed += 1
        self.total_flush_time_ms += flush_time_ms
        self.last_flush_time = datetime.now()

    def to_dict(self) -> dict:
        """Convert stats to dictionary for serialization."""
        return {
            "entries_written": self.entries_written,
            "entries_dropped": self.entries_dropped,
            "entries_failed": self.entries_failed,
            "batches_flushed": self.batches_flushed,
            "total_flush_time_ms": self.total_flush_time_ms,
            "average_flush_time_ms": (
                self.total_flush_time_ms / self.batches_flushed
                if self.batches_flushed > 0
                else 0.0
            ),
            "last_flush_time": (
                self.last_flush_time.isoformat()
                if self.last_flush_time
                else None
            ),
            "max_buffer_size_reached": self.max_buffer_size_reached,
        }


def _report_to_stderr(error: BaseException, record: Any) -> None:
    print(f"universal_logger: failed to write log to file: {error}", file=sys.stderr)


class BatchWriter:
    """
    Writer that batches log records for efficient I/O.

    Records are queued first-in first-out and handed to the inner writer
    when the batch size is reached, when the flush interval expires, or on
    flush()/close().

    When a flush starts the buffer is swapped for an empty one, so records
    queued while the batch is being written form the next batch. Batches
    are written one at a time in the order they were swapped out.

    Thread Safety:
        This class is thread-safe. All public methods use internal locking.

    Example:
        file_writer = RotatingFileWriter("app.log")
        batch_writer = BatchWriter(
            file_writer,
            max_batch_size=100,
            flush_interval=timedelta(seconds=1)
        )
    """

    def __init__(
        self,
        inner_writer: Any,
        max_batch_size: int = 100,
        flush_interval: Optional[timedelta] = None,
        max_buffer_size: int = 10000,
        error_handler: Optional[Callable[[BaseException, Any], None]] = None,
    ):
        """
        Initialize batch writer.

        Args:
            inner_writer: Writer to wrap (must have a write method)
            max_batch_size: Maximum records before triggering batch flush
            flush_interval: Time interval for periodic flush (default: 1 second)
            max_buffer_size: Maximum buffer capacity before dropping records
            error_handler: Called with (error, record) when a write fails
        """
        self.inner_writer = inner_writer
        self.max_batch_size = max(1, max_batch_size)
        self.flush_interval = flush_interval or timedelta(seconds=1)
        self.max_buffer_size = max(self.max_batch_size, max_buffer_size)
        self.error_handler = error_handler or _report_to_stderr

        self._buffer: List["LogRecord"] = []
        self._lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._stats = BatchStats()
        self._flush_timer: Optional[threading.Timer] = None
        self._closed = False
        self._timer_lock = threading.Lock()

        self._schedule_flush()

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, record: "LogRecord") -> None:
        """
        Queue a log record.

        Args:
            record: Log record to write
        """
        if self._closed:
            return

        with self._lock:
            overflow = len(self._buffer) >= self.max_buffer_size
            if overflow:
                self._stats.record_drop()
            else:
                self._buffer.append(record)
                self._stats.record_write(len(self._buffer))
                batch_full = len(self._buffer) >= self.max_batch_size

        if overflow:
            self._report(
                BufferError(f"batch buffer full ({self.max_buffer_size} records), record dropped"),
                record,
            )
            return

        if batch_full:
            self.flush()

    def flush(self) -> None:
        """Write all buffered records to the inner writer."""
        # Holding the write lock across the swap keeps batches in issue order
        with self._write_lock:
            with self._lock:
                batch = self._buffer
                self._buffer = []
            self._write_batch(batch)

    def _write_batch(self, batch: List["LogRecord"]) -> None:
        """
        Write one swapped-out batch.

        Caller must hold the write lock.
        """
        if not batch:
            return

        start_time = time.perf_counter()
        for record in batch:
            try:
                self.inner_writer.write(record)
            except Exception as e:
                self._stats.entries_failed += 1
                self._report(e, record)

        if hasattr(self.inner_writer, 'flush'):
            try:
                self.inner_writer.flush()
            except Exception as e:
                self._report(e, None)

        flush_time_ms = (time.perf_counter() - start_time) * 1000
        with self._lock:
            self._stats.record_flush(flush_time_ms)

    def _report(self, error: BaseException, record: Any) -> None:
        try:
            self.error_handler(error, record)
        except Exception as handler_error:
            print(f"universal_logger: error handler failed: {handler_error}", file=sys.stderr)

    def _schedule_flush(self) -> None:
        """Schedule next periodic flush."""
        with self._timer_lock:
            if self._closed:
                return

            self._flush_timer = threading.Timer(
                self.flush_interval.total_seconds(),
                self._periodic_flush
            )
            self._flush_timer.daemon = True
            self._flush_timer.start()

    def _periodic_flush(self) -> None:
        """Called periodically to flush stale records."""
        if self._closed:
            return

        self.flush()
        self._schedule_flush()

    def _cancel_timer(self) -> None:
        """Cancel the periodic flush timer."""
        with self._timer_lock:
            if self._flush_timer:
                self._flush_timer.cancel()
                self._flush_timer = None

    def close(self) -> None:
        """Flush remaining records, stop the timer and close the inner writer."""
        if self._closed:
            return

        self._closed = True
        self.flush()
        self._cancel_timer()

        if hasattr(self.inner_writer, 'close'):
            try:
                self.inner_writer.close()
            except Exception as e:
                self._report(e, None)

    def get_stats(self) -> BatchStats:
        """
        Get batch statistics.

        Returns:
            Copy of current batch statistics
        """
        with self._lock:
            return BatchStats(**vars(self._stats))

    def get_buffer_size(self) -> int:
        """
        Get current buffer size.

        Returns:
            Number of records currently in buffer
        """
        with self._lock:
            return len(self._buffer)

    def __enter__(self) -> "BatchWriter":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
