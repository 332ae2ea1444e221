"""Tests for batch writer functionality"""

import threading
import time
from datetime import timedelta
from unittest.mock import Mock

import pytest

from universal_logger.core.log_entry import LogRecord
from universal_logger.writers.batch_writer import BatchStats, BatchWriter


def make_record(message="test"):
    return LogRecord.create("info", message)


@pytest.fixture
def slow_interval():
    """Interval long enough that the timer never fires during a test."""
    return timedelta(seconds=60)


class TestBatchStats:
    """Test batch statistics functionality."""

    def test_initial_stats(self):
        """Test default values for batch stats."""
        stats = BatchStats()
        assert stats.entries_written == 0
        assert stats.entries_dropped == 0
        assert stats.entries_failed == 0
        assert stats.batches_flushed == 0
        assert stats.total_flush_time_ms == 0.0
        assert stats.max_buffer_size_reached == 0

    def test_record_write(self):
        """Test recording writes and the buffer high-water mark."""
        stats = BatchStats()
        stats.record_write(1)
        stats.record_write(2)
        stats.record_write(1)

        assert stats.entries_written == 3
        assert stats.max_buffer_size_reached == 2

    def test_record_drop(self):
        stats = BatchStats()
        stats.record_drop()

        assert stats.entries_dropped == 1

    def test_record_flush(self):
        """Test recording flush operations."""
        stats = BatchStats()
        stats.record_flush(5.5)
        stats.record_flush(3.5)

        assert stats.batches_flushed == 2
        assert stats.total_flush_time_ms == 9.0
        assert stats.last_flush_time is not None

    def test_to_dict(self):
        stats = BatchStats()
        stats.record_flush(4.0)
        data = stats.to_dict()

        assert data["average_flush_time_ms"] == 4.0
        assert data["last_flush_time"] is not None


class TestBatchWriter:
    """Test batch writer buffering."""

    def test_buffers_until_flush(self, slow_interval):
        inner = Mock()
        writer = BatchWriter(inner, max_batch_size=10, flush_interval=slow_interval)
        records = [make_record(f"message {i}") for i in range(3)]
        for record in records:
            writer.write(record)

        inner.write.assert_not_called()
        assert writer.get_buffer_size() == 3

        writer.flush()
        assert [c[0][0] for c in inner.write.call_args_list] == records
        assert writer.get_buffer_size() == 0
        writer.close()

    def test_flush_when_batch_full(self, slow_interval):
        inner = Mock()
        writer = BatchWriter(inner, max_batch_size=3, flush_interval=slow_interval)
        for i in range(3):
            writer.write(make_record(f"message {i}"))

        assert inner.write.call_count == 3
        assert writer.get_stats().batches_flushed == 1
        writer.close()

    def test_periodic_flush(self):
        inner = Mock()
        writer = BatchWriter(inner, max_batch_size=100, flush_interval=timedelta(milliseconds=50))
        writer.write(make_record())

        deadline = time.time() + 2
        while inner.write.call_count == 0 and time.time() < deadline:
            time.sleep(0.02)

        assert inner.write.call_count == 1
        writer.close()

    def test_close_drains_and_closes_inner(self, slow_interval):
        inner = Mock()
        writer = BatchWriter(inner, max_batch_size=10, flush_interval=slow_interval)
        writer.write(make_record())
        writer.close()

        inner.write.assert_called_once()
        inner.close.assert_called_once()
        assert writer.closed

    def test_write_after_close_is_ignored(self, slow_interval):
        inner = Mock()
        writer = BatchWriter(inner, flush_interval=slow_interval)
        writer.close()
        writer.write(make_record())
        writer.flush()

        inner.write.assert_not_called()

    def test_close_is_idempotent(self, slow_interval):
        inner = Mock()
        writer = BatchWriter(inner, flush_interval=slow_interval)
        writer.close()
        writer.close()

        inner.close.assert_called_once()

    def test_write_errors_reported(self, slow_interval):
        inner = Mock()
        error = OSError("disk full")
        inner.write.side_effect = [error, None]
        handler = Mock()
        writer = BatchWriter(inner, max_batch_size=10, flush_interval=slow_interval, error_handler=handler)
        failing, passing = make_record("fails"), make_record("passes")
        writer.write(failing)
        writer.write(passing)
        writer.flush()

        handler.assert_called_once_with(error, failing)
        assert inner.write.call_count == 2
        assert writer.get_stats().entries_failed == 1
        writer.close()

    def test_failing_error_handler_is_contained(self, slow_interval, capsys):
        inner = Mock()
        inner.write.side_effect = OSError("disk full")
        handler = Mock(side_effect=RuntimeError("handler broke"))
        writer = BatchWriter(inner, flush_interval=slow_interval, error_handler=handler)
        writer.write(make_record())
        writer.flush()

        assert "error handler failed" in capsys.readouterr().err
        writer.close()

    def test_context_manager(self, slow_interval):
        inner = Mock()
        with BatchWriter(inner, flush_interval=slow_interval) as writer:
            writer.write(make_record())

        inner.write.assert_called_once()

    def test_concurrent_writes_keep_every_record(self, slow_interval):
        inner = Mock()
        writer = BatchWriter(inner, max_batch_size=7, flush_interval=slow_interval)

        def produce(thread_id):
            for i in range(50):
                writer.write(make_record(f"{thread_id}-{i}"))

        threads = [threading.Thread(target=produce, args=(t,)) for t in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        writer.close()

        messages = [c[0][0].message for c in inner.write.call_args_list]
        assert len(messages) == 200
        for thread_id in range(4):
            own = [m for m in messages if m.startswith(f"{thread_id}-")]
            assert own == [f"{thread_id}-{i}" for i in range(50)]

    def test_write_during_flush_goes_to_next_batch(self, slow_interval):
        calls = []
        started = threading.Event()
        release = threading.Event()

        class SlowWriter:
            def write(self, record):
                if not started.is_set():
                    started.set()
                    release.wait(5)
                calls.append(("write", record.message))

            def flush(self):
                calls.append(("flush",))

        writer = BatchWriter(SlowWriter(), max_batch_size=10, flush_interval=slow_interval)
        writer.write(make_record("first"))
        writer.write(make_record("second"))

        flusher = threading.Thread(target=writer.flush)
        flusher.start()
        assert started.wait(5)

        writer.write(make_record("late"))
        assert writer.get_buffer_size() == 1

        release.set()
        flusher.join(5)
        writer.flush()

        assert calls == [
            ("write", "first"),
            ("write", "second"),
            ("flush",),
            ("write", "late"),
            ("flush",),
        ]
        assert writer.get_stats().batches_flushed == 2
        writer.close()

    def test_overflow_drop_reported(self, slow_interval):
        inner = Mock()
        handler = Mock()
        writer = BatchWriter(
            inner, max_batch_size=10, flush_interval=slow_interval, error_handler=handler
        )
        writer.max_buffer_size = 1
        kept = make_record("kept")
        dropped = make_record("dropped")
        writer.write(kept)
        writer.write(dropped)

        handler.assert_called_once()
        error, record = handler.call_args[0]
        assert isinstance(error, BufferError)
        assert record is dropped
        assert writer.get_stats().entries_dropped == 1

        writer.flush()
        assert [c[0][0] for c in inner.write.call_args_list] == [kept]
        writer.close()
