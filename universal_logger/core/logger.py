"""
Main Logger class - the record pipeline

Every logging call runs the same stages: silence gate, level gate,
sampling gate, custom filters, masking, context injection, then dispatch
to the console sink and the file sink.
"""

from __future__ import annotations

import atexit
import dataclasses
import random
import sys
import threading
import traceback
from datetime import timedelta
from typing import Any, Callable, List, Mapping, NamedTuple, Optional, TextIO, Union

from universal_logger.core.context import merge_metadata
from universal_logger.core.log_entry import LogRecord
from universal_logger.core.log_level import CATEGORIES, CATEGORY_SEVERITY, Severity, category_severity
from universal_logger.core.logger_config import LoggerConfig
from universal_logger.core.masking import mask_metadata
from universal_logger.core.timestamp import TimestampProvider
from universal_logger.filters.callback_filter import CallbackFilter
from universal_logger.filters.sampling_filter import SamplingFilter
from universal_logger.formatters import create_formatter
from universal_logger.writers.batch_writer import BatchWriter
from universal_logger.writers.console_writer import ConsoleWriter
from universal_logger.writers.file_writer import RotatingFileWriter
from universal_logger.writers.rotation import RotationManager

# Fields whose change requires a new file sink
_FILE_FIELDS = (
    "output_file_path",
    "max_file_size_bytes",
    "rotate_enabled",
    "rotate_backup_count",
    "file_permission_mode",
    "compression_enabled",
    "compress_format",
    "buffer_size",
    "flush_interval_ms",
    "async_logging",
)

DEFAULT_BATCH_SIZE = 100


class _Sinks(NamedTuple):
    """Configuration snapshot plus the sinks built from it."""

    config: LoggerConfig
    console: Optional[ConsoleWriter]
    file: Optional[Any]


def _error_message(error: BaseException) -> str:
    """'<message>\\n<traceback>' for an exception passed as the message."""
    if error.__traceback__ is not None:
        stack = traceback.format_exception(type(error), error, error.__traceback__)
    else:
        stack = traceback.format_exception_only(type(error), error)
    return f"{error}\n{''.join(stack).rstrip()}"


class Logger:
    """
    Structured logger with console and rotating file output.

    Configuration is a LoggerConfig snapshot. update_config() merges a
    partial configuration into a new snapshot; calls already in progress
    keep using the snapshot they started with.

    Thread Safety:
        Configuration updates and sink swaps are serialized with a lock.
        Each log call reads one consistent snapshot without locking. File
        appends and rotation are serialized per file writer. Metric
        counters have their own lock.

    Example:
        logger = Logger(LoggerConfig(output_file_path="logs/app.log"))
        logger.info("Application started", {"version": "1.0.0"})
        logger.database("Query executed", rows=10)
        logger.shutdown()
    """

    def __init__(
        self,
        config: Optional[LoggerConfig] = None,
        *,
        stream: Optional[TextIO] = None,
        error_stream: Optional[TextIO] = None,
        warn_stream: Optional[TextIO] = None,
        rng: Optional[random.Random] = None,
        timestamp_provider: Optional[TimestampProvider] = None,
        **options,
    ):
        """
        Initialize logger.

        Args:
            config: Base configuration (default: LoggerConfig.default())
            stream: Console output stream (default: sys.stdout)
            error_stream: Console stream for error/fatal (default: sys.stderr)
            warn_stream: Console stream for warn (default: error_stream)
            rng: Random source used for sampling
            timestamp_provider: Source of display timestamps
            **options: Partial options merged over config
        """
        base = config or LoggerConfig.default()
        self._lock = threading.RLock()
        self._streams = (stream, error_stream, warn_stream)
        self._timestamps = timestamp_provider or TimestampProvider(cache_ttl_ms=base.timestamp_cache_ms)
        self._sampler = SamplingFilter(rng=rng)
        self._writers: List[Any] = []
        self._filters: List[Any] = []
        self._metrics = {"logged": 0, "filtered": 0, "sampled_out": 0, "file_errors": 0}
        self._metrics_lock = threading.Lock()
        self._closed = False

        config = base.merged(options) if options else base
        self._state = self._build_sinks(config, None)

        atexit.register(self.shutdown)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def config(self) -> LoggerConfig:
        """Current configuration snapshot."""
        return self._state.config

    def _build_console(self, config: LoggerConfig) -> Optional[ConsoleWriter]:
        if not config.console_enabled:
            return None
        stream, error_stream, warn_stream = self._streams
        return ConsoleWriter(
            formatter=create_formatter(config),
            stream=stream,
            error_stream=error_stream,
            warn_stream=warn_stream,
        )

    def _build_file(self, config: LoggerConfig) -> Optional[Any]:
        if not config.output_file_path:
            return None
        writer = RotatingFileWriter(
            config.output_file_path,
            max_bytes=config.max_file_size_bytes,
            permission_mode=config.file_permission_mode,
            rotation=RotationManager(
                backup_count=config.rotate_backup_count,
                enabled=config.rotate_enabled,
                compress=config.compression_enabled,
                compress_format=config.compress_format,
            ),
        )
        if not config.buffered:
            return writer
        return BatchWriter(
            writer,
            max_batch_size=config.buffer_size or DEFAULT_BATCH_SIZE,
            flush_interval=timedelta(milliseconds=config.flush_interval_ms),
            error_handler=self._handle_file_error,
        )

    def _build_sinks(self, config: LoggerConfig, previous: Optional[_Sinks]) -> _Sinks:
        file_writer = None
        if previous is not None and all(
            getattr(previous.config, name) == getattr(config, name) for name in _FILE_FIELDS
        ):
            file_writer = previous.file
        else:
            if previous is not None and previous.file is not None:
                self._close_writer(previous.file)
            file_writer = self._build_file(config)
        return _Sinks(config, self._build_console(config), file_writer)

    def update_config(self, changes: Optional[Mapping[str, Any]] = None, **kwargs) -> LoggerConfig:
        """
        Merge partial options into the live configuration.

        Args:
            changes: Partial options (field names or camelCase aliases);
                unknown keys are ignored
            **kwargs: Additional partial options

        Returns:
            The new configuration snapshot

        Example:
            logger.update_config(min_severity="warn", use_colors=False)
            logger.update_config({"maskFieldNames": ["password"]})
        """
        with self._lock:
            previous = self._state
            config = previous.config.merged(changes, **kwargs)
            self._timestamps.cache_ttl_ms = config.timestamp_cache_ms
            self._state = self._build_sinks(config, previous)
            return config

    configure = update_config

    def add_writer(self, writer: Any) -> None:
        """
        Add an extra log writer.

        Args:
            writer: Object with a write(record) method; receives every
                record that passes the gates
        """
        with self._lock:
            self._writers.append(writer)

    def add_filter(self, log_filter: Any) -> None:
        """
        Add a log filter.

        Args:
            log_filter: Filter instance with should_log(record) method
        """
        with self._lock:
            self._filters.append(log_filter)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _count(self, name: str) -> None:
        with self._metrics_lock:
            self._metrics[name] += 1

    def _handle_error(self, error: BaseException, record: Optional[LogRecord] = None) -> None:
        """Forward an error to the configured handler; never raises."""
        handler = self._state.config.error_handler
        try:
            if handler is not None:
                handler(error, record)
            else:
                print(f"universal_logger: failed to write log to file: {error}", file=sys.stderr)
        except Exception as handler_error:
            print(f"universal_logger: error handler failed: {handler_error}", file=sys.stderr)

    def _handle_file_error(self, error: BaseException, record: Optional[LogRecord] = None) -> None:
        self._count("file_errors")
        self._handle_error(error, record)

    def _collect_context(self, config: LoggerConfig) -> Optional[Mapping[str, Any]]:
        if config.context_provider is None:
            return None
        try:
            return dict(config.context_provider() or {})
        except Exception as e:
            self._handle_error(e, None)
            return None

    def _passes_filters(self, config: LoggerConfig, record: LogRecord) -> bool:
        if config.custom_filter is not None:
            gate = CallbackFilter(config.custom_filter, on_error=self._handle_error)
            if not gate.should_log(record):
                return False
        for f in self._filters:
            if not f.should_log(record):
                return False
        return True

    def log(
        self,
        category: Union[str, Severity],
        message: Any,
        metadata: Optional[Mapping[str, Any]] = None,
        **fields,
    ) -> None:
        """
        Log a message under any category.

        Unknown categories are logged at INFO severity.

        Args:
            category: Category name (or a Severity)
            message: Message text; exceptions are expanded for error/fatal
            metadata: Structured metadata
            **fields: Extra metadata fields
        """
        state = self._state
        config = state.config
        if config.silent:
            return

        category = category.label if isinstance(category, Severity) else str(category).lower()
        severity = category_severity(category)
        if severity < config.min_severity:
            self._count("filtered")
            return

        if not self._sampler.sample(config.sample_rate):
            self._count("sampled_out")
            return

        if isinstance(message, BaseException) and severity >= Severity.ERROR:
            message = _error_message(message)

        call_metadata = dict(metadata or {})
        call_metadata.update(fields)

        record = LogRecord(
            category=category,
            severity=severity,
            message=message,
            timestamp=self._timestamps.now(config.timestamp_format, config.time_zone),
            metadata=call_metadata,
        )
        if not self._passes_filters(config, record):
            self._count("filtered")
            return

        if config.mask_secrets and config.mask_field_names:
            call_metadata = mask_metadata(
                call_metadata, config.mask_field_names, config.mask_char, config.mask_length
            )
        merged = merge_metadata(
            call_metadata,
            context=self._collect_context(config),
            global_metadata=config.global_metadata,
            correlation_id_path=config.correlation_id_path,
        )
        record = dataclasses.replace(record, metadata=merged)
        self._count("logged")

        self._dispatch(state, record)

        if severity is Severity.FATAL and config.exit_on_fatal_error:
            self.flush()
            sys.exit(1)

    def _dispatch(self, state: _Sinks, record: LogRecord) -> None:
        """Send a record to the console, the file and any extra writers."""
        if state.console is not None:
            try:
                state.console.write(record)
            except Exception as e:
                self._handle_error(e, record)

        if state.file is not None:
            try:
                state.file.write(record)
            except Exception as e:
                self._handle_file_error(e, record)

        for writer in self._writers:
            try:
                writer.write(record)
            except Exception as e:
                self._handle_error(e, record)

    # Standard severities

    def trace(self, message: Any, metadata: Optional[Mapping[str, Any]] = None, **fields) -> None:
        """Log trace message."""
        self.log("trace", message, metadata, **fields)

    def debug(self, message: Any, metadata: Optional[Mapping[str, Any]] = None, **fields) -> None:
        """Log debug message."""
        self.log("debug", message, metadata, **fields)

    def info(self, message: Any, metadata: Optional[Mapping[str, Any]] = None, **fields) -> None:
        """Log info message."""
        self.log("info", message, metadata, **fields)

    def warn(self, message: Any, metadata: Optional[Mapping[str, Any]] = None, **fields) -> None:
        """Log warning message."""
        self.log("warn", message, metadata, **fields)

    def error(self, message: Any, metadata: Optional[Mapping[str, Any]] = None, **fields) -> None:
        """
        Log error message.

        An exception passed as the message is logged as its text followed
        by its traceback.
        """
        self.log("error", message, metadata, **fields)

    def fatal(self, message: Any, metadata: Optional[Mapping[str, Any]] = None, **fields) -> None:
        """
        Log fatal message.

        Exits the process with status 1 afterwards when
        exit_on_fatal_error is set.
        """
        self.log("fatal", message, metadata, **fields)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _close_writer(self, writer: Any) -> None:
        try:
            if hasattr(writer, 'close'):
                writer.close()
        except Exception as e:
            self._handle_error(e, None)

    def flush(self) -> None:
        """Write out buffered file records and flush the console."""
        state = self._state
        for writer in (state.file, state.console, *self._writers):
            if writer is None or not hasattr(writer, 'flush'):
                continue
            try:
                writer.flush()
            except Exception as e:
                self._handle_error(e, None)

    def shutdown(self) -> None:
        """
        Shutdown logger gracefully.

        Drains the file buffer, stops its flush timer and closes writers.
        Later calls still log, writing to the file unbuffered.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            state = self._state

            if state.file is not None:
                self._close_writer(state.file)
                if isinstance(state.file, BatchWriter):
                    self._state = state._replace(file=state.file.inner_writer)

            for writer in self._writers:
                self._close_writer(writer)

        atexit.unregister(self.shutdown)

    def get_metrics(self) -> dict:
        """
        Get logging metrics.

        Returns:
            Counters: logged, filtered, sampled_out, dropped, file_errors
        """
        with self._metrics_lock:
            metrics = self._metrics.copy()
        file_writer = self._state.file
        metrics["dropped"] = (
            file_writer.get_stats().entries_dropped if isinstance(file_writer, BatchWriter) else 0
        )
        return metrics

    def __enter__(self) -> "Logger":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.shutdown()


def _category_method(category: str) -> Callable[..., None]:
    def method(self: Logger, message: Any, metadata: Optional[Mapping[str, Any]] = None, **fields) -> None:
        self.log(category, message, metadata, **fields)

    method.__name__ = category
    method.__qualname__ = f"Logger.{category}"
    method.__doc__ = f"Log a {category} message ({CATEGORY_SEVERITY[category].label} severity)."
    return method


for _category in CATEGORIES:
    setattr(Logger, _category, _category_method(_category))
del _category


# Process-wide default logger. Created lazily by get_logger(), replaced by
# set_logger() and torn down (flushed and closed) by reset_logger().
_default_logger: Optional[Logger] = None
_default_lock = threading.Lock()


def get_logger(config: Optional[LoggerConfig] = None, **options) -> Logger:
    """
    Return the process-wide default logger, creating it on first use.

    Args:
        config: Configuration used only when the logger is created
        **options: Partial options used only when the logger is created

    Returns:
        The default Logger
    """
    global _default_logger
    with _default_lock:
        if _default_logger is None:
            _default_logger = Logger(config, **options)
        return _default_logger


def set_logger(logger: Optional[Logger]) -> Optional[Logger]:
    """Install logger as the default; returns the previous one (not closed)."""
    global _default_logger
    with _default_lock:
        previous, _default_logger = _default_logger, logger
        return previous


def reset_logger() -> None:
    """Shut down and forget the default logger."""
    previous = set_logger(None)
    if previous is not None:
        previous.shutdown()
