"""Logger builder pattern"""

from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union

from universal_logger.core.log_level import Severity
from universal_logger.core.logger import Logger
from universal_logger.core.logger_config import CompressFormat, LoggerConfig, OutputFormat


class LoggerBuilder:
    """Builder pattern for logger construction."""

    def __init__(self, base: Optional[LoggerConfig] = None):
        self._base = base or LoggerConfig()
        self._options: Dict[str, Any] = {}
        self._custom_writers = []
        self._custom_filters = []

    def with_level(self, level: Union[Severity, str]) -> "LoggerBuilder":
        """Set minimum severity."""
        self._options["min_severity"] = level
        return self

    def with_format(self, output_format: Union[OutputFormat, str], indent: Optional[int] = None) -> "LoggerBuilder":
        """Set console output format (console, json or text)."""
        self._options["format"] = output_format
        if indent is not None:
            self._options["json_indent"] = indent
        return self

    def with_console(self, colored: bool = True, emoji: bool = True, prefix: str = "") -> "LoggerBuilder":
        """Enable console output."""
        self._options.update(
            console_enabled=True, use_colors=colored, use_emoji=emoji, prefix=prefix
        )
        return self

    def without_console(self) -> "LoggerBuilder":
        """Disable console output."""
        self._options["console_enabled"] = False
        return self

    def with_file(self, filepath: Union[str, Path], permission_mode: int = 0o644) -> "LoggerBuilder":
        """Enable file output."""
        self._options.update(output_file_path=Path(filepath), file_permission_mode=permission_mode)
        return self

    def with_rotation(self, max_bytes: int, backup_count: int = 5) -> "LoggerBuilder":
        """
        Enable size-based rotation of the log file.

        Args:
            max_bytes: Size at which the live file is rotated
            backup_count: Number of numbered backups to keep

        Returns:
            Self for method chaining
        """
        self._options.update(
            rotate_enabled=True, max_file_size_bytes=max_bytes, rotate_backup_count=backup_count
        )
        return self

    def with_compression(self, compress_format: Union[CompressFormat, str] = CompressFormat.GZIP) -> "LoggerBuilder":
        """Compress rotated backups."""
        self._options.update(compression_enabled=True, compress_format=compress_format)
        return self

    def with_masking(
        self,
        field_names: Iterable[str] = ("password", "token", "secret"),
        mask_char: str = "*",
        length: int = 8,
    ) -> "LoggerBuilder":
        """
        Mask sensitive metadata fields.

        Example:
            logger = (LoggerBuilder()
                .with_masking(["password", "apiKey"])
                .build())
        """
        self._options.update(
            mask_secrets=True,
            mask_field_names=tuple(field_names),
            mask_char=mask_char,
            mask_length=length,
        )
        return self

    def with_sampling(self, rate: float) -> "LoggerBuilder":
        """Keep roughly rate * 100 percent of records."""
        self._options["sample_rate"] = rate
        return self

    def with_filter(self, log_filter) -> "LoggerBuilder":
        """
        Add a log filter.

        Args:
            log_filter: Filter instance (BaseFilter subclass) or a callable
                taking a LogRecord and returning bool

        Returns:
            Self for method chaining

        Example:
            from universal_logger.filters import LevelFilter

            logger = (LoggerBuilder()
                .with_filter(LevelFilter(max_severity=Severity.WARN))
                .with_filter(lambda record: "health" not in record.message)
                .build())
        """
        if callable(log_filter) and not hasattr(log_filter, "should_log"):
            self._options["custom_filter"] = log_filter
        else:
            self._custom_filters.append(log_filter)
        return self

    def with_context_provider(
        self,
        provider: Callable[[], Mapping[str, Any]],
        correlation_id_path: Optional[str] = None,
    ) -> "LoggerBuilder":
        """Merge ambient context into every record."""
        self._options["context_provider"] = provider
        if correlation_id_path:
            self._options["correlation_id_path"] = correlation_id_path
        return self

    def with_buffer(self, size: int = 100, flush_interval_ms: int = 1000) -> "LoggerBuilder":
        """Buffer file records and write them in batches."""
        self._options.update(buffer_size=size, flush_interval_ms=flush_interval_ms)
        return self

    def with_metadata(self, **metadata) -> "LoggerBuilder":
        """Add global metadata attached to every record."""
        merged = dict(self._options.get("global_metadata", self._base.global_metadata))
        merged.update(metadata)
        self._options["global_metadata"] = merged
        return self

    def with_error_handler(
        self,
        handler: Callable[[BaseException, Any], None],
        exit_on_fatal: bool = False,
    ) -> "LoggerBuilder":
        """Set the handler called when a sink fails."""
        self._options.update(error_handler=handler, exit_on_fatal_error=exit_on_fatal)
        return self

    def add_writer(self, writer) -> "LoggerBuilder":
        """
        Add a custom writer.

        Args:
            writer: Writer instance

        Returns:
            Self for method chaining
        """
        self._custom_writers.append(writer)
        return self

    def build_config(self) -> LoggerConfig:
        """Return the configuration collected so far."""
        return self._base.merged(self._options)

    def build(self, **logger_kwargs) -> Logger:
        """Build and return configured logger."""
        logger = Logger(self.build_config(), **logger_kwargs)

        for writer in self._custom_writers:
            logger.add_writer(writer)

        for log_filter in self._custom_filters:
            logger.add_filter(log_filter)

        return logger
