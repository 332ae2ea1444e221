"""
Logger configuration management
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from universal_logger.core.log_level import Severity
from universal_logger.core.timestamp import TimestampFormat


class OutputFormat(str, Enum):
    """Console output formats."""

    CONSOLE = "console"
    JSON = "json"
    TEXT = "text"


class CompressFormat(str, Enum):
    """Compression formats for rotated backups."""

    GZIP = "gzip"
    ZIP = "zip"


def _coerce_enum(enum_cls, value, default):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        for member in enum_cls:
            if member.value.lower() == value.strip().lower():
                return member
    return default


# camelCase option names accepted by LoggerConfig.merged()
OPTION_ALIASES: Dict[str, str] = {
    "minSeverity": "min_severity",
    "level": "min_severity",
    "useColors": "use_colors",
    "colors": "use_colors",
    "useEmoji": "use_emoji",
    "showCategoryTag": "show_category_tag",
    "timestampFormat": "timestamp_format",
    "timeFormat": "timestamp_format",
    "timeZone": "time_zone",
    "outputFilePath": "output_file_path",
    "outputFile": "output_file_path",
    "consoleEnabled": "console_enabled",
    "console": "console_enabled",
    "maxFileSizeBytes": "max_file_size_bytes",
    "maxSize": "max_file_size_bytes",
    "rotateEnabled": "rotate_enabled",
    "rotate": "rotate_enabled",
    "rotateBackupCount": "rotate_backup_count",
    "rotateCount": "rotate_backup_count",
    "globalMetadata": "global_metadata",
    "metadata": "global_metadata",
    "maskSecrets": "mask_secrets",
    "maskFieldNames": "mask_field_names",
    "maskFields": "mask_field_names",
    "maskChar": "mask_char",
    "maskLength": "mask_length",
    "bufferSize": "buffer_size",
    "flushIntervalMs": "flush_interval_ms",
    "flushInterval": "flush_interval_ms",
    "asyncLogging": "async_logging",
    "filePermissionMode": "file_permission_mode",
    "compressionEnabled": "compression_enabled",
    "compress": "compression_enabled",
    "compressFormat": "compress_format",
    "sampleRate": "sample_rate",
    "customFilter": "custom_filter",
    "errorHandler": "error_handler",
    "exitOnFatalError": "exit_on_fatal_error",
    "contextProvider": "context_provider",
    "correlationIdPath": "correlation_id_path",
    "indentation": "json_indent",
    "jsonIndent": "json_indent",
    "timestampCacheMs": "timestamp_cache_ms",
}


@dataclass
class LoggerConfig:
    """
    Logger configuration.

    Invalid values never raise: enumerations given as unknown strings fall
    back to the field default and numeric settings are clamped.
    """

    # Filtering
    min_severity: Severity = Severity.INFO
    silent: bool = False
    sample_rate: float = 1.0
    custom_filter: Optional[Callable[[Any], bool]] = None

    # Console settings
    console_enabled: bool = True
    format: OutputFormat = OutputFormat.CONSOLE
    use_colors: bool = True
    use_emoji: bool = True
    show_category_tag: bool = True
    prefix: str = ""
    json_indent: Optional[int] = None

    # Timestamp settings
    timestamp_format: TimestampFormat = TimestampFormat.ISO
    time_zone: Optional[str] = None
    timestamp_cache_ms: int = 1000

    # File settings
    output_file_path: Optional[Path] = None
    max_file_size_bytes: int = 10 * 1024 * 1024  # 10 MB
    rotate_enabled: bool = True
    rotate_backup_count: int = 5
    file_permission_mode: int = 0o644
    compression_enabled: bool = False
    compress_format: CompressFormat = CompressFormat.GZIP

    # Buffering
    buffer_size: int = 0
    flush_interval_ms: int = 1000
    async_logging: bool = False

    # Metadata
    global_metadata: Dict[str, Any] = field(default_factory=dict)
    mask_secrets: bool = True
    mask_field_names: Tuple[str, ...] = ("password", "token", "secret")
    mask_char: str = "*"
    mask_length: int = 8
    context_provider: Optional[Callable[[], Mapping[str, Any]]] = None
    correlation_id_path: Optional[str] = None

    # Error handling
    error_handler: Optional[Callable[[BaseException, Any], None]] = None
    exit_on_fatal_error: bool = False

    def __post_init__(self):
        """Normalize configuration after initialization."""
        self.min_severity = Severity.coerce(self.min_severity, Severity.INFO)
        self.format = _coerce_enum(OutputFormat, self.format, OutputFormat.CONSOLE)
        self.timestamp_format = TimestampFormat.coerce(self.timestamp_format)
        self.compress_format = _coerce_enum(CompressFormat, self.compress_format, CompressFormat.GZIP)

        try:
            self.sample_rate = min(1.0, max(0.0, float(self.sample_rate)))
        except (TypeError, ValueError):
            self.sample_rate = 1.0

        if not isinstance(self.max_file_size_bytes, int) or self.max_file_size_bytes <= 0:
            self.max_file_size_bytes = 10 * 1024 * 1024
        if not isinstance(self.rotate_backup_count, int) or self.rotate_backup_count < 0:
            self.rotate_backup_count = 5
        if not isinstance(self.buffer_size, int) or self.buffer_size < 0:
            self.buffer_size = 0
        if not isinstance(self.flush_interval_ms, (int, float)) or self.flush_interval_ms <= 0:
            self.flush_interval_ms = 1000
        if not isinstance(self.mask_length, int) or self.mask_length <= 0:
            self.mask_length = 8
        if not isinstance(self.mask_char, str) or not self.mask_char:
            self.mask_char = "*"

        if isinstance(self.mask_field_names, str):
            self.mask_field_names = (self.mask_field_names,)
        else:
            self.mask_field_names = tuple(self.mask_field_names or ())

        self.global_metadata = dict(self.global_metadata or {})

        # Convert output_file_path to Path if it's a string
        if isinstance(self.output_file_path, str):
            self.output_file_path = Path(self.output_file_path) if self.output_file_path else None

    @property
    def buffered(self) -> bool:
        """True when file records go through the batch buffer."""
        return self.buffer_size > 0 or self.async_logging

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def normalize_options(cls, options: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Map option names onto field names.

        camelCase aliases are translated; unknown keys are dropped.
        """
        known = set(cls.field_names())
        normalized = {}
        for key, value in options.items():
            name = OPTION_ALIASES.get(key, key)
            if name in known:
                normalized[name] = value
        return normalized

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]] = None, **kwargs) -> "LoggerConfig":
        """Create configuration from an options mapping."""
        return cls().merged(options, **kwargs)

    def merged(self, changes: Optional[Mapping[str, Any]] = None, **kwargs) -> "LoggerConfig":
        """
        Return a new configuration with changes shallow-merged over this one.

        Args:
            changes: Partial options (field names or camelCase aliases)
            **kwargs: Additional partial options

        Returns:
            New LoggerConfig; this instance is left untouched
        """
        options = dict(changes or {})
        options.update(kwargs)
        return replace(self, **self.normalize_options(options))

    @classmethod
    def default(cls) -> "LoggerConfig":
        """Create default configuration."""
        return cls()

    @classmethod
    def debug_config(cls) -> "LoggerConfig":
        """Create configuration for debugging."""
        return cls(
            min_severity=Severity.TRACE,
            console_enabled=True,
            use_colors=True,
            timestamp_cache_ms=0,
        )

    @classmethod
    def production_config(cls, output_file_path: Union[str, Path, None] = None) -> "LoggerConfig":
        """Create configuration for production."""
        return cls(
            min_severity=Severity.INFO,
            format=OutputFormat.JSON,
            use_colors=False,
            use_emoji=False,
            output_file_path=output_file_path,
            buffer_size=200,
            compression_enabled=True,
        )
