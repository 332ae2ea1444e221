"""File writers"""

import os
import threading
from pathlib import Path
from typing import Iterable, Optional, Union

from universal_logger.core.log_entry import LogRecord
from universal_logger.formatters.json_formatter import JSONLinesFormatter
from universal_logger.writers.rotation import RotationManager


class FileWriter:
    """
    Append log records to a file, one JSON object per line.

    The file is opened for each append, so a file that is renamed or
    removed by someone else is recreated on the next write.
    """

    def __init__(
        self,
        filepath: Union[str, Path],
        encoding: str = "utf-8",
        formatter=None,
        permission_mode: int = 0o644,
        errors: str = "backslashreplace",
    ):
        """
        Initialize file writer.

        Args:
            filepath: Path to log file
            encoding: File encoding (default: 'utf-8')
            formatter: Log formatter (default: JSONLinesFormatter)
            permission_mode: Mode used when the file is created
            errors: Encoding error handler; the default escapes characters
                    the encoding cannot represent, such as lone surrogates
        """
        self.filepath = Path(filepath)
        self.encoding = encoding
        self.errors = errors
        self.formatter = formatter or JSONLinesFormatter()
        self.permission_mode = permission_mode
        self._lock = threading.Lock()

    def _ensure_directory(self):
        """Create the parent directory if needed."""
        self.filepath.parent.mkdir(parents=True, exist_ok=True)

    def _before_append(self):
        """Hook run under the write lock before each append."""

    def _append(self, line: str):
        fd = os.open(self.filepath, os.O_WRONLY | os.O_APPEND | os.O_CREAT, self.permission_mode)
        with os.fdopen(fd, "a", encoding=self.encoding, errors=self.errors) as f:
            f.write(line + "\n")

    def write_line(self, line: str):
        """Append one pre-formatted line."""
        with self._lock:
            self._ensure_directory()
            self._before_append()
            self._append(line)

    def write(self, record: LogRecord):
        """Write log record to file."""
        self.write_line(self.formatter.format(record))

    def write_batch(self, records: Iterable[LogRecord]):
        """Write records in order."""
        for record in records:
            self.write(record)

    def flush(self):
        """Nothing is buffered between appends."""

    def close(self):
        """Nothing is held open between appends."""


class RotatingFileWriter(FileWriter):
    """Write logs with size-based rotation."""

    def __init__(
        self,
        filepath: Union[str, Path],
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5,
        encoding: str = "utf-8",
        formatter=None,
        permission_mode: int = 0o644,
        rotation: Optional[RotationManager] = None,
    ):
        """
        Initialize rotating file writer.

        Args:
            filepath: Path to log file
            max_bytes: Maximum file size before rotation
            backup_count: Number of backup files to keep
            encoding: File encoding (default: 'utf-8')
            formatter: Log formatter (default: JSONLinesFormatter)
            permission_mode: Mode used when the file is created
            rotation: Pre-configured rotation manager (overrides backup_count)
        """
        super().__init__(filepath, encoding=encoding, formatter=formatter, permission_mode=permission_mode)
        self.max_bytes = max_bytes
        self.rotation = rotation or RotationManager(backup_count=backup_count)

    def _before_append(self):
        """Rotate before the append if the file is already at the limit."""
        self.rotation.before_write(self.filepath, self.max_bytes)
