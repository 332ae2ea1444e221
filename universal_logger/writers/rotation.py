"""
Size-based log rotation with numbered backups

    app.log      live file
    app.log.1    most recent backup
    ...
    app.log.N    oldest backup (N = backup_count)

With compression enabled the backups are app.log.1.gz ... (or .zip).
"""

from __future__ import annotations

import gzip
import os
import shutil
import zipfile
from pathlib import Path
from typing import Union

from universal_logger.core.logger_config import CompressFormat

_SUFFIXES = {CompressFormat.GZIP: ".gz", CompressFormat.ZIP: ".zip"}


class RotationManager:
    """
    Rotate a log file once it reaches a size threshold.

    The size check happens before a write, not after it, so the live file
    may exceed max_size by the size of the record that crossed the limit.

    Thread Safety:
        Not synchronized. Callers serialize before_write() with their own
        appends (FileWriter holds a lock around both).

    Example:
        rotation = RotationManager(backup_count=3)
        rotation.before_write(Path("logs/app.log"), max_size=1024 * 1024)
    """

    def __init__(
        self,
        backup_count: int = 5,
        enabled: bool = True,
        compress: bool = False,
        compress_format: Union[CompressFormat, str] = CompressFormat.GZIP,
    ):
        """
        Initialize rotation manager.

        Args:
            backup_count: Number of backup files to keep
            enabled: When False, before_write() never rotates
            compress: Compress backups as they are created
            compress_format: "gzip" or "zip"
        """
        self.backup_count = backup_count
        self.enabled = enabled
        self.compress = compress
        self.compress_format = CompressFormat(compress_format)

    @property
    def suffix(self) -> str:
        return _SUFFIXES[self.compress_format] if self.compress else ""

    def backup_path(self, path: Path, index: int) -> Path:
        """Path of the index-th backup of path."""
        return Path(f"{path}.{index}{self.suffix}")

    def should_rotate(self, path: Path, max_size: int) -> bool:
        """Check if the live file has reached max_size."""
        if not self.enabled:
            return False
        try:
            return Path(path).stat().st_size >= max_size
        except FileNotFoundError:
            return False

    def before_write(self, path: Union[str, Path], max_size: int) -> bool:
        """
        Rotate path if it has reached max_size.

        Args:
            path: Live log file
            max_size: Size threshold in bytes

        Returns:
            True if a rotation happened

        Raises:
            OSError: If a rename or compression fails
        """
        path = Path(path)
        if not self.should_rotate(path, max_size):
            return False
        self.rotate(path)
        return True

    def rotate(self, path: Path) -> None:
        """Shift backups up by one and move the live file to backup 1."""
        if self.backup_count <= 0:
            path.unlink()
            return

        # Rotate existing backups, oldest first; the one at backup_count is overwritten
        for i in range(self.backup_count - 1, 0, -1):
            src = self.backup_path(path, i)
            if src.exists():
                os.replace(src, self.backup_path(path, i + 1))

        # Move current to .1
        first = self.backup_path(path, 1)
        if self.compress:
            self._compress(path, first)
            path.unlink()
        else:
            os.replace(path, first)

    def _compress(self, src: Path, dst: Path) -> None:
        if self.compress_format is CompressFormat.ZIP:
            with zipfile.ZipFile(dst, "w", compression=zipfile.ZIP_DEFLATED) as archive:
                archive.write(src, arcname=src.name)
        else:
            with open(src, "rb") as f_in, gzip.open(dst, "wb") as f_out:
                shutil.copyfileobj(f_in, f_out)

    def __repr__(self) -> str:
        """String representation."""
        return f"RotationManager(backups={self.backup_count}, compress={self.suffix or False})"
