"""Writers module - Log output sinks"""

from universal_logger.writers.console_writer import ConsoleWriter
from universal_logger.writers.file_writer import FileWriter, RotatingFileWriter
from universal_logger.writers.batch_writer import BatchStats, BatchWriter
from universal_logger.writers.rotation import RotationManager

__all__ = [
    "ConsoleWriter",
    "FileWriter",
    "RotatingFileWriter",
    "BatchStats",
    "BatchWriter",
    "RotationManager",
]
