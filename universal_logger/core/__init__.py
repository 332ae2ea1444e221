"""
Core module for universal logger

This module contains the fundamental classes:
- Logger: Record pipeline
- LoggerBuilder: Builder pattern for logger construction
- LogRecord: Log record data structure
- Severity: Severity enumeration and category table
- LoggerConfig: Configuration management
"""

from universal_logger.core.logger import Logger, get_logger, reset_logger, set_logger
from universal_logger.core.logger_builder import LoggerBuilder
from universal_logger.core.log_entry import LogRecord
from universal_logger.core.log_level import CATEGORIES, CATEGORY_SEVERITY, Severity, category_severity
from universal_logger.core.logger_config import CompressFormat, LoggerConfig, OutputFormat
from universal_logger.core.timestamp import TimestampFormat, TimestampProvider, get_timestamp

__all__ = [
    "Logger",
    "LoggerBuilder",
    "LogRecord",
    "Severity",
    "CATEGORIES",
    "CATEGORY_SEVERITY",
    "category_severity",
    "LoggerConfig",
    "OutputFormat",
    "CompressFormat",
    "TimestampFormat",
    "TimestampProvider",
    "get_timestamp",
    "get_logger",
    "set_logger",
    "reset_logger",
]
