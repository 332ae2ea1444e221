"""
BSD 3-Clause License

Copyright (c) 2021, 🍀☀🌕🌥 🌊
All rights reserved.

Universal Logger - category-based structured logging with console
rendering and rotating JSON-lines file output
"""

__version__ = "1.0.0"
__author__ = "kcenon"
__email__ = "kcenon@naver.com"

from universal_logger.core.logger import Logger, get_logger, reset_logger, set_logger
from universal_logger.core.logger_builder import LoggerBuilder
from universal_logger.core.log_entry import LogRecord
from universal_logger.core.log_level import Severity
from universal_logger.core.logger_config import LoggerConfig

# Import submodules (not all classes by default)
from universal_logger import filters
from universal_logger import formatters
from universal_logger import writers

__all__ = [
    "Logger",
    "LoggerBuilder",
    "LogRecord",
    "Severity",
    "LoggerConfig",
    "get_logger",
    "set_logger",
    "reset_logger",
    "filters",
    "formatters",
    "writers",
]
