"""
Log filters module

Provides the gates a record passes before it is written.
"""

from universal_logger.filters.base_filter import BaseFilter
from universal_logger.filters.level_filter import LevelFilter
from universal_logger.filters.sampling_filter import SamplingFilter
from universal_logger.filters.callback_filter import CallbackFilter

__all__ = [
    "BaseFilter",
    "LevelFilter",
    "SamplingFilter",
    "CallbackFilter",
]
