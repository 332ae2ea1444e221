"""
Random sampling filter

Keeps a fraction of log records
"""

import random
from typing import Optional
from universal_logger.core.log_entry import LogRecord
from universal_logger.filters.base_filter import BaseFilter


class SamplingFilter(BaseFilter):
    """
    Keep each record with probability sample_rate.

    A rate of 0 drops everything and a rate of 1 keeps everything.
    """

    def __init__(self, sample_rate: float = 1.0, rng: Optional[random.Random] = None):
        """
        Initialize sampling filter.

        Args:
            sample_rate: Probability in [0, 1] that a record is kept
            rng: Random source (default: a fresh random.Random)

        Example:
            # Keep roughly one record in ten
            filter = SamplingFilter(0.1)
        """
        self.sample_rate = min(1.0, max(0.0, sample_rate))
        self._rng = rng or random.Random()

    def sample(self, sample_rate: Optional[float] = None) -> bool:
        """Draw once; True means keep."""
        rate = self.sample_rate if sample_rate is None else sample_rate
        if rate >= 1.0:
            return True
        return self._rng.random() < rate

    def should_log(self, record: LogRecord) -> bool:
        return self.sample()

    def __repr__(self) -> str:
        """String representation."""
        return f"SamplingFilter(rate={self.sample_rate})"
