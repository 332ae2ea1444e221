"""Console writer routing by severity"""

import sys
from typing import Optional, TextIO

from universal_logger.core.log_entry import LogRecord
from universal_logger.core.log_level import Severity


class ConsoleWriter:
    """
    Write logs to the console.

    error and fatal records go to the error stream, warn records to the
    warning stream and everything else to the output stream.
    """

    def __init__(
        self,
        formatter=None,
        stream: Optional[TextIO] = None,
        error_stream: Optional[TextIO] = None,
        warn_stream: Optional[TextIO] = None,
    ):
        """
        Initialize console writer.

        Args:
            formatter: Log formatter (default: uses record's __str__)
            stream: Output stream (default: sys.stdout at write time)
            error_stream: Stream for error/fatal (default: sys.stderr at write time)
            warn_stream: Stream for warn (default: the error stream)
        """
        self.formatter = formatter
        self.stream = stream
        self.error_stream = error_stream
        self.warn_stream = warn_stream

    def stream_for(self, severity: Severity) -> TextIO:
        """Pick the stream a record of this severity goes to."""
        error_stream = self.error_stream or sys.stderr
        if severity >= Severity.ERROR:
            return error_stream
        if severity == Severity.WARN:
            return self.warn_stream or error_stream
        return self.stream or sys.stdout

    def write(self, record: LogRecord):
        """Write log record to console."""
        if self.formatter:
            msg = self.formatter.format(record)
        else:
            msg = str(record)

        stream = self.stream_for(record.severity)
        stream.write(msg + "\n")
        stream.flush()

    def flush(self):
        """Flush streams."""
        streams = [self.stream or sys.stdout, self.error_stream or sys.stderr, self.warn_stream]
        for stream in streams:
            if stream is not None:
                stream.flush()
