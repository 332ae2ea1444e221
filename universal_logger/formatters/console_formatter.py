"""
Console formatter with ANSI colours and category tags

Line layout:
    <timestamp> <emoji> [SEVERITY][CATEGORY] <message> @ <source>
      key: value
      key:
        multi-line value
"""

from universal_logger.core.log_entry import LogRecord
from universal_logger.formatters.base_formatter import BaseFormatter
from universal_logger.formatters import styles


class ConsoleFormatter(BaseFormatter):
    """
    Format log records for a terminal.

    Colour functions become no-ops when colours are disabled. The category
    tag (and its emoji) is only shown when the category differs from the
    severity.
    """

    def __init__(
        self,
        use_colors: bool = True,
        use_emoji: bool = True,
        show_category_tag: bool = True,
        prefix: str = "",
    ):
        """
        Initialize console formatter.

        Args:
            use_colors: Wrap tags and values in ANSI colour codes
            use_emoji: Put the category emoji before the tags
            show_category_tag: Show [CATEGORY] after [SEVERITY]
            prefix: Text shown before every message

        Example:
            formatter = ConsoleFormatter(use_colors=False, use_emoji=False)
            formatter.format(LogRecord.create("database", "Query executed"))
            # '2023-12-25T12:00:00.000Z [INFO][DATABASE] Query executed'
        """
        self.use_colors = use_colors
        self.use_emoji = use_emoji
        self.show_category_tag = show_category_tag
        self.prefix = prefix

    def _paint(self, text: str, code: str) -> str:
        return styles.colorize(text, code, self.use_colors)

    def format_tags(self, record: LogRecord) -> str:
        """Render the emoji, severity tag and category tag."""
        severity = record.severity.label
        level_color = styles.severity_color(severity)
        tags = self._paint(f"[{severity.upper()}]", level_color)

        if not (record.has_category_tag and self.show_category_tag):
            return tags

        category_tag = self._paint(f"[{record.category.upper()}]", styles.category_color(record.category))
        symbol = styles.category_symbol(record.category) if self.use_emoji else ""
        emoji = f"{symbol} " if symbol else ""
        return f"{emoji}{tags}{category_tag}"

    def format(self, record: LogRecord) -> str:
        """
        Format log record for console output.

        Args:
            record: Log record to format

        Returns:
            One or more lines of text
        """
        level_color = styles.severity_color(record.severity.label)
        time_str = self._paint(self._paint(record.timestamp, styles.DIM), level_color)
        message = f"{self.prefix} {record.message}" if self.prefix else record.message
        source = record.metadata.get("source")
        source_str = self._paint(f" @ {source}", styles.DIM) if source else ""

        line = f"{time_str} {self.format_tags(record)} {self._paint(message, styles.WHITE)}{source_str}"

        if record.metadata:
            metadata_str = self.format_metadata(
                record.metadata,
                key_style=lambda key: self._paint(key, styles.CYAN),
                value_style=lambda value: self._paint(value, styles.WHITE),
            )
            if metadata_str:
                line += "\n" + metadata_str
        return line

    def __repr__(self) -> str:
        """String representation."""
        return f"ConsoleFormatter(colors={self.use_colors}, emoji={self.use_emoji})"
