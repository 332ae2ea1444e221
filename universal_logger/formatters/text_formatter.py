"""
Text formatter with customizable template

Plain, uncoloured output for terminals that do not understand ANSI codes
or for piping into other tools.
"""

from universal_logger.core.log_entry import LogRecord
from universal_logger.formatters.base_formatter import BaseFormatter


class TextFormatter(BaseFormatter):
    """
    Format log records using a customizable template.

    Metadata is appended below the line as "key: value" entries.
    """

    DEFAULT_TEMPLATE = "[{timestamp}] [{level}]{category} {prefix}{message}{source}"

    def __init__(self, template: str = None, prefix: str = "", show_category_tag: bool = True):
        """
        Initialize text formatter.

        Args:
            template: Format template with placeholders.
                     Available placeholders:
                     - {timestamp}: Display timestamp
                     - {level}: Severity name (upper case)
                     - {category}: "[CATEGORY]" or empty
                     - {prefix}: Configured prefix followed by a space, or empty
                     - {message}: Log message
                     - {source}: " @ source" or empty
            prefix: Text shown before every message
            show_category_tag: Fill {category} when it differs from the level

        Example:
            formatter = TextFormatter("{level} - {message}")
        """
        self.template = template or self.DEFAULT_TEMPLATE
        self.prefix = prefix
        self.show_category_tag = show_category_tag

    def format(self, record: LogRecord) -> str:
        """
        Format log record using the template.

        Args:
            record: Log record to format

        Returns:
            Formatted string
        """
        show_category = record.has_category_tag and self.show_category_tag
        source = record.metadata.get("source")
        format_dict = {
            "timestamp": record.timestamp,
            "level": record.severity.name,
            "category": f"[{record.category.upper()}]" if show_category else "",
            "prefix": f"{self.prefix} " if self.prefix else "",
            "message": record.message,
            "source": f" @ {source}" if source else "",
        }

        try:
            line = self.template.format(**format_dict)
        except (KeyError, IndexError, ValueError) as e:
            # Fallback if template has unknown placeholder
            line = f"[FORMAT ERROR: {e}] {record.message}"

        metadata_str = self.format_metadata(record.metadata) if record.metadata else ""
        return f"{line}\n{metadata_str}" if metadata_str else line

    def __repr__(self) -> str:
        """String representation."""
        return f"TextFormatter(template='{self.template}')"
