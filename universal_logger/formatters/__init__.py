"""
Log formatters module

Provides the line formatters for each output format and the value
formatter used to render metadata.
"""

from universal_logger.core.logger_config import LoggerConfig, OutputFormat
from universal_logger.formatters.base_formatter import BaseFormatter
from universal_logger.formatters.console_formatter import ConsoleFormatter
from universal_logger.formatters.json_formatter import JSONFormatter, JSONLinesFormatter
from universal_logger.formatters.text_formatter import TextFormatter
from universal_logger.formatters.value_formatter import UNDEFINED, ValueKind, classify, render


def create_formatter(config: LoggerConfig) -> BaseFormatter:
    """Build the console-side formatter selected by config.format."""
    if config.format is OutputFormat.JSON:
        return JSONFormatter(indent=config.json_indent)
    if config.format is OutputFormat.TEXT:
        return TextFormatter(prefix=config.prefix, show_category_tag=config.show_category_tag)
    return ConsoleFormatter(
        use_colors=config.use_colors,
        use_emoji=config.use_emoji,
        show_category_tag=config.show_category_tag,
        prefix=config.prefix,
    )


__all__ = [
    "BaseFormatter",
    "ConsoleFormatter",
    "JSONFormatter",
    "JSONLinesFormatter",
    "TextFormatter",
    "UNDEFINED",
    "ValueKind",
    "classify",
    "create_formatter",
    "render",
]
