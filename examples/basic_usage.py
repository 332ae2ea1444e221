#!/usr/bin/env python3
"""Basic usage example"""

from universal_logger import LoggerBuilder, Severity

def main():
    # Create logger with builder pattern
    logger = (LoggerBuilder()
        .with_level(Severity.DEBUG)
        .with_console(colored=True)
        .with_file("logs/example.log")
        .with_rotation(max_bytes=1024 * 1024, backup_count=3)
        .with_buffer(50)
        .with_metadata(service="example")
        .build())

    # Severities
    logger.debug("This is debug")
    logger.info("Application started", version="1.0.0")
    logger.warn("Disk usage high", {"percent": 91})

    # Categories carry their own severity
    logger.database("Query executed", sql="SELECT 1", rows=1)
    logger.security("Failed login", user="bob", password="hunter2")

    try:
        {}["missing"]
    except KeyError as e:
        logger.error(e)

    # Flush and shutdown
    logger.flush()
    logger.shutdown()

if __name__ == "__main__":
    main()
