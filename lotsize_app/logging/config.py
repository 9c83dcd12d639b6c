"""
Centralized logging configuration for the position sizing engine.

This module configures structlog for all components. Library code only
obtains loggers; the host application decides the output format by calling
configure_logging once at startup.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    # Convert string level to logging constant
    log_level = getattr(logging, level.upper())

    # Configure standard library logging
    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    # Build processor chain
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    # Add timestamp if requested
    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    # Add caller information if requested
    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    # Add any extra processors
    if extra_processors:
        processors.extend(extra_processors)

    # Add final formatting processor
    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    # Configure structlog
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_sizing_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound with the sizing subsystem context.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for sizing decisions
    """
    return get_logger(name).bind(subsystem="sizing")


def log_calculation(
    logger: FilteringBoundLogger,
    symbol: str,
    category: str,
    lot_size: Optional[float] = None,
    limiting_factor: Optional[str] = None,
    error_kind: Optional[str] = None,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log the outcome of one sizing request with standardized fields.

    Args:
        logger: Structlog logger instance
        symbol: Instrument symbol
        category: Quote category value
        lot_size: Recommended lot size when the calculation succeeded
        limiting_factor: Which budget bound the result
        error_kind: Error kind when the calculation failed
        context: Additional context data
    """
    bound_logger = logger.bind(
        symbol=symbol,
        category=category,
        outcome="error" if error_kind else "sized",
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if error_kind:
        bound_logger.warning("Calculation rejected", error_kind=error_kind)
    else:
        bound_logger.info(
            "Position sized",
            lot_size=lot_size,
            limiting_factor=limiting_factor,
        )
