"""Observability module for component-logger.

Provides the structured diagnostic logging the library reports through
(and that the fallback sink writes to), plus delivery statistics.

Example:
    from component_logger.observability import get_logger, LogContext

    logger = get_logger(__name__)
    logger.info("Endpoint configured", base_url="http://localhost:8080")

    with LogContext(transaction_id="TX-1"):
        logger.debug("Remote logging failed", component="Widget")

Statistics Example:
    from component_logger.observability import DeliveryStats

    stats = DeliveryStats()
    logger = create_logger(config, stats=stats)
    ...
    print(stats.get_summary().delivery_rate)
"""

from component_logger.observability.logging import (
    ROOT_LOGGER_NAME,
    JSONFormatter,
    LogContext,
    StructuredFormatter,
    StructuredLogger,
    configure_logging,
    current_context,
    get_logger,
    reset_logging,
)
from component_logger.observability.stats import (
    DeliveryStats,
    DeliverySummary,
)

__all__ = [
    # Logging
    "ROOT_LOGGER_NAME",
    "JSONFormatter",
    "LogContext",
    "StructuredFormatter",
    "StructuredLogger",
    "configure_logging",
    "current_context",
    "get_logger",
    "reset_logging",
    # Statistics
    "DeliveryStats",
    "DeliverySummary",
]
