"""Remote logging endpoint module.

Protocol:
    LoggingEndpoint: get_transaction_id() + log_from_component(entry)

Implementations:
    HttpLoggingEndpoint: JSON over HTTP via httpx
    DigitalTwinEndpoint: in-memory simulation with failure injection
"""

from component_logger.endpoints.http import DEFAULT_TIMEOUT_S, HttpLoggingEndpoint
from component_logger.endpoints.twin import (
    DigitalTwinEndpoint,
    DigitalTwinEndpointConfig,
    TwinLogRecord,
)
from component_logger.endpoints.types import (
    TRANSACTION_HEADER,
    ComponentLogEntry,
    EndpointError,
    LoggingEndpoint,
)

__all__ = [
    "ComponentLogEntry",
    "DEFAULT_TIMEOUT_S",
    "DigitalTwinEndpoint",
    "DigitalTwinEndpointConfig",
    "EndpointError",
    "HttpLoggingEndpoint",
    "LoggingEndpoint",
    "TRANSACTION_HEADER",
    "TwinLogRecord",
]
