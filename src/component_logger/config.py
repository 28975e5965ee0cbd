"""Logger configuration and factory.

Supports switching between the real HTTP logging service and the digital
twin endpoint, so components can run and be tested without a service.

The result of create_logger() is meant to be built once at process start
and passed to components; there is no module-level logger instance.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from component_logger.core import (
    DEFAULT_COMPONENT_NAME,
    FallbackSink,
    Logger,
    SessionContext,
)
from component_logger.endpoints import (
    DEFAULT_TIMEOUT_S,
    DigitalTwinEndpoint,
    DigitalTwinEndpointConfig,
    HttpLoggingEndpoint,
    LoggingEndpoint,
)
from component_logger.observability import DeliveryStats, get_logger

logger = get_logger(__name__)

__all__ = [
    "DEFAULT_BASE_URL",
    "EndpointFactory",
    "EndpointMode",
    "LoggerConfig",
    "create_logger",
]

#: Where the bundled reference service listens by default.
DEFAULT_BASE_URL = "http://127.0.0.1:8080/api/logger"


class EndpointMode(Enum):
    """Endpoint selection."""

    HTTP = "http"  # Remote logging service over HTTP
    DIGITAL_TWIN = "digital_twin"  # In-memory simulation


@dataclass
class LoggerConfig:
    """Configuration for endpoint selection and logger defaults.

    Attributes:
        mode: HTTP for a real service, DIGITAL_TWIN for simulation.
        base_url: Service prefix used in HTTP mode.
        timeout_s: HTTP request timeout in seconds.
        component_name: Initial component tag of the created logger.
        twin_latency_ms: Simulated latency in DIGITAL_TWIN mode.
    """

    mode: EndpointMode = EndpointMode.DIGITAL_TWIN
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = DEFAULT_TIMEOUT_S
    component_name: str = DEFAULT_COMPONENT_NAME
    twin_latency_ms: float = 0.0


class EndpointFactory:
    """Create the endpoint matching a LoggerConfig.

    Example:
        >>> factory = EndpointFactory(LoggerConfig(mode=EndpointMode.HTTP))
        >>> endpoint = factory.create_endpoint()   # HttpLoggingEndpoint
    """

    def __init__(self, config: LoggerConfig | None = None) -> None:
        self.config = config or LoggerConfig()

    def create_endpoint(self) -> LoggingEndpoint:
        """Build an endpoint for the configured mode.

        Returns:
            HttpLoggingEndpoint in HTTP mode, DigitalTwinEndpoint in
            DIGITAL_TWIN mode. Callers own the result and should
            ``aclose()`` an HTTP endpoint on shutdown.
        """
        if self.config.mode == EndpointMode.HTTP:
            return HttpLoggingEndpoint(
                self.config.base_url, timeout_s=self.config.timeout_s
            )
        return DigitalTwinEndpoint(
            DigitalTwinEndpointConfig(latency_ms=self.config.twin_latency_ms)
        )


def create_logger(
    config: LoggerConfig | None = None,
    *,
    endpoint: LoggingEndpoint | None = None,
    sink: FallbackSink | None = None,
    stats: DeliveryStats | None = None,
) -> Logger:
    """Build the SessionContext + Logger pair for one process.

    Args:
        config: Settings; defaults to LoggerConfig() (digital twin).
        endpoint: Endpoint to use instead of creating one from config.
        sink: Fallback sink; defaults to FallbackSink().
        stats: Optional delivery statistics shared by session and logger.

    Returns:
        An uninitialized Logger. The session id is fetched on first use.

    Example:
        >>> logger = create_logger(LoggerConfig(mode=EndpointMode.HTTP))
        >>> component = ExampleComponent(logger)
    """
    config = config or LoggerConfig()
    if endpoint is None:
        endpoint = EndpointFactory(config).create_endpoint()

    session = SessionContext(endpoint, stats=stats)
    logger.debug(
        "Logger created",
        endpoint=type(endpoint).__name__,
        component=config.component_name,
    )
    return Logger(
        session,
        endpoint,
        sink=sink,
        stats=stats,
        component_name=config.component_name,
    )
