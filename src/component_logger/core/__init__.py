"""Core of the degrading component logger.

Key Components:
- SessionContext: one transaction id per process, local fallback on failure
- Logger: leveled remote logging that degrades to a local sink
- FallbackSink: local output for undeliverable events
- RemoteLogHandler: stdlib logging -> Logger bridge
- LogLevel / payload types shared with the endpoint
"""

from component_logger.core.fallback import FALLBACK_LOGGER_NAME, FallbackSink
from component_logger.core.handler import RemoteLogHandler
from component_logger.core.levels import (
    InvalidLevelError,
    LogLevel,
    from_python_level,
    parse_level,
)
from component_logger.core.logger import (
    DEFAULT_COMPONENT_NAME,
    Logger,
    LoggerState,
    format_duration,
)
from component_logger.core.payloads import (
    DataPayload,
    ErrorInfo,
    Payload,
    PerformanceInfo,
    as_payload,
    serialize_payload,
)
from component_logger.core.session import (
    FALLBACK_ID_PREFIX,
    SessionContext,
    generate_fallback_id,
)

__all__ = [
    # Session
    "FALLBACK_ID_PREFIX",
    "SessionContext",
    "generate_fallback_id",
    # Logger
    "DEFAULT_COMPONENT_NAME",
    "Logger",
    "LoggerState",
    "format_duration",
    # Levels
    "InvalidLevelError",
    "LogLevel",
    "from_python_level",
    "parse_level",
    # Payloads
    "DataPayload",
    "ErrorInfo",
    "Payload",
    "PerformanceInfo",
    "as_payload",
    "serialize_payload",
    # Local output
    "FALLBACK_LOGGER_NAME",
    "FallbackSink",
    "RemoteLogHandler",
]
