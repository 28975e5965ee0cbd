"""Structured payloads attached to component log events.

Payloads stay typed inside the library and are turned into JSON text only
at the transport boundary (serialize_payload). Three shapes exist:

    DataPayload      arbitrary caller mapping
    ErrorInfo        built by Logger.log_error from a caught exception
    PerformanceInfo  built by Logger.log_performance

Example:
    payload = ErrorInfo.from_exception(exc, context="handleLoadData")
    text = serialize_payload(payload)
    # '{"message": "boom", "stack": "Traceback ...", "context": ...}'
"""

from __future__ import annotations

import json
import traceback
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any, TypeAlias

__all__ = [
    "DataPayload",
    "ErrorInfo",
    "PerformanceInfo",
    "Payload",
    "as_payload",
    "serialize_payload",
    "utc_timestamp",
]


def utc_timestamp() -> str:
    """Current time as ISO 8601 UTC text with millisecond precision.

    Example:
        >>> utc_timestamp()
        '2026-10-19T08:15:02.113+00:00'
    """
    return datetime.now(UTC).isoformat(timespec="milliseconds")


@dataclass(frozen=True)
class DataPayload:
    """Caller-supplied key-value data, passed through unchanged."""

    data: Mapping[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return dict(self.data)


@dataclass(frozen=True)
class ErrorInfo:
    """Structured description of a caught failure.

    Attributes:
        message: ``str(error)``.
        stack: Formatted traceback text. For an exception that was never
            raised this is just the ``Type: message`` line.
        context: Free-form description of where the failure was caught.
        timestamp: ISO 8601 time the payload was built.
    """

    message: str
    stack: str
    context: str = ""
    timestamp: str = field(default_factory=utc_timestamp)

    @classmethod
    def from_exception(cls, error: BaseException, context: str = "") -> ErrorInfo:
        """Build an ErrorInfo from an exception object.

        Args:
            error: The caught exception. Only read, never re-raised.
            context: Where it was caught, e.g. a handler name.

        Returns:
            ErrorInfo stamped with the current time.
        """
        stack = "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )
        return cls(message=str(error), stack=stack, context=context)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "stack": self.stack,
            "context": self.context,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class PerformanceInfo:
    """Timing measurement for a named operation.

    ``extra`` keys are merged after the base keys, so a caller field named
    ``operation`` or ``timestamp`` replaces the generated one.
    """

    operation: str
    duration_ms: float
    timestamp: str = field(default_factory=utc_timestamp)
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def to_dict(self) -> dict[str, Any]:
        return {
            "operation": self.operation,
            "duration": self.duration_ms,
            "timestamp": self.timestamp,
            **self.extra,
        }


Payload: TypeAlias = DataPayload | ErrorInfo | PerformanceInfo


def as_payload(data: Payload | Mapping[str, Any] | None) -> Payload | None:
    """Wrap a plain mapping in DataPayload; pass payloads and None through.

    Raises:
        TypeError: If ``data`` is neither a payload, a mapping nor None.
    """
    if data is None or isinstance(data, DataPayload | ErrorInfo | PerformanceInfo):
        return data
    if isinstance(data, Mapping):
        return DataPayload(data)
    raise TypeError(
        f"additional_data must be a mapping or payload, got {type(data).__name__}"
    )


def serialize_payload(payload: Payload | None) -> str | None:
    """Encode a payload as JSON text for the endpoint.

    Values json cannot encode natively (datetimes, UUIDs, ...) go through
    str(). Circular structures still fail.

    Args:
        payload: Payload to encode, or None.

    Returns:
        JSON text, or None when there is no payload.

    Raises:
        ValueError: On circular references.
        TypeError: On mapping keys json cannot encode (e.g. tuples).
    """
    if payload is None:
        return None
    return json.dumps(payload.to_dict(), default=str)
