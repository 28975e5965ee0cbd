"""Types for remote logging endpoints.

Protocols:
    LoggingEndpoint: the two-operation RPC contract the Logger consumes

TypedDicts:
    ComponentLogEntry: one event as sent on the wire

Exceptions:
    EndpointError: raised by bundled endpoints for any remote failure
"""

from __future__ import annotations

from typing import Protocol, TypedDict, runtime_checkable

__all__ = [
    "ComponentLogEntry",
    "EndpointError",
    "LoggingEndpoint",
    "TRANSACTION_HEADER",
]

#: HTTP header carrying the session id on log requests.
TRANSACTION_HEADER = "X-Transaction-Id"


class ComponentLogEntry(TypedDict):
    """One component log event in wire form.

    Keys use the endpoint's camelCase names. ``additionalData`` is JSON
    text produced by serialize_payload(), never a mapping. The session id
    is not part of the entry; the endpoint binds it from its own context.
    """

    component: str
    level: str
    message: str
    recordId: str | None
    additionalData: str | None


class EndpointError(Exception):
    """A remote logging operation failed.

    The Logger treats every exception from an endpoint the same way; this
    type just gives bundled endpoints a single thing to raise.
    """


@runtime_checkable
class LoggingEndpoint(Protocol):  # pragma: no cover
    """Remote logging service consumed by the Logger.

    Implemented by HttpLoggingEndpoint and DigitalTwinEndpoint.
    """

    async def get_transaction_id(self) -> str:
        """Return an opaque session/transaction identifier."""
        ...

    async def log_from_component(self, entry: ComponentLogEntry) -> None:
        """Persist one log event."""
        ...
