"""Base class for UI components that log through an injected Logger.

The host UI framework owns the lifecycle; it calls the hooks below. Each
component gets its own ``for_component()`` view of the shared Logger, so
several components can log concurrently without fighting over one
component tag.
"""

from __future__ import annotations

import traceback
from typing import TYPE_CHECKING

from component_logger.core.payloads import utc_timestamp

if TYPE_CHECKING:
    from component_logger.core.logger import Logger

__all__ = ["LoggedComponent"]


class LoggedComponent:
    """Component with logging lifecycle hooks.

    Attributes:
        record_id: Business record the component is showing, attached to
            every event as the correlation id.

    Example:
        >>> class Header(LoggedComponent):
        ...     pass
        >>> header = Header(logger, record_id="001xx")
        >>> await header.connected()      # INFO "Component initialized"
        >>> header.disconnected()         # fire-and-forget INFO
    """

    #: Component tag; defaults to the class name.
    component_name: str | None = None

    def __init__(self, logger: Logger, record_id: str | None = None) -> None:
        self.record_id = record_id
        self.log = logger.for_component(self.component_name or type(self).__name__)

    async def connected(self) -> None:
        """Mount hook: awaited INFO event."""
        await self.log.info("Component initialized", self.record_id)

    def disconnected(self) -> None:
        """Unmount hook: cannot await, so the event is fire-and-forget."""
        self.log.log_sync("INFO", "Component disconnected", self.record_id)

    def error_callback(self, error: BaseException, stack: str | None = None) -> None:
        """Unexpected-error hook: fire-and-forget FATAL event.

        Args:
            error: The error the framework caught.
            stack: Framework-provided stack text; the exception's own
                traceback is used when None.
        """
        if stack is None:
            stack = "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            )
        self.log.log_sync(
            "FATAL",
            f"Unexpected component error: {error}",
            self.record_id,
            {
                "stack": stack,
                "component": self.log.component_name,
                "timestamp": utc_timestamp(),
            },
        )
