"""Local fallback sink for events the remote endpoint did not accept.

Writes through the ``component_logger.fallback`` structured logger, so the
output lands wherever diagnostic logging is configured (stderr by
default, JSON lines with ``configure_logging(json_format=True)``). Records
carry the ambient LogContext, so the session transaction id is attached.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from component_logger.core.levels import LogLevel
from component_logger.core.payloads import Payload
from component_logger.observability import StructuredLogger, get_logger

__all__ = ["FALLBACK_LOGGER_NAME", "FallbackSink"]

FALLBACK_LOGGER_NAME = "component_logger.fallback"


class FallbackSink:
    """Last-resort output for component log events.

    ``write`` never raises. A failure inside the sink itself cannot be
    reported anywhere else and is dropped without retry.

    Example:
        >>> sink = FallbackSink()
        >>> sink.write(LogLevel.INFO, "Widget", "hello", None, None)
        2026-10-19 ... - component_logger.fallback - INFO - [INFO] Widget: hello
        | event_level=INFO component=Widget record_id=null additional_data=null
    """

    def __init__(self, logger: StructuredLogger | None = None) -> None:
        """Create a sink.

        The default logger is pinned to DEBUG so that events of every
        level are written, whatever level diagnostics are configured at.

        Args:
            logger: Logger to write to. Defaults to the
                ``component_logger.fallback`` logger.
        """
        if logger is None:
            logger = get_logger(FALLBACK_LOGGER_NAME)
            logger.setLevel(logging.DEBUG)
        self._logger = logger

    def write(
        self,
        level: LogLevel,
        component: str,
        message: str,
        record_id: str | None,
        additional_data: Payload | Mapping[str, Any] | None,
        error: BaseException | None = None,
    ) -> None:
        """Emit one event locally.

        Args:
            level: Event level; mapped to the stdlib level of the record.
            component: Component tag of the event.
            message: Event message.
            record_id: Correlation id, or None.
            additional_data: Raw (unserialized) payload, or None.
            error: Why remote delivery failed, if known.
        """
        raw: Any = additional_data
        if additional_data is not None and hasattr(additional_data, "to_dict"):
            raw = additional_data.to_dict()

        fields: dict[str, Any] = {
            "event_level": level.value,
            "component": component,
            "record_id": record_id,
            "additional_data": raw,
        }
        if error is not None:
            fields["error"] = f"{type(error).__name__}: {error}"

        try:
            self._logger.log(
                level.python_level,
                "[%s] %s: %s",
                level.value,
                component,
                message,
                **fields,
            )
        except Exception:  # noqa: BLE001
            pass  # Nowhere left to report to
