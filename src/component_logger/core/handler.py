"""Bridge from stdlib logging to the remote logging endpoint.

Lets code that already uses ``logging.getLogger(...)`` feed the remote
endpoint through a Logger without being rewritten.

Usage:
    remote_log = create_logger(config).for_component("BackgroundSync")
    logging.getLogger("sync").addHandler(RemoteLogHandler(remote_log))
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from component_logger.core.levels import from_python_level
from component_logger.observability.logging import ROOT_LOGGER_NAME

if TYPE_CHECKING:
    from component_logger.core.logger import Logger

__all__ = ["RemoteLogHandler"]


class RemoteLogHandler(logging.Handler):
    """Handler that forwards records to Logger.log_sync().

    Records are mapped onto the five-level taxonomy (WARNING -> WARN,
    CRITICAL -> FATAL). Structured data from a StructuredLogger becomes
    the event payload; exception info is added under ``exception``.

    Records from the ``component_logger`` hierarchy are never forwarded:
    the Logger reports its own failures there, and forwarding them would
    loop. A thread-local guard covers the remaining re-entrant cases.
    """

    _local = threading.local()

    def __init__(self, logger: Logger, level: int = logging.NOTSET) -> None:
        """Create the handler.

        Args:
            logger: Logger that receives the forwarded events. Its
                component tag applies to every forwarded record.
            level: Minimum stdlib level to forward.
        """
        super().__init__(level)
        self._logger = logger

    def emit(self, record: logging.LogRecord) -> None:
        """Forward one record without blocking.

        Exceptions are passed to handleError(), never raised.
        """
        if record.name == ROOT_LOGGER_NAME or record.name.startswith(
            f"{ROOT_LOGGER_NAME}."
        ):
            return
        if getattr(self._local, "emitting", False):
            return

        try:
            self._local.emitting = True

            data: dict[str, Any] = {"logger": record.name}
            data.update(getattr(record, "structured_data", {}))
            if record.exc_info:
                data["exception"] = self.format_exception(record)

            self._logger.log_sync(
                from_python_level(record.levelno),
                record.getMessage(),
                None,
                data,
            )
        except Exception:
            self.handleError(record)
        finally:
            self._local.emitting = False

    def format_exception(self, record: logging.LogRecord) -> str:
        formatter = self.formatter or logging.Formatter()
        return formatter.formatException(record.exc_info)  # type: ignore[arg-type]
