"""Structured diagnostic logging for component-logger.

This is the local, in-process logging layer. The library reports its own
health here (initialization fallbacks, delivery failures), and the
fallback sink writes undeliverable component events through it.

Records carry a ``structured_data`` mapping built from two sources:
the ambient LogContext (the session's transaction id and the component
being delivered for, set by the Logger) and keyword arguments of the
individual call. Formatters render that mapping as ``key=value`` pairs
or as top-level JSON fields.

Security Note:
    Component messages and record ids come from UI code. Pass them as
    structured keyword arguments rather than interpolating them into the
    message string so a CRLF in a message cannot forge a log line:

    # SAFE
    logger.info("Event dropped", component=name, message=text)

    # UNSAFE
    logger.info(f"Event dropped from {name}: {text}")

Example:
    logger = get_logger(__name__)
    logger.info("Endpoint ready", base_url="http://localhost:8080")

    with LogContext(transaction_id="TX-abc", component="Widget"):
        logger.debug("Remote logging failed", error="timeout")
        # ... - DEBUG - Remote logging failed | transaction_id=TX-abc
        #     component=Widget error=timeout

    configure_logging(json_format=True)
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
import threading
from collections.abc import Mapping, MutableMapping
from datetime import UTC, datetime
from types import MappingProxyType
from typing import IO, Any, cast

#: Name of the package root logger. Every logger handed out by
#: get_logger() should live under this name.
ROOT_LOGGER_NAME = "component_logger"

DEFAULT_TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_EMPTY: Mapping[str, Any] = MappingProxyType({})

_log_context: contextvars.ContextVar[Mapping[str, Any]] = contextvars.ContextVar(
    "component_logger_context", default=_EMPTY
)


# =============================================================================
# Context
# =============================================================================


class LogContext:
    """Scope ambient fields onto every record logged inside it.

    Backed by a ContextVar, so each asyncio task sees its own fields and
    a detached delivery task keeps the context it was created in. Nested
    scopes merge; inner values win. None values are dropped so an
    uninitialized session does not print ``transaction_id=null``.

    Usage:
        with LogContext(transaction_id=session.transaction_id):
            logger.debug("Flushing pending events")
    """

    def __init__(self, **fields: Any) -> None:
        self.fields = {k: v for k, v in fields.items() if v is not None}
        self._token: contextvars.Token[Mapping[str, Any]] | None = None

    def __enter__(self) -> LogContext:
        merged = {**_log_context.get(), **self.fields}
        self._token = _log_context.set(MappingProxyType(merged))
        return self

    def __exit__(self, *exc: object) -> None:
        if self._token is None:
            return
        _log_context.reset(self._token)
        self._token = None


def current_context() -> dict[str, Any]:
    """Fields of the innermost active LogContext (a copy)."""
    return dict(_log_context.get())


# =============================================================================
# Structured Logger
# =============================================================================


class StructuredLogger(logging.Logger):
    """Logger whose keyword arguments become structured data.

    The stdlib level methods (debug, info, warning, error, critical, log,
    exception) all funnel extra keyword arguments into ``_log``; this class
    only has to intercept that one call.

    Usage:
        logger = get_logger("component_logger.core")
        logger.info("Delivered", component="Widget", event_level="INFO")
    """

    def _log(  # type: ignore[override]
        self,
        level: int,
        msg: object,
        args: tuple[Any, ...] | MutableMapping[str, Any] | None,
        exc_info: Any = None,
        extra: Mapping[str, Any] | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        **fields: Any,
    ) -> None:
        structured = {**_log_context.get(), **fields}
        merged_extra = {**(extra or {}), "structured_data": structured}
        # One extra frame: this override sits between the caller and
        # logging's own _log.
        super()._log(
            level,
            msg,
            args,  # type: ignore[arg-type]
            exc_info=exc_info,
            extra=merged_extra,
            stack_info=stack_info,
            stacklevel=stacklevel + 1,
        )


# =============================================================================
# Formatters
# =============================================================================


def _structured(record: logging.LogRecord) -> Mapping[str, Any]:
    return getattr(record, "structured_data", None) or _EMPTY


def _format_value(value: Any) -> str:
    """Render one structured value for ``key=value`` output.

    Example:
        >>> _format_value(None)
        'null'
        >>> _format_value("Data Load")
        '"Data Load"'
        >>> _format_value({"recordCount": 3})
        '{"recordCount": 3}'
    """
    if value is None:
        return "null"
    if isinstance(value, dict | list):
        return json.dumps(value, default=str)
    text = str(value)
    return f'"{text}"' if isinstance(value, str) and " " in text else text


class StructuredFormatter(logging.Formatter):
    """Human-readable lines: ``<standard format> | key=value key=value``."""

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        include_structured: bool = True,
    ) -> None:
        """Initialize the formatter.

        Args:
            fmt: %-style format string. Defaults to DEFAULT_TEXT_FORMAT.
            datefmt: Date format for %(asctime)s, or None for the default.
            include_structured: Append the structured pairs.
        """
        super().__init__(fmt or DEFAULT_TEXT_FORMAT, datefmt)
        self.include_structured = include_structured

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        structured = _structured(record) if self.include_structured else _EMPTY
        if not structured:
            return line
        pairs = " ".join(f"{key}={_format_value(v)}" for key, v in structured.items())
        return f"{line} | {pairs}"


class JSONFormatter(logging.Formatter):
    """One JSON object per line for log shippers.

    Fixed keys (``timestamp``, ``level``, ``logger``, ``message``) come
    first and cannot be overwritten by structured fields; ``exception`` is
    added when the record carries exc_info. Unencodable values go through
    str().
    """

    def format(self, record: logging.LogRecord) -> str:
        document = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in _structured(record).items():
            document.setdefault(key, value)
        if record.exc_info:
            document["exception"] = self.formatException(record.exc_info)
        return json.dumps(document, default=str)


# =============================================================================
# Configuration
# =============================================================================

_configured = False
_config_lock = threading.Lock()


def _build_handler(
    json_format: bool,
    stream: IO[str] | None,
    include_structured: bool,
) -> logging.Handler:
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(StructuredFormatter(include_structured=include_structured))
    return handler


def _install(level: int | str, handler: logging.Handler) -> None:
    """Attach ``handler`` to the package root (lock must be held)."""
    global _configured

    if _configured:
        return
    logging.setLoggerClass(StructuredLogger)
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.addHandler(handler)
    root.propagate = False
    _configured = True


def _uninstall() -> None:
    """Detach and close package handlers (lock must be held)."""
    global _configured

    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    _configured = False


def configure_logging(
    level: int | str = logging.INFO,
    json_format: bool = False,
    stream: IO[str] | None = None,
    include_structured: bool = True,
    force: bool = False,
) -> None:
    """Configure diagnostic logging for the whole package.

    Installs one stream handler on the ``component_logger`` logger, which
    stops propagating to the root logger. Later calls are no-ops unless
    ``force=True``.

    The level only governs diagnostics. The fallback sink's logger keeps
    its own level, so undeliverable events are written at any verbosity.

    Args:
        level: Minimum diagnostic level, int or name ('DEBUG', 'INFO', ...).
        json_format: Use JSONFormatter instead of StructuredFormatter.
        stream: Output stream. Defaults to sys.stderr.
        include_structured: Append structured data in text mode.
        force: Drop the existing handler and configure again.

    Example:
        >>> configure_logging(level=logging.DEBUG)
        >>> buffer = io.StringIO()
        >>> configure_logging(stream=buffer, json_format=True, force=True)
    """
    with _config_lock:
        if force:
            _uninstall()
        if not _configured:
            _install(level, _build_handler(json_format, stream, include_structured))


def reset_logging() -> None:
    """Remove the package handler and mark logging unconfigured.

    Meant for tests. The next configure_logging() or get_logger() call
    configures again.
    """
    with _config_lock:
        _uninstall()


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger, configuring defaults on first use.

    Args:
        name: Logger name, normally ``__name__``. Names outside the
            ``component_logger`` hierarchy still work but do not inherit
            the package handler.

    Returns:
        StructuredLogger accepting structured keyword arguments.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Transaction id acquired", transaction_id="TX-1")
    """
    if not _configured:
        configure_logging()
    return cast(StructuredLogger, logging.getLogger(name))
