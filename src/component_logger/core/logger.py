"""Component logger facade.

The Logger is what UI components call. It tags events with a component
name, makes sure the session is initialized, sends the event to the
remote endpoint and, when that fails for any reason, writes the event to
the local fallback sink instead. A logging failure never becomes the
caller's failure.

Key Components:
- Logger: leveled logging, error/performance helpers, fire-and-forget
- LoggerState: UNINITIALIZED -> INITIALIZING -> READY

Example:
    logger = create_logger(config)           # once, at process start
    widget_log = logger.for_component("Widget")

    await widget_log.info("Component initialized", record_id="001xx")
    await widget_log.log_performance("Data Load", 812.5, {"recordCount": 3})

    try:
        load()
    except Exception as e:
        await widget_log.log_error(e, "handleLoadData")

    # From a teardown hook that cannot await:
    widget_log.log_sync("INFO", "Component disconnected")
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from enum import Enum
from typing import Any

from component_logger.core.fallback import FallbackSink
from component_logger.core.levels import LogLevel, parse_level
from component_logger.core.payloads import (
    ErrorInfo,
    Payload,
    PerformanceInfo,
    as_payload,
    serialize_payload,
)
from component_logger.core.session import SessionContext
from component_logger.endpoints.types import ComponentLogEntry, LoggingEndpoint
from component_logger.observability import DeliveryStats, LogContext, get_logger

logger = get_logger(__name__)

__all__ = [
    "DEFAULT_COMPONENT_NAME",
    "Logger",
    "LoggerState",
    "format_duration",
]

#: Component tag used until set_component_name() is called.
DEFAULT_COMPONENT_NAME = "Unknown"

AdditionalData = Payload | Mapping[str, Any] | None


class LoggerState(Enum):
    """Initialization state of a Logger's session."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


def format_duration(duration_ms: float) -> str:
    """Render a duration for the performance message.

    Whole numbers drop the fractional part, everything else uses the
    shortest round-tripping repr.

    Example:
        >>> format_duration(123.4)
        '123.4'
        >>> format_duration(100.0)
        '100'
    """
    value = float(duration_ms)
    if value.is_integer():
        return str(int(value))
    return repr(value)


class Logger:
    """Degrading asynchronous logger for UI components.

    All public log operations settle normally whether or not the endpoint
    accepted the event. The only exception they raise is
    InvalidLevelError, for a level outside the five known values, before
    any I/O happens.

    The component tag is plain shared state with last-writer-wins
    semantics. Components that log concurrently should each hold their own
    ``for_component()`` view instead of calling set_component_name() on a
    shared instance.
    """

    def __init__(
        self,
        session: SessionContext,
        endpoint: LoggingEndpoint,
        *,
        sink: FallbackSink | None = None,
        stats: DeliveryStats | None = None,
        component_name: str = DEFAULT_COMPONENT_NAME,
        _pending: set[asyncio.Task[None]] | None = None,
    ) -> None:
        """Create a logger over a session and endpoint.

        Args:
            session: Shared SessionContext; should wrap the same endpoint.
            endpoint: Remote logging endpoint.
            sink: Fallback sink. Defaults to a FallbackSink on stderr.
            stats: Optional delivery statistics collector.
            component_name: Initial component tag.
        """
        self._session = session
        self._endpoint = endpoint
        self._sink = sink or FallbackSink()
        self._stats = stats
        self._component_name = component_name
        # Strong references keep detached tasks alive until they finish.
        self._pending: set[asyncio.Task[None]] = (
            _pending if _pending is not None else set()
        )

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def session(self) -> SessionContext:
        return self._session

    @property
    def component_name(self) -> str:
        return self._component_name

    @property
    def state(self) -> LoggerState:
        if self._session.initialized:
            return LoggerState.READY
        if self._session.initializing:
            return LoggerState.INITIALIZING
        return LoggerState.UNINITIALIZED

    @property
    def pending_count(self) -> int:
        """Number of fire-and-forget deliveries still in flight."""
        return len(self._pending)

    def set_component_name(self, name: str) -> None:
        """Tag every later event from this instance with ``name``."""
        self._component_name = name

    def for_component(self, name: str) -> Logger:
        """Return a logger with its own tag sharing everything else.

        The returned logger uses the same session, endpoint, sink, stats
        and pending-task set, so drain() on either waits for both.

        Example:
            >>> header_log = logger.for_component("Header")
            >>> footer_log = logger.for_component("Footer")
        """
        return Logger(
            self._session,
            self._endpoint,
            sink=self._sink,
            stats=self._stats,
            component_name=name,
            _pending=self._pending,
        )

    # -------------------------------------------------------------------------
    # Leveled logging
    # -------------------------------------------------------------------------

    async def log(
        self,
        level: LogLevel | str,
        message: str,
        record_id: str | None = None,
        additional_data: AdditionalData = None,
    ) -> None:
        """Send one event to the endpoint, degrading to the fallback sink.

        Steps: validate level, initialize the session if needed, serialize
        the payload, call the endpoint. Any exception from serialization
        or the endpoint is caught and the event is written to the fallback
        sink with its raw payload.

        The component tag is read when the call starts, so a later
        set_component_name() does not relabel an event already in flight.

        Args:
            level: LogLevel or one of the five exact level strings.
            message: Human-readable text.
            record_id: Optional correlation id (e.g. a business record).
            additional_data: Mapping or payload; None means no payload.

        Raises:
            InvalidLevelError: Unknown level. Raised before any I/O.
        """
        await self._deliver(
            parse_level(level),
            self._component_name,
            message,
            record_id,
            additional_data,
        )

    async def _deliver(
        self,
        log_level: LogLevel,
        component: str,
        message: str,
        record_id: str | None,
        additional_data: AdditionalData,
    ) -> None:
        transaction_id = await self._session.ensure_initialized()

        with LogContext(transaction_id=transaction_id, component=component):
            try:
                entry: ComponentLogEntry = {
                    "component": component,
                    "level": log_level.value,
                    "message": message,
                    "recordId": record_id,
                    "additionalData": serialize_payload(as_payload(additional_data)),
                }
                await self._endpoint.log_from_component(entry)
            except Exception as e:  # noqa: BLE001
                logger.debug("Remote logging failed", error=f"{type(e).__name__}: {e}")
                self._fallback(
                    log_level, component, message, record_id, additional_data, e
                )
            else:
                if self._stats is not None:
                    self._stats.record_delivered(log_level.value)

    def _fallback(
        self,
        level: LogLevel,
        component: str,
        message: str,
        record_id: str | None,
        additional_data: AdditionalData,
        error: BaseException | None = None,
    ) -> None:
        self._sink.write(
            level, component, message, record_id, additional_data, error=error
        )
        if self._stats is not None:
            self._stats.record_fallback(level.value, error)

    async def debug(
        self,
        message: str,
        record_id: str | None = None,
        additional_data: AdditionalData = None,
    ) -> None:
        await self.log(LogLevel.DEBUG, message, record_id, additional_data)

    async def info(
        self,
        message: str,
        record_id: str | None = None,
        additional_data: AdditionalData = None,
    ) -> None:
        await self.log(LogLevel.INFO, message, record_id, additional_data)

    async def warn(
        self,
        message: str,
        record_id: str | None = None,
        additional_data: AdditionalData = None,
    ) -> None:
        await self.log(LogLevel.WARN, message, record_id, additional_data)

    async def error(
        self,
        message: str,
        record_id: str | None = None,
        additional_data: AdditionalData = None,
    ) -> None:
        await self.log(LogLevel.ERROR, message, record_id, additional_data)

    async def fatal(
        self,
        message: str,
        record_id: str | None = None,
        additional_data: AdditionalData = None,
    ) -> None:
        await self.log(LogLevel.FATAL, message, record_id, additional_data)

    # -------------------------------------------------------------------------
    # Structured helpers
    # -------------------------------------------------------------------------

    async def log_error(
        self,
        error: BaseException,
        context: str = "",
        record_id: str | None = None,
    ) -> None:
        """Log a caught exception at ERROR with an ErrorInfo payload.

        The message is ``"Error in <context>: <str(error)>"``; the payload
        carries message, stack, context and timestamp.

        Example:
            >>> try:
            ...     raise ValueError("boom")
            ... except ValueError as e:
            ...     await logger.log_error(e, "handleLoadData")
            # message: "Error in handleLoadData: boom"
        """
        info = ErrorInfo.from_exception(error, context)
        await self.error(f"Error in {context}: {info.message}", record_id, info)

    async def log_performance(
        self,
        operation: str,
        duration_ms: float,
        additional_data: Mapping[str, Any] | None = None,
    ) -> None:
        """Log a timing measurement at INFO with a PerformanceInfo payload.

        The message is ``"Performance: <operation> took <duration>ms"``.
        Keys of ``additional_data`` are merged into the payload after
        operation, duration and timestamp.

        An ``additional_data`` that is not a mapping, or a duration that is
        not a number, sends the event to the fallback sink as given.
        """
        try:
            if additional_data is not None and not isinstance(additional_data, Mapping):
                raise TypeError(
                    "additional_data must be a mapping, "
                    f"not {type(additional_data).__name__}"
                )
            message = f"Performance: {operation} took {format_duration(duration_ms)}ms"
            info = PerformanceInfo(
                operation=operation,
                duration_ms=duration_ms,
                extra=dict(additional_data or {}),
            )
        except Exception as e:  # noqa: BLE001
            logger.debug(
                "Performance event not loggable", error=f"{type(e).__name__}: {e}"
            )
            self._fallback(
                LogLevel.INFO,
                self._component_name,
                f"Performance: {operation}",
                None,
                {"duration_ms": duration_ms, "additional_data": additional_data},
                e,
            )
            return
        await self.info(message, None, info)

    # -------------------------------------------------------------------------
    # Fire-and-forget
    # -------------------------------------------------------------------------

    def log_sync(
        self,
        level: LogLevel | str,
        message: str,
        record_id: str | None = None,
        additional_data: AdditionalData = None,
    ) -> None:
        """Start a log() call without waiting for it.

        Returns before the endpoint is contacted. The detached task is
        held in a set until it completes; its outcome is only ever seen by
        the fallback sink. Without a running event loop the event cannot
        be scheduled and goes straight to the fallback sink.

        Raises:
            InvalidLevelError: Unknown level, raised synchronously.
        """
        log_level = parse_level(level)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, logging locally")
            self._fallback(
                log_level, self._component_name, message, record_id, additional_data
            )
            return

        component = self._component_name
        task = loop.create_task(
            self._deliver(log_level, component, message, record_id, additional_data),
            name=f"component-log-{log_level.value.lower()}",
        )
        self._pending.add(task)
        task.add_done_callback(
            lambda t: self._on_detached_done(
                t, log_level, component, message, record_id, additional_data
            )
        )

    def _on_detached_done(
        self,
        task: asyncio.Task[None],
        level: LogLevel,
        component: str,
        message: str,
        record_id: str | None,
        additional_data: AdditionalData,
    ) -> None:
        self._pending.discard(task)
        if task.cancelled():
            # e.g. asyncio.run() shutting down before delivery finished
            logger.debug("Fire-and-forget log cancelled", component=component)
            self._fallback(level, component, message, record_id, additional_data)
            return
        # Retrieving the exception marks it observed.
        error = task.exception()
        if error is None:
            return
        logger.error(
            "Async logging failed",
            error=f"{type(error).__name__}: {error}",
            component=component,
        )
        self._sink.write(level, component, message, record_id, additional_data, error)

    async def drain(self) -> None:
        """Wait until every fire-and-forget delivery has finished.

        Meant for shutdown paths and tests. Deliveries started while
        draining are waited for too.
        """
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
