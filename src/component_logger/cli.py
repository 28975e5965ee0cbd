"""CLI entry point for component-logger.

Provides the ``component-logger`` console script with subcommands:

- ``serve`` - Run the reference logging service (FastAPI + uvicorn)
- ``emit`` - Send one event to a logging service over HTTP
- ``demo`` - Run ExampleComponent through its lifecycle

Usage::

    # Start the reference service
    component-logger serve --host 127.0.0.1 --port 8080

    # Send an event (falls back to stderr if the service is down)
    component-logger emit --component Widget --level WARN "Disk almost full"

    # Exercise every Logger operation against the digital twin
    component-logger demo

    # JSON diagnostics
    component-logger --json-logs demo --mode http
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from typing import Any

from component_logger.config import (
    DEFAULT_BASE_URL,
    EndpointMode,
    LoggerConfig,
    create_logger,
)
from component_logger.core import LogLevel
from component_logger.endpoints import HttpLoggingEndpoint
from component_logger.observability import (
    DeliveryStats,
    configure_logging,
    get_logger,
)

logger = get_logger(__name__)

PROG = "component-logger"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080


def run_serve(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    log_level: str = "warning",
    latency_ms: float = 0.0,
) -> None:
    """Run the reference logging service until interrupted.

    Args:
        host: Bind address. Use 0.0.0.0 for remote access.
        port: Bind port.
        log_level: Uvicorn log level.
        latency_ms: Artificial delay for both service operations.
    """
    import uvicorn

    from component_logger.web.app import API_PREFIX, create_app

    app = create_app(latency_ms=latency_ms)
    logger.info(
        "Reference logging service listening",
        url=f"http://{host}:{port}{API_PREFIX}",
    )
    uvicorn.run(app, host=host, port=port, log_level=log_level)


async def run_emit(
    url: str,
    component: str,
    level: str,
    message: str,
    record_id: str | None = None,
    data: dict[str, Any] | None = None,
    timeout_s: float = 5.0,
) -> bool:
    """Send one event through an HttpLoggingEndpoint.

    Returns:
        True if the service accepted the event, False if it went to the
        fallback sink.
    """
    stats = DeliveryStats()
    async with HttpLoggingEndpoint(url, timeout_s=timeout_s) as endpoint:
        event_logger = create_logger(
            LoggerConfig(component_name=component),
            endpoint=endpoint,
            stats=stats,
        )
        await event_logger.log(level, message, record_id, data)
    return stats.get_summary().total_delivered == 1


async def run_demo(
    mode: EndpointMode = EndpointMode.DIGITAL_TWIN,
    url: str = DEFAULT_BASE_URL,
    fetch_delay_s: float = 0.2,
) -> dict[str, Any]:
    """Drive ExampleComponent through mount, every handler and unmount.

    Returns:
        Delivery statistics as a dict.
    """
    from component_logger.components import ExampleComponent
    from component_logger.config import EndpointFactory

    config = LoggerConfig(mode=mode, base_url=url)
    endpoint = EndpointFactory(config).create_endpoint()
    stats = DeliveryStats()
    demo_logger = create_logger(config, endpoint=endpoint, stats=stats)

    try:
        widget = ExampleComponent(
            demo_logger, record_id="DEMO-001", fetch_delay_s=fetch_delay_s
        )
        await widget.connected()
        await widget.handle_debug_log()
        await widget.handle_info_log()
        await widget.handle_error_log()
        await widget.handle_load_data()
        await widget.handle_simulate_error()
        widget.disconnected()
        await demo_logger.drain()
    finally:
        if isinstance(endpoint, HttpLoggingEndpoint):
            await endpoint.aclose()

    summary = stats.to_dict()
    logger.info(
        "Demo finished",
        transaction_id=demo_logger.session.transaction_id,
        delivered=summary["total_delivered"],
        fallback=summary["total_fallback"],
    )
    return summary


def _parse_data(text: str | None) -> dict[str, Any] | None:
    if text is None:
        return None
    value = json.loads(text)
    if not isinstance(value, dict):
        raise ValueError("--data must be a JSON object")
    return value


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate from main() for tests)."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Degrading asynchronous logging for UI components",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Write diagnostic logs as JSON lines",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable DEBUG diagnostic logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the reference logging service")
    serve.add_argument("--host", default=DEFAULT_HOST)
    serve.add_argument("--port", type=int, default=DEFAULT_PORT)
    serve.add_argument(
        "--log-level",
        choices=["critical", "error", "warning", "info", "debug"],
        default="warning",
        help="Uvicorn log level (default: warning)",
    )
    serve.add_argument(
        "--latency-ms",
        type=float,
        default=0.0,
        help="Artificial delay for each service operation",
    )

    emit = subparsers.add_parser("emit", help="Send one event over HTTP")
    emit.add_argument("message")
    emit.add_argument("--url", default=DEFAULT_BASE_URL)
    emit.add_argument("--component", default="cli")
    emit.add_argument(
        "--level",
        choices=[level.value for level in LogLevel],
        default=LogLevel.INFO.value,
    )
    emit.add_argument("--record-id", default=None)
    emit.add_argument("--data", default=None, help="JSON object payload")
    emit.add_argument("--timeout", type=float, default=5.0)

    demo = subparsers.add_parser("demo", help="Run the example component")
    demo.add_argument(
        "--mode",
        choices=[mode.value for mode in EndpointMode],
        default=EndpointMode.DIGITAL_TWIN.value,
    )
    demo.add_argument("--url", default=DEFAULT_BASE_URL)
    demo.add_argument("--fetch-delay", type=float, default=0.2)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main CLI entry point.

    Returns:
        0 on success; 1 when ``emit`` could not reach the service; 2 on
        invalid ``--data``.

    Raises:
        SystemExit: On --help or argument parsing errors.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        json_format=args.json_logs,
    )

    if args.command == "serve":
        run_serve(args.host, args.port, args.log_level, args.latency_ms)
        return 0

    if args.command == "emit":
        try:
            data = _parse_data(args.data)
        except ValueError as e:
            logger.error("Invalid --data", error=str(e))
            return 2
        delivered = asyncio.run(
            run_emit(
                args.url,
                args.component,
                args.level,
                args.message,
                args.record_id,
                data,
                args.timeout,
            )
        )
        return 0 if delivered else 1

    asyncio.run(run_demo(EndpointMode(args.mode), args.url, args.fetch_delay))
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
