"""Pytest configuration and fixtures for component-logger tests.

Every test gets a fresh digital twin endpoint, so nothing touches the
network unless a test builds an HTTP client on purpose.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator
from unittest.mock import MagicMock

import pytest

from component_logger.config import create_logger
from component_logger.core import FallbackSink, Logger
from component_logger.endpoints import DigitalTwinEndpoint, DigitalTwinEndpointConfig
from component_logger.observability import (
    DeliveryStats,
    configure_logging,
    reset_logging,
)


@pytest.fixture
def log_buffer() -> Iterator[io.StringIO]:
    """Route package diagnostics (and the fallback sink) into a buffer.

    Yields:
        StringIO receiving text-formatted records at DEBUG and above.
    """
    buffer = io.StringIO()
    configure_logging(level=logging.DEBUG, stream=buffer, force=True)
    yield buffer
    reset_logging()


@pytest.fixture
def twin() -> DigitalTwinEndpoint:
    """Digital twin endpoint with no latency and no failures."""
    return DigitalTwinEndpoint(DigitalTwinEndpointConfig())


@pytest.fixture
def sink() -> MagicMock:
    """Fallback sink double recording write() calls."""
    return MagicMock(spec=FallbackSink)


@pytest.fixture
def stats() -> DeliveryStats:
    return DeliveryStats()


@pytest.fixture
def logger(
    twin: DigitalTwinEndpoint, sink: MagicMock, stats: DeliveryStats
) -> Logger:
    """Logger over the twin endpoint with a mocked fallback sink."""
    return create_logger(endpoint=twin, sink=sink, stats=stats)
