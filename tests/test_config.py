"""Tests for logger configuration and the endpoint factory."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from component_logger.config import (
    DEFAULT_BASE_URL,
    EndpointFactory,
    EndpointMode,
    LoggerConfig,
    create_logger,
)
from component_logger.core import DEFAULT_COMPONENT_NAME, Logger, LoggerState
from component_logger.endpoints import (
    DEFAULT_TIMEOUT_S,
    DigitalTwinEndpoint,
    HttpLoggingEndpoint,
)
from component_logger.observability import DeliveryStats


class TestLoggerConfig:
    def test_defaults(self) -> None:
        config = LoggerConfig()

        assert config.mode is EndpointMode.DIGITAL_TWIN
        assert config.base_url == DEFAULT_BASE_URL
        assert config.timeout_s == DEFAULT_TIMEOUT_S
        assert config.component_name == DEFAULT_COMPONENT_NAME
        assert config.twin_latency_ms == 0.0

    def test_mode_from_string(self) -> None:
        assert EndpointMode("http") is EndpointMode.HTTP
        assert EndpointMode("digital_twin") is EndpointMode.DIGITAL_TWIN


class TestEndpointFactory:
    """Tests for EndpointFactory.create_endpoint()."""

    def test_default_is_twin(self) -> None:
        assert isinstance(EndpointFactory().create_endpoint(), DigitalTwinEndpoint)

    def test_twin_latency(self) -> None:
        endpoint = EndpointFactory(LoggerConfig(twin_latency_ms=25)).create_endpoint()

        assert endpoint.config.latency_ms == 25

    @pytest.mark.asyncio
    async def test_http(self) -> None:
        config = LoggerConfig(
            mode=EndpointMode.HTTP, base_url="http://logs.test/api/", timeout_s=1.5
        )

        endpoint = EndpointFactory(config).create_endpoint()
        try:
            assert isinstance(endpoint, HttpLoggingEndpoint)
            assert endpoint.base_url == "http://logs.test/api"
        finally:
            await endpoint.aclose()


class TestCreateLogger:
    """Tests for create_logger()."""

    def test_returns_uninitialized_logger(self) -> None:
        logger = create_logger()

        assert isinstance(logger, Logger)
        assert logger.state is LoggerState.UNINITIALIZED
        assert logger.component_name == DEFAULT_COMPONENT_NAME

    def test_component_name_from_config(self) -> None:
        logger = create_logger(LoggerConfig(component_name="Widget"))

        assert logger.component_name == "Widget"

    def test_each_call_gets_its_own_session(self) -> None:
        assert create_logger().session is not create_logger().session

    @pytest.mark.asyncio
    async def test_injected_endpoint_and_stats(self, twin: DigitalTwinEndpoint) -> None:
        stats = DeliveryStats()
        sink = MagicMock()

        logger = create_logger(endpoint=twin, sink=sink, stats=stats)
        await logger.info("hello")

        assert twin.entries[0]["message"] == "hello"
        assert stats.get_summary().total_delivered == 1
        sink.write.assert_not_called()

    @pytest.mark.asyncio
    async def test_stats_shared_with_session(self) -> None:
        stats = DeliveryStats()
        twin = DigitalTwinEndpoint()
        twin.config.fail_transaction_id = True

        await create_logger(endpoint=twin, stats=stats).info("hello")

        assert stats.get_summary().session_fallback is True
