"""Tests for the httpx-based logging endpoint.

Unit tests use httpx.MockTransport; integration tests run the reference
FastAPI service in-process through httpx.ASGITransport.
"""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from component_logger.config import create_logger
from component_logger.endpoints import (
    TRANSACTION_HEADER,
    EndpointError,
    HttpLoggingEndpoint,
    LoggingEndpoint,
)
from component_logger.observability import DeliveryStats
from component_logger.web import API_PREFIX, LogStore, create_app

BASE_URL = "http://logger.test/api/logger"

ENTRY = {
    "component": "Widget",
    "level": "INFO",
    "message": "hello",
    "recordId": "REC-1",
    "additionalData": '{"a": 1}',
}


def _endpoint(
    handler: Callable[[httpx.Request], httpx.Response],
) -> HttpLoggingEndpoint:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpLoggingEndpoint(BASE_URL, client=client)


# =============================================================================
# MockTransport
# =============================================================================


class TestHttpLoggingEndpoint:
    """Request and error mapping."""

    def test_satisfies_protocol(self) -> None:
        endpoint = HttpLoggingEndpoint(BASE_URL)

        assert isinstance(endpoint, LoggingEndpoint)

    def test_trailing_slash_ignored(self) -> None:
        assert HttpLoggingEndpoint(f"{BASE_URL}/").base_url == BASE_URL

    @pytest.mark.asyncio
    async def test_get_transaction_id(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"transactionId": "TX-abc"})

        endpoint = _endpoint(handler)

        assert await endpoint.get_transaction_id() == "TX-abc"
        assert endpoint.transaction_id == "TX-abc"
        assert seen[0].method == "POST"
        assert str(seen[0].url) == f"{BASE_URL}/transaction-id"

    @pytest.mark.asyncio
    async def test_log_sends_entry_and_header(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if request.url.path.endswith("/transaction-id"):
                return httpx.Response(200, json={"transactionId": "TX-abc"})
            return httpx.Response(204)

        endpoint = _endpoint(handler)
        await endpoint.get_transaction_id()
        await endpoint.log_from_component(ENTRY)

        request = seen[1]
        assert str(request.url) == f"{BASE_URL}/log"
        assert request.headers[TRANSACTION_HEADER] == "TX-abc"
        assert json.loads(request.content) == ENTRY

    @pytest.mark.asyncio
    async def test_log_without_session_has_no_header(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        await _endpoint(handler).log_from_component(ENTRY)

        assert TRANSACTION_HEADER not in seen[0].headers

    @pytest.mark.asyncio
    async def test_error_status_raises_endpoint_error(self) -> None:
        endpoint = _endpoint(lambda request: httpx.Response(500))

        with pytest.raises(EndpointError, match="returned 500") as exc_info:
            await endpoint.log_from_component(ENTRY)

        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)

    @pytest.mark.asyncio
    async def test_connect_error_raises_endpoint_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(EndpointError, match="failed"):
            await _endpoint(handler).get_transaction_id()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, text="not json"),
            httpx.Response(200, json={"id": "TX-abc"}),
            httpx.Response(200, json={"transactionId": ""}),
            httpx.Response(200, json={"transactionId": 42}),
            httpx.Response(200, json=["TX-abc"]),
        ],
    )
    async def test_malformed_transaction_id(self, response: httpx.Response) -> None:
        endpoint = _endpoint(lambda request: response)

        with pytest.raises(EndpointError, match="Malformed"):
            await endpoint.get_transaction_id()

        assert endpoint.transaction_id is None

    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self) -> None:
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(204))
        )

        async with HttpLoggingEndpoint(BASE_URL, client=client):
            pass

        assert client.is_closed is False
        await client.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_closed(self) -> None:
        endpoint = HttpLoggingEndpoint(BASE_URL)

        await endpoint.aclose()

        assert endpoint._client.is_closed is True


# =============================================================================
# Reference service over ASGI
# =============================================================================


class TestAgainstReferenceService:
    """Logger + HttpLoggingEndpoint + FastAPI service, no sockets."""

    @pytest.mark.asyncio
    async def test_events_bound_to_session(self) -> None:
        store = LogStore()
        client = httpx.AsyncClient(
            transport=httpx.ASGITransport(app=create_app(store)),
            base_url="http://service.test",
        )
        endpoint = HttpLoggingEndpoint(f"http://service.test{API_PREFIX}", client=client)
        stats = DeliveryStats()
        logger = create_logger(endpoint=endpoint, stats=stats)

        try:
            await logger.for_component("Widget").info("hello", "REC-1", {"a": 1})
            await logger.log_performance("Data Load", 42.0)
        finally:
            await client.aclose()

        records = store.records
        assert len(records) == 2
        assert {r.transaction_id for r in records} == {logger.session.transaction_id}
        assert records[0].component == "Widget"
        assert records[0].record_id == "REC-1"
        assert json.loads(records[0].additional_data) == {"a": 1}
        assert records[1].message == "Performance: Data Load took 42ms"
        assert stats.get_summary().total_delivered == 2

    @pytest.mark.asyncio
    async def test_service_down_degrades(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        stats = DeliveryStats()
        logger = create_logger(endpoint=_endpoint(handler), stats=stats)

        await logger.info("hello")

        summary = stats.get_summary()
        assert summary.session_fallback is True
        assert summary.total_fallback == 1
        assert summary.failure_counts == {"EndpointError": 1}
        assert logger.session.transaction_id.startswith("LOCAL_")
