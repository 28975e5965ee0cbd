"""Tests for the FastAPI reference logging service."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from component_logger.endpoints import TRANSACTION_HEADER
from component_logger.web import API_PREFIX, LogStore, create_app


@pytest.fixture
def store() -> LogStore:
    return LogStore()


@pytest.fixture
def client(store: LogStore) -> Iterator[TestClient]:
    with TestClient(create_app(store)) as test_client:
        yield test_client


def _body(**overrides) -> dict:
    body = {
        "component": "Widget",
        "level": "INFO",
        "message": "hello",
        "recordId": None,
        "additionalData": None,
    }
    body.update(overrides)
    return body


class TestTransactionIdRoute:
    def test_issues_ids(self, client: TestClient) -> None:
        first = client.post(f"{API_PREFIX}/transaction-id")
        second = client.post(f"{API_PREFIX}/transaction-id")

        assert first.status_code == 200
        assert first.json()["transactionId"].startswith("TX-")
        assert first.json() != second.json()


class TestLogRoute:
    """Tests for POST /log."""

    def test_stores_record_with_header(self, client: TestClient, store: LogStore) -> None:
        response = client.post(
            f"{API_PREFIX}/log",
            json=_body(recordId="REC-1", additionalData='{"a": 1}'),
            headers={TRANSACTION_HEADER: "TX-1"},
        )

        assert response.status_code == 204
        record = store.records[0]
        assert record.transaction_id == "TX-1"
        assert record.component == "Widget"
        assert record.level == "INFO"
        assert record.record_id == "REC-1"
        assert record.additional_data == '{"a": 1}'

    def test_without_header(self, client: TestClient, store: LogStore) -> None:
        response = client.post(f"{API_PREFIX}/log", json=_body())

        assert response.status_code == 204
        assert store.records[0].transaction_id is None

    @pytest.mark.parametrize("level", ["WARNING", "info", "TRACE"])
    def test_rejects_unknown_level(
        self, client: TestClient, store: LogStore, level: str
    ) -> None:
        response = client.post(f"{API_PREFIX}/log", json=_body(level=level))

        assert response.status_code == 422
        assert len(store) == 0

    def test_rejects_missing_message(self, client: TestClient) -> None:
        body = _body()
        del body["message"]

        assert client.post(f"{API_PREFIX}/log", json=body).status_code == 422


class TestHealthRoute:
    def test_reports_record_count(self, client: TestClient) -> None:
        client.post(f"{API_PREFIX}/log", json=_body())

        response = client.get("/health")

        assert response.json() == {"status": "ok", "records": 1}


class TestLogStore:
    """Tests for the bounded record buffer."""

    def test_drops_oldest(self) -> None:
        with TestClient(create_app(LogStore(max_records=2))) as client:
            for i in range(3):
                client.post(f"{API_PREFIX}/log", json=_body(message=f"m{i}"))
            store: LogStore = client.app.state.log_store

        assert [r.message for r in store.records] == ["m1", "m2"]

    def test_empty_store_is_used(self, store: LogStore) -> None:
        app = create_app(store)

        assert app.state.log_store is store
