"""FastAPI reference logging service.

A small stand-in for the remote logging service, used for local
development, demos and HTTP integration tests. It issues transaction ids
and keeps the most recent log records in memory. It is not a log store:
there is no persistence and no query API.

Routes:
    POST /api/logger/transaction-id  -> {"transactionId": "TX-<hex>"}
    POST /api/logger/log             <- ComponentLogEntry JSON, 204 on success
    GET  /health                      -> {"status": "ok", "records": <count>}
"""

from __future__ import annotations

import asyncio
import threading
import uuid
from collections import deque
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Literal

from fastapi import FastAPI, Header, Response
from pydantic import BaseModel

from component_logger.core.levels import LogLevel
from component_logger.endpoints.types import TRANSACTION_HEADER
from component_logger.observability import get_logger

logger = get_logger(__name__)

API_PREFIX = "/api/logger"

#: Records kept by a LogStore before the oldest are dropped.
DEFAULT_MAX_RECORDS = 10_000


class ComponentLogRequest(BaseModel):
    """Body of POST /log. Level must be one of the five exact strings."""

    component: str
    level: Literal["DEBUG", "INFO", "WARN", "ERROR", "FATAL"]
    message: str
    recordId: str | None = None
    additionalData: str | None = None


class TransactionIdResponse(BaseModel):
    transactionId: str


@dataclass(frozen=True)
class StoredLogRecord:
    """A received log event bound to its session."""

    transaction_id: str | None
    component: str
    level: str
    message: str
    record_id: str | None
    additional_data: str | None
    received_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class LogStore:
    """Bounded, thread-safe in-memory buffer of received records."""

    def __init__(self, max_records: int = DEFAULT_MAX_RECORDS) -> None:
        self._records: deque[StoredLogRecord] = deque(maxlen=max_records)
        self._lock = threading.Lock()

    def issue_transaction_id(self) -> str:
        return f"TX-{uuid.uuid4().hex}"

    def add(self, record: StoredLogRecord) -> None:
        with self._lock:
            self._records.append(record)

    @property
    def records(self) -> list[StoredLogRecord]:
        """Snapshot of stored records, oldest first."""
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log service startup and shutdown."""
    logger.info("Starting reference logging service")
    yield
    logger.info(
        "Shutting down reference logging service",
        records=len(app.state.log_store),
    )


def create_app(
    store: LogStore | None = None,
    *,
    latency_ms: float = 0.0,
) -> FastAPI:
    """Create the reference logging service.

    Args:
        store: Record buffer; a fresh LogStore when None. Exposed as
            ``app.state.log_store``.
        latency_ms: Artificial delay added to both logging operations,
            for exercising client timeouts and concurrency.

    Returns:
        Configured FastAPI application.

    Example:
        >>> app = create_app(latency_ms=50)
        >>> uvicorn.run(app, host="127.0.0.1", port=8080)
    """
    app = FastAPI(
        title="Component Logger Reference Service",
        lifespan=lifespan,
    )
    app.state.log_store = store if store is not None else LogStore()

    async def _simulate_latency() -> None:
        if latency_ms > 0:
            await asyncio.sleep(latency_ms / 1000.0)

    @app.post(f"{API_PREFIX}/transaction-id", response_model=TransactionIdResponse)
    async def get_transaction_id() -> TransactionIdResponse:
        await _simulate_latency()
        transaction_id = app.state.log_store.issue_transaction_id()
        logger.debug("Issued transaction id", transaction_id=transaction_id)
        return TransactionIdResponse(transactionId=transaction_id)

    @app.post(f"{API_PREFIX}/log", status_code=204)
    async def log_from_component(
        body: ComponentLogRequest,
        x_transaction_id: str | None = Header(default=None, alias=TRANSACTION_HEADER),
    ) -> Response:
        await _simulate_latency()
        store: LogStore = app.state.log_store
        store.add(
            StoredLogRecord(
                transaction_id=x_transaction_id,
                component=body.component,
                level=body.level,
                message=body.message,
                record_id=body.recordId,
                additional_data=body.additionalData,
            )
        )
        logger.log(
            LogLevel(body.level).python_level,
            "Component event received",
            component=body.component,
            event_level=body.level,
            transaction_id=x_transaction_id,
            record_id=body.recordId,
        )
        return Response(status_code=204)

    @app.get("/health")
    async def health() -> dict[str, object]:
        return {"status": "ok", "records": len(app.state.log_store)}

    return app
