"""Digital Twin Logging Endpoint - simulated service for development and tests.

Stands in for the remote logging service without a network. Keeps every
accepted entry in memory together with the session id it was bound to,
counts calls, and can simulate latency and failures.

Classes:
    DigitalTwinEndpointConfig: latency and failure injection settings
    DigitalTwinEndpoint: LoggingEndpoint implementation
    TwinLogRecord: an accepted entry plus its session id

Example:
    endpoint = DigitalTwinEndpoint(DigitalTwinEndpointConfig(latency_ms=5))
    logger = create_logger(endpoint=endpoint)
    await logger.info("hello")
    endpoint.records[0].entry["level"]   # "INFO"

    # Simulate an outage
    endpoint.config.fail_logging = True
    await logger.info("lost?")           # goes to the fallback sink
"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field

from component_logger.endpoints.types import ComponentLogEntry, EndpointError
from component_logger.observability import get_logger

logger = get_logger(__name__)

__all__ = [
    "DigitalTwinEndpoint",
    "DigitalTwinEndpointConfig",
    "TwinLogRecord",
]


@dataclass
class DigitalTwinEndpointConfig:
    """Behaviour of the simulated endpoint.

    Fields are read on every call, so tests can flip them mid-run.

    Attributes:
        latency_ms: Delay before each operation completes. 0 still yields
            to the event loop once.
        fail_transaction_id: Make get_transaction_id() raise EndpointError.
        fail_logging: Make log_from_component() raise EndpointError.
        transaction_id: Fixed id to hand out. None generates
            ``TX-<32 hex>``.
    """

    latency_ms: float = 0.0
    fail_transaction_id: bool = False
    fail_logging: bool = False
    transaction_id: str | None = None


@dataclass(frozen=True)
class TwinLogRecord:
    """An entry accepted by the twin, stamped with the session id."""

    transaction_id: str | None
    entry: ComponentLogEntry


@dataclass
class DigitalTwinEndpoint:
    """In-memory LoggingEndpoint.

    Attributes:
        config: Simulation settings.
        records: Accepted entries in arrival order.
        transaction_id_calls: Number of get_transaction_id() calls,
            including failed ones.
        log_calls: Number of log_from_component() calls, including
            failed ones.
    """

    config: DigitalTwinEndpointConfig = field(
        default_factory=DigitalTwinEndpointConfig
    )
    records: list[TwinLogRecord] = field(default_factory=list)
    transaction_id_calls: int = 0
    log_calls: int = 0
    _issued_id: str | None = field(default=None, init=False, repr=False)

    async def _simulate_latency(self) -> None:
        await asyncio.sleep(self.config.latency_ms / 1000.0)

    async def get_transaction_id(self) -> str:
        """Issue a session id (or fail, if configured to).

        Raises:
            EndpointError: When ``config.fail_transaction_id`` is set.
        """
        self.transaction_id_calls += 1
        await self._simulate_latency()
        if self.config.fail_transaction_id:
            raise EndpointError("Simulated transaction id failure")

        self._issued_id = self.config.transaction_id or f"TX-{uuid.uuid4().hex}"
        logger.debug("Issued transaction id", transaction_id=self._issued_id)
        return self._issued_id

    async def log_from_component(self, entry: ComponentLogEntry) -> None:
        """Accept one entry (or fail, if configured to).

        The entry is bound to the id issued by the last successful
        get_transaction_id() call, or None if none succeeded.

        Raises:
            EndpointError: When ``config.fail_logging`` is set.
        """
        self.log_calls += 1
        await self._simulate_latency()
        if self.config.fail_logging:
            raise EndpointError("Simulated logging failure")

        stored: ComponentLogEntry = {**entry}
        self.records.append(TwinLogRecord(self._issued_id, stored))

    @property
    def entries(self) -> list[ComponentLogEntry]:
        """Accepted entries without their session ids."""
        return [record.entry for record in self.records]

    def clear(self) -> None:
        """Forget records and reset call counters."""
        self.records.clear()
        self.transaction_id_calls = 0
        self.log_calls = 0
