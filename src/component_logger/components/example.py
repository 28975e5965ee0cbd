"""Example component showing every Logger operation in context.

Mirrors a typical record page widget: it logs on mount and unmount, has
buttons that emit debug/info/error events, loads data with timing and
error reporting, and can simulate a failure.

Example:
    logger = create_logger()
    widget = ExampleComponent(logger, record_id="001xx000003DGb2")
    await widget.connected()
    await widget.handle_load_data()
    widget.disconnected()
    await logger.drain()
"""

from __future__ import annotations

import asyncio
import platform
import random
import time
from typing import TYPE_CHECKING, Any

from component_logger.components.base import LoggedComponent
from component_logger.core.payloads import utc_timestamp

if TYPE_CHECKING:
    from component_logger.core.logger import Logger

__all__ = ["ExampleComponent", "SimulatedFetchError"]

#: Items returned by a successful simulated fetch.
SAMPLE_ITEMS: tuple[dict[str, str], ...] = (
    {"id": "1", "name": "Item 1"},
    {"id": "2", "name": "Item 2"},
    {"id": "3", "name": "Item 3"},
)


class SimulatedFetchError(RuntimeError):
    """Raised by ExampleComponent.fetch_data() on a simulated failure."""


class ExampleComponent(LoggedComponent):
    """Demo component wired to an injected Logger.

    Attributes:
        data: Items from the last successful load.
        error: Message of the last handled error, or None.
    """

    component_name = "ExampleComponent"

    def __init__(
        self,
        logger: Logger,
        record_id: str | None = None,
        *,
        fetch_delay_s: float = 1.0,
        failure_rate: float = 0.2,
        rng: random.Random | None = None,
    ) -> None:
        """Create the component.

        Args:
            logger: Shared Logger; the component binds its own tag.
            record_id: Record shown by the component.
            fetch_delay_s: Simulated latency of fetch_data().
            failure_rate: Probability in [0, 1] that fetch_data() fails.
            rng: Random source, injectable for deterministic tests.
        """
        super().__init__(logger, record_id)
        self.fetch_delay_s = fetch_delay_s
        self.failure_rate = failure_rate
        self._rng = rng or random.Random()
        self.data: list[dict[str, str]] = []
        self.error: str | None = None

    async def connected(self) -> None:
        await self.log.info(
            "Component initialized",
            self.record_id,
            {"timestamp": utc_timestamp(), "platform": platform.platform()},
        )

    def _click(self, button_type: str) -> dict[str, Any]:
        return {"buttonType": button_type, "clickTime": utc_timestamp()}

    async def handle_debug_log(self) -> None:
        await self.log.debug(
            "Debug button clicked", self.record_id, self._click("debug")
        )

    async def handle_info_log(self) -> None:
        await self.log.info(
            "Info button clicked", self.record_id, self._click("info")
        )

    async def handle_error_log(self) -> None:
        await self.log.error(
            "Manual error log triggered", self.record_id, self._click("error")
        )

    async def handle_load_data(self) -> None:
        """Load data, logging timing on success and the error on failure."""
        start = time.perf_counter()
        self.error = None

        try:
            await self.log.debug("Starting data load operation", self.record_id)

            result = await self.fetch_data()
            self.data = result

            elapsed_ms = (time.perf_counter() - start) * 1000.0
            await self.log.log_performance(
                "Data Load",
                elapsed_ms,
                {"recordCount": len(result), "recordId": self.record_id},
            )
            await self.log.info(
                "Data loaded successfully",
                self.record_id,
                {"recordCount": len(result), "loadTime": elapsed_ms},
            )
        except Exception as e:  # noqa: BLE001
            await self.log.log_error(e, "handleLoadData", self.record_id)
            self.error = str(e)

    async def handle_simulate_error(self) -> None:
        """Raise and log a deliberate error."""
        try:
            await self.log.warn("About to simulate an error", self.record_id)
            raise SimulatedFetchError("This is a simulated error for testing logging")
        except SimulatedFetchError as e:
            await self.log.log_error(e, "handleSimulateError", self.record_id)
            self.error = str(e)

    async def fetch_data(self) -> list[dict[str, str]]:
        """Simulated remote data load.

        Raises:
            SimulatedFetchError: With probability ``failure_rate``.
        """
        await asyncio.sleep(self.fetch_delay_s)
        if self._rng.random() < self.failure_rate:
            raise SimulatedFetchError("Simulated API error - network timeout")
        return [dict(item) for item in SAMPLE_ITEMS]
