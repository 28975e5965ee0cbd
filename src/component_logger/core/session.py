"""Session (transaction id) acquisition for the component logger.

A SessionContext is created once at process start and shared by every
Logger. The first log call triggers ensure_initialized(), which asks the
endpoint for a transaction id exactly once. If that fails, a local id is
generated instead; either way the context ends up initialized for good.

Example:
    session = SessionContext(endpoint)
    await session.ensure_initialized()
    session.transaction_id   # 'TX-...' or 'LOCAL_1760861702113_k3j9x0a2q'
"""

from __future__ import annotations

import asyncio
import secrets
import string
import time
from typing import TYPE_CHECKING

from component_logger.endpoints.types import EndpointError
from component_logger.observability import LogContext, get_logger

if TYPE_CHECKING:
    from component_logger.endpoints.types import LoggingEndpoint
    from component_logger.observability.stats import DeliveryStats

logger = get_logger(__name__)

__all__ = [
    "FALLBACK_ID_PREFIX",
    "SessionContext",
    "generate_fallback_id",
]

#: Prefix of locally generated transaction ids.
FALLBACK_ID_PREFIX = "LOCAL_"

_BASE36 = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH = 9


def generate_fallback_id(prefix: str = FALLBACK_ID_PREFIX) -> str:
    """Build ``<prefix><epoch ms>_<9 random base-36 chars>``.

    Example:
        >>> generate_fallback_id()
        'LOCAL_1760861702113_k3j9x0a2q'
    """
    suffix = "".join(secrets.choice(_BASE36) for _ in range(_SUFFIX_LENGTH))
    return f"{prefix}{int(time.time() * 1000)}_{suffix}"


class SessionContext:
    """Owns the transaction id for one process.

    ``initialized`` only ever goes from False to True, and from then on
    ``transaction_id`` is a non-empty string. Concurrent first callers all
    wait on the same initialization task, so the endpoint sees at most one
    get_transaction_id() call per context.
    """

    def __init__(
        self,
        endpoint: LoggingEndpoint,
        *,
        fallback_prefix: str = FALLBACK_ID_PREFIX,
        stats: DeliveryStats | None = None,
    ) -> None:
        """Create an uninitialized context.

        Args:
            endpoint: Source of the transaction id.
            fallback_prefix: Prefix for locally generated ids.
            stats: Optional stats collector, told when the fallback id is
                used.
        """
        self._endpoint = endpoint
        self._fallback_prefix = fallback_prefix
        self._stats = stats
        self._transaction_id: str | None = None
        self._initialized = False
        self._used_fallback = False
        self._init_task: asyncio.Task[None] | None = None

    @property
    def transaction_id(self) -> str | None:
        return self._transaction_id

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def initializing(self) -> bool:
        """True while the shared initialization task is in flight."""
        return not self._initialized and self._init_task is not None

    @property
    def used_fallback(self) -> bool:
        """True if the id was generated locally after an endpoint failure."""
        return self._used_fallback

    async def ensure_initialized(self) -> str:
        """Acquire the transaction id if that has not happened yet.

        Returns immediately once initialized. Otherwise starts (or joins)
        the single initialization task and waits for it. The task is
        shielded: cancelling one waiter does not cancel initialization for
        the others.

        Returns:
            The transaction id.

        Raises:
            asyncio.CancelledError: Only if the caller itself is cancelled.
                Endpoint failures are never raised.
        """
        if self._initialized:
            return self._transaction_id  # type: ignore[return-value]

        if self._init_task is None or (
            self._init_task.done() and not self._initialized
        ):
            # A finished task without a result was cancelled from outside
            # (e.g. its event loop shut down); start a fresh one.
            self._init_task = asyncio.ensure_future(self._initialize())

        await asyncio.shield(self._init_task)
        return self._transaction_id  # type: ignore[return-value]

    async def _initialize(self) -> None:
        with LogContext(endpoint=type(self._endpoint).__name__):
            await self._acquire()

    async def _acquire(self) -> None:
        try:
            transaction_id = await self._endpoint.get_transaction_id()
            if not isinstance(transaction_id, str) or not transaction_id:
                raise EndpointError(f"Invalid transaction id {transaction_id!r}")
        except Exception as e:  # noqa: BLE001
            transaction_id = generate_fallback_id(self._fallback_prefix)
            self._used_fallback = True
            if self._stats is not None:
                self._stats.record_session_fallback()
            logger.warning(
                "Failed to get transaction id, using local fallback",
                error=f"{type(e).__name__}: {e}",
                transaction_id=transaction_id,
            )
        else:
            logger.debug("Session initialized", transaction_id=transaction_id)

        self._transaction_id = transaction_id
        self._initialized = True
