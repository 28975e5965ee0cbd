"""HTTP client for a remote logging service.

Talks JSON over HTTP to a service exposing:

    POST {base_url}/transaction-id  -> {"transactionId": "..."}
    POST {base_url}/log             <- ComponentLogEntry as JSON

The id obtained from the first call is sent back on every log request in
the ``X-Transaction-Id`` header. That header is the implicit session
binding; the entry body never carries the id.

Example:
    async with HttpLoggingEndpoint("http://localhost:8080/api/logger") as ep:
        logger = create_logger(endpoint=ep)
        await logger.info("Component initialized")
"""

from __future__ import annotations

from types import TracebackType
from typing import Any

import httpx

from component_logger.endpoints.types import (
    TRANSACTION_HEADER,
    ComponentLogEntry,
    EndpointError,
)
from component_logger.observability import get_logger

logger = get_logger(__name__)

__all__ = ["DEFAULT_TIMEOUT_S", "HttpLoggingEndpoint"]

#: Per-request timeout. An expired timeout is a delivery failure like any
#: other and ends up in the fallback sink.
DEFAULT_TIMEOUT_S = 5.0


class HttpLoggingEndpoint:
    """LoggingEndpoint backed by httpx.AsyncClient.

    Every transport error, non-2xx status or malformed response is raised
    as EndpointError with the original exception chained.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Create an endpoint client.

        Args:
            base_url: Service prefix, e.g. 'http://localhost:8080/api/logger'.
                A trailing slash is ignored.
            timeout_s: Request timeout for the client this object creates.
                Ignored when ``client`` is given.
            client: Existing client to use (tests pass one with a mock
                transport). Not closed by aclose().
        """
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_s)
        self._transaction_id: str | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def transaction_id(self) -> str | None:
        """Id returned by the last successful get_transaction_id() call."""
        return self._transaction_id

    async def _post(
        self,
        path: str,
        *,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        url = f"{self._base_url}{path}"
        try:
            response = await self._client.post(url, json=json, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise EndpointError(
                f"POST {url} returned {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise EndpointError(f"POST {url} failed: {e}") from e
        return response

    async def get_transaction_id(self) -> str:
        """Request a new session id from the service.

        Returns:
            The ``transactionId`` field of the response.

        Raises:
            EndpointError: On transport failure, error status, or a body
                without a string ``transactionId``.
        """
        response = await self._post("/transaction-id")
        try:
            transaction_id = response.json()["transactionId"]
        except (ValueError, KeyError, TypeError) as e:
            raise EndpointError("Malformed transaction id response") from e
        if not isinstance(transaction_id, str) or not transaction_id:
            raise EndpointError("Malformed transaction id response")

        self._transaction_id = transaction_id
        logger.debug("Transaction id acquired", transaction_id=transaction_id)
        return transaction_id

    async def log_from_component(self, entry: ComponentLogEntry) -> None:
        """Send one entry, bound to the current session id if there is one.

        Raises:
            EndpointError: On transport failure or error status.
        """
        headers = {}
        if self._transaction_id is not None:
            headers[TRANSACTION_HEADER] = self._transaction_id
        await self._post("/log", json=dict(entry), headers=headers)

    async def aclose(self) -> None:
        """Close the underlying client if this object created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpLoggingEndpoint:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()
