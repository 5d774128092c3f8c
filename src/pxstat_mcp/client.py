"""Async client for the PxStat JSON-RPC API.

This is the primary public interface of pxstat-mcp. A caller-built JSON-RPC
query goes in, a flat :class:`~pxstat_mcp.models.ResultTable` comes out.

Example::

    import asyncio
    from pxstat_mcp import PxStatClient

    QUERY = '{"jsonrpc": "2.0", "method": "PxStat.Data.Cube_API.ReadDataset", ...}'

    async def main():
        async with PxStatClient() as client:
            table = await client.fetch(QUERY)
            print(table.columns)
            print(table.rows[0])

    asyncio.run(main())

PxStat response conventions:
    - JSON-RPC 2.0 envelope: ``{"jsonrpc": "2.0", "id": ..., "data" | "error": ...}``
    - ``error`` is ``{"code": int, "message": str}`` and means the query is wrong
    - ``data`` holds a JSON-stat dataset
    - A non-200 status is a service failure, unrelated to the query content
"""

from __future__ import annotations

import asyncio
import json
import os
from collections.abc import Mapping
from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError

from pxstat_mcp.exceptions import ApiError, MalformedResponseError, TransportError
from pxstat_mcp.jsonstat import Naming, parse_dataset
from pxstat_mcp.models import Envelope, ResultTable

# Public PxStat endpoint of the Central Statistics Office (Ireland)
_BASE_URL = "https://ws.cso.ie/public/api.jsonrpc"

# Default timeout (large cubes can be slow)
_DEFAULT_TIMEOUT = 60.0

Query = str | bytes | Mapping[str, Any]


def _encode_query(query: Query) -> bytes:
    """Return the request body for ``query`` without interpreting it."""
    if isinstance(query, Mapping):
        body = json.dumps(query).encode("utf-8")
    elif isinstance(query, str):
        body = query.encode("utf-8")
    elif isinstance(query, (bytes, bytearray)):
        body = bytes(query)
    else:
        raise TypeError(f"query must be str, bytes or a mapping, got {type(query).__name__}")

    if not body.strip():
        raise ValueError("query must be a non-empty JSON-RPC request body")
    return body


class PxStatClient:
    """Async client for the PxStat JSON-RPC API."""

    def __init__(
        self,
        url: str | None = None,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        self._url = url or os.environ.get("PXSTAT_API_URL") or _BASE_URL
        self._timeout = timeout

        self._http = httpx.AsyncClient(
            timeout=self._timeout,
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
        )

    @property
    def url(self) -> str:
        return self._url

    async def close(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> PxStatClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def _post(self, body: bytes) -> httpx.Response:
        logger.debug(f"POST {self._url} ({len(body)} bytes)")
        try:
            resp = await self._http.post(self._url, content=body)
        except httpx.TimeoutException as e:
            raise TransportError(None, f"Request timed out after {self._timeout}s") from e
        except httpx.HTTPError as e:
            raise TransportError(None, f"HTTP error: {e}") from e

        # Anything but 200 is a service failure; the body is not looked at.
        if resp.status_code != 200:
            raise TransportError(resp.status_code)
        return resp

    def _decode_envelope(self, resp: httpx.Response) -> Envelope:
        try:
            payload = resp.json()
        except ValueError as e:
            raise MalformedResponseError(f"Response body is not valid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise MalformedResponseError(
                f"Response body must be a JSON object, got {type(payload).__name__}"
            )

        if "error" in payload and not isinstance(payload["error"], dict):
            raise MalformedResponseError(f"Unexpected 'error' member: {payload['error']!r}")

        try:
            return Envelope.model_validate(payload)
        except ValidationError as e:
            raise MalformedResponseError(f"Unexpected response envelope: {e}") from e

    def _check_api_status(self, envelope: Envelope) -> Any:
        """Return the ``data`` payload or raise the API-reported error.

        PxStat returns HTTP 200 even for errors like an unknown matrix code.
        Errors are indicated by an ``error`` member in the envelope.
        """
        if envelope.error is not None:
            err = envelope.error
            logger.warning(f"PxStat API error {err.code}: {err.message}")
            raise ApiError(err.code, err.message, err.data)

        if not envelope.has_data:
            raise MalformedResponseError("Response has neither 'data' nor 'error'")
        return envelope.data

    async def fetch(
        self,
        query: Query,
        *,
        dataset: str | int | None = None,
        naming: Naming = "label",
    ) -> ResultTable:
        """Submit a query and return the resulting cube as a flat table.

        Args:
            query: Complete JSON-RPC request body. Strings and bytes are sent
                verbatim; mappings are serialized with :func:`json.dumps`.
            dataset: Dataset to pick when the response holds several.
            naming: ``"label"`` (default) or ``"id"`` for column and cell names.

        Returns:
            ResultTable with one column per dimension plus ``value``.

        Raises:
            TransportError: Non-200 status, network failure or timeout.
            ApiError: The API reported an error for this query.
            MalformedResponseError: The response is not a valid envelope or
                JSON-stat dataset.
        """
        body = _encode_query(query)
        resp = await self._post(body)
        envelope = self._decode_envelope(resp)
        data = self._check_api_status(envelope)

        table = parse_dataset(data, dataset=dataset, naming=naming)
        logger.info(
            f"Fetched {table.label or 'dataset'}: "
            f"{table.num_rows} rows x {len(table.columns)} columns"
        )
        return table


def read_dataset(
    query: Query,
    *,
    url: str | None = None,
    timeout: float = _DEFAULT_TIMEOUT,
    dataset: str | int | None = None,
    naming: Naming = "label",
) -> ResultTable:
    """Blocking one-shot form of :meth:`PxStatClient.fetch`.

    Opens a client, fetches ``query`` and closes the client again. Must not be
    called from inside a running event loop.
    """

    async def _run() -> ResultTable:
        async with PxStatClient(url=url, timeout=timeout) as client:
            return await client.fetch(query, dataset=dataset, naming=naming)

    return asyncio.run(_run())
