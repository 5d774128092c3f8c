"""Tests for pxstat_mcp.server."""

from __future__ import annotations

from typing import Any

import httpx
import pytest
import respx

from pxstat_mcp import server
from pxstat_mcp.client import PxStatClient
from pxstat_mcp.exceptions import ApiError
from pxstat_mcp.jsonstat import parse_dataset
from pxstat_mcp.server import _table_payload, mcp

BASE_URL = "https://ws.cso.ie/public/api.jsonrpc"

# FastMCP wraps decorated tools; the original coroutine lives on ``fn``.
_fetch_dataset = getattr(server.fetch_dataset, "fn", server.fetch_dataset)


class TestTablePayload:
    def test_payload_shape(self, e3002_cube: dict[str, Any]) -> None:
        payload = _table_payload(parse_dataset(e3002_cube), max_rows=100)

        assert payload["label"] == "Population 2011 to 2016"
        assert payload["columns"][-1] == "value"
        assert payload["row_count"] == 4
        assert len(payload["rows"]) == 4
        assert payload["rows"][0]["Sex"] == "Male"
        assert payload["truncated"] is False

    def test_payload_truncated(self, e3002_cube: dict[str, Any]) -> None:
        payload = _table_payload(parse_dataset(e3002_cube), max_rows=2)

        assert payload["row_count"] == 4
        assert len(payload["rows"]) == 2
        assert payload["truncated"] is True


class TestFetchDatasetTool:
    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_dataset(
        self,
        monkeypatch: pytest.MonkeyPatch,
        e3002_query: str,
        e3002_envelope: dict[str, Any],
    ) -> None:
        route = respx.post(BASE_URL).mock(
            return_value=httpx.Response(200, json=e3002_envelope)
        )

        async with PxStatClient(url=BASE_URL) as client:
            monkeypatch.setattr(server, "_client", client)
            result = await _fetch_dataset(e3002_query, max_rows=3)

        assert route.called
        assert result["row_count"] == 4
        assert len(result["rows"]) == 3
        assert result["truncated"] is True
        assert result["rows"][0]["value"] == 2272699

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_dataset_api_error(
        self,
        monkeypatch: pytest.MonkeyPatch,
        e3002_query: str,
        invalid_params_envelope: dict[str, Any],
    ) -> None:
        respx.post(BASE_URL).mock(
            return_value=httpx.Response(200, json=invalid_params_envelope)
        )

        async with PxStatClient(url=BASE_URL) as client:
            monkeypatch.setattr(server, "_client", client)
            with pytest.raises(ApiError) as exc_info:
                await _fetch_dataset(e3002_query, max_rows=10)

        assert exc_info.value.code == -32602


def test_server_name() -> None:
    assert mcp.name == "PxStat"
