"""MCP server exposing PxStat tools to LLMs via FastMCP.

This module defines the MCP (Model Context Protocol) server that lets AI
assistants submit PxStat ``ReadDataset`` queries and read the resulting
statistics as rows.

Usage with Claude Desktop (add to ``claude_desktop_config.json``)::

    {
      "mcpServers": {
        "pxstat": {
          "command": "uvx",
          "args": ["pxstat-mcp", "serve"]
        }
      }
    }
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Annotated, Any

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from pxstat_mcp.models import ResultTable

from fastmcp import FastMCP
from pydantic import Field

from pxstat_mcp.client import PxStatClient

# Lazily initialized client with lock for concurrent-safe access
_client: PxStatClient | None = None
_client_lock = asyncio.Lock()


async def _get_client() -> PxStatClient:
    """Return the shared PxStatClient, creating it on first call."""
    global _client
    if _client is not None:
        return _client
    async with _client_lock:
        if _client is None:
            _client = PxStatClient()
    return _client


@asynccontextmanager
async def _lifespan(server: FastMCP[dict[str, Any]]) -> AsyncIterator[dict[str, Any]]:
    """Manage PxStatClient lifecycle; close httpx.AsyncClient on shutdown."""
    yield {}
    if _client is not None:
        await _client.close()


mcp = FastMCP(
    name="PxStat",
    lifespan=_lifespan,
    instructions=(
        "PxStat MCP server provides access to statistics published by the "
        "Central Statistics Office of Ireland through its JSON-RPC API.\n\n"
        "Key tools:\n"
        "- fetch_dataset: Submit a complete PxStat.Data.Cube_API.ReadDataset "
        "request and receive the cube as rows (one column per dimension plus "
        "'value').\n\n"
        "The query must be a full JSON-RPC 2.0 request body naming the matrix "
        "(e.g. E3002), the language, the JSON-stat output format and the "
        "dimension categories to select."
    ),
)


def _table_payload(table: ResultTable, max_rows: int) -> dict[str, Any]:
    return {
        "label": table.label,
        "columns": table.columns,
        "row_count": table.num_rows,
        "rows": table.to_dicts()[:max_rows],
        "truncated": table.num_rows > max_rows,
    }


@mcp.tool()
async def fetch_dataset(
    query: Annotated[
        str,
        Field(description="Complete JSON-RPC request body (PxStat.Data.Cube_API.ReadDataset)"),
    ],
    max_rows: Annotated[
        int,
        Field(description="Maximum rows to return (default: 100)", ge=1, le=10000),
    ] = 100,
) -> dict[str, Any]:
    """Fetch a PxStat dataset and return it as a flat table.

    Columns are the dimension labels in declaration order followed by
    'value'. Rows are in JSON-stat order (last dimension varies fastest).

    The response includes:
    - label: Dataset title
    - columns: Column names
    - row_count: Total number of observations
    - rows: First max_rows observations as objects
    - truncated: Whether rows were cut at max_rows
    """
    client = await _get_client()
    table = await client.fetch(query)
    return _table_payload(table, max_rows)
