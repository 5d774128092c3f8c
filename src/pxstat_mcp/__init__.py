"""pxstat-mcp: PxStat JSON-RPC client and MCP server for CSO statistics.

Quick start::

    import asyncio
    from pxstat_mcp import PxStatClient

    async def main():
        async with PxStatClient() as client:
            # query is a complete PxStat.Data.Cube_API.ReadDataset request body
            table = await client.fetch(query)
            print(table.columns)

            for row in table.to_dicts()[:5]:
                print(row)

    asyncio.run(main())
"""

from pxstat_mcp.client import PxStatClient, read_dataset
from pxstat_mcp.exceptions import (
    ApiError,
    MalformedResponseError,
    PxStatError,
    TransportError,
)
from pxstat_mcp.jsonstat import parse_dataset
from pxstat_mcp.models import (
    Category,
    Dimension,
    ResultTable,
)

__all__ = [
    "ApiError",
    "Category",
    "Dimension",
    "MalformedResponseError",
    "PxStatClient",
    "PxStatError",
    "ResultTable",
    "TransportError",
    "parse_dataset",
    "read_dataset",
]

__version__ = "0.1.0"
