"""Quick start example for pxstat-mcp.

Fetches the 2011/2016 census population of Irish nationals by sex (matrix
E3002) from the CSO PxStat API and prints it as a table.

Usage:
    uv run python examples/quickstart.py
"""

import asyncio

from pxstat_mcp import ApiError, PxStatClient, TransportError

QUERY = {
    "jsonrpc": "2.0",
    "method": "PxStat.Data.Cube_API.ReadDataset",
    "params": {
        "matrix": "E3002",
        "language": "en",
        "FrmType": "JSON-stat",
        "FrmVersion": "2.0",
        "role": {"time": ["TLIST(A1)"], "metric": ["STATISTIC"]},
        "dimension": [
            {"id": "C02199V02655", "category": {"index": ["1", "2"]}},
            {"id": "C02701V03269", "category": {"index": ["-01"]}},
            {"id": "C02786V03355", "category": {"index": ["22"]}},
        ],
    },
}


async def main() -> None:
    async with PxStatClient() as client:
        try:
            table = await client.fetch(QUERY)
        except ApiError as e:
            print(f"Query rejected: {e.code} {e.message}")
            return
        except TransportError as e:
            print(f"PxStat unavailable: {e}")
            return

    print(f"=== {table.label} ===")
    print(f"  Columns: {table.columns}")
    print(f"  Rows: {table.num_rows}\n")

    for row in table.to_dicts():
        print(f"  {row['CensusYear']}  {row['Sex']:<7} {row['value']!s:>10}")


if __name__ == "__main__":
    asyncio.run(main())
