"""Command-line interface for pxstat-mcp.

Provides three commands:
- ``pxstat-mcp fetch``: Submit a query and print the resulting table
- ``pxstat-mcp version``: Show version information
- ``pxstat-mcp serve``: Start the MCP server
"""

from __future__ import annotations

import asyncio
import csv
import io
import json
import sys
from typing import TYPE_CHECKING, Literal, TextIO, cast

import click
from loguru import logger

from pxstat_mcp.exceptions import PxStatError

if TYPE_CHECKING:
    from pxstat_mcp.models import ResultTable


def _handle_api_error(e: Exception, prefix: str = "Error") -> None:
    """Print an API error message to stderr and exit with code 1."""
    click.echo(f"{prefix}: {e}", err=True)
    raise SystemExit(1) from None


def _echo_table(table: ResultTable, limit: int) -> None:
    click.echo(f"Dataset: {table.label or '-'}")
    click.echo(f"Rows: {table.num_rows}\n")

    if not table.rows:
        click.echo("No data returned.")
        return

    shown = table.rows[:limit]
    cells = [[("" if c is None else str(c)) for c in row] for row in shown]
    widths = [
        max([len(col)] + [len(row[i]) for row in cells])
        for i, col in enumerate(table.columns)
    ]
    click.echo("  ".join(col.ljust(w) for col, w in zip(table.columns, widths)))
    click.echo("  ".join("-" * w for w in widths))
    for row in cells:
        click.echo("  ".join(cell.ljust(w) for cell, w in zip(row, widths)))

    if table.num_rows > limit:
        click.echo(f"\n  ... and {table.num_rows - limit} more rows")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """PxStat JSON-RPC client and MCP server for CSO statistics."""
    level = "DEBUG" if verbose else "INFO"
    logger.remove()
    logger.add(sys.stderr, level=level, format="{time:HH:mm:ss} | {level:<7} | {message}")


@cli.command()
@click.argument("query_file", type=click.File("r"), default="-")
@click.option("--url", default=None, help="JSON-RPC endpoint (default: CSO PxStat).")
@click.option("--timeout", default=60.0, show_default=True, help="Request timeout in seconds.")
@click.option(
    "--dataset",
    default=None,
    help="Dataset name, or position if all digits, when the response holds several.",
)
@click.option(
    "--naming",
    type=click.Choice(["label", "id"]),
    default="label",
    help="Use dimension/category labels or ids.",
)
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(["table", "json", "csv"]),
    default="table",
    help="Output format.",
)
@click.option("--limit", "-n", default=20, help="Max rows to show in table format (default: 20).")
def fetch(
    query_file: TextIO,
    url: str | None,
    timeout: float,
    dataset: str | None,
    naming: str,
    fmt: str,
    limit: int,
) -> None:
    """Submit a JSON-RPC query and print the dataset as a table.

    QUERY_FILE holds the complete request body; use '-' (default) for stdin.

    Examples:

        pxstat-mcp fetch query.json

        pxstat-mcp fetch query.json --format csv > E3002.csv

        cat query.json | pxstat-mcp fetch --naming id --format json
    """
    from pxstat_mcp.client import PxStatClient

    query = query_file.read()
    selector: str | int | None = int(dataset) if dataset and dataset.isdecimal() else dataset

    async def _run() -> ResultTable:
        async with PxStatClient(url=url, timeout=timeout) as client:
            return await client.fetch(
                query,
                dataset=selector,
                naming=cast('Literal["label", "id"]', naming),
            )

    try:
        table = asyncio.run(_run())
    except (PxStatError, ValueError) as e:
        _handle_api_error(e)

    if fmt == "json":
        click.echo(json.dumps(table.to_dicts(), ensure_ascii=False, indent=2))
        return

    if fmt == "csv":
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(table.columns)
        writer.writerows(table.rows)
        click.echo(buf.getvalue(), nl=False)
        return

    _echo_table(table, limit)


@cli.command()
def version() -> None:
    """Show version information."""
    from pxstat_mcp import __version__

    click.echo(f"pxstat-mcp {__version__}")


@cli.command()
@click.option(
    "--transport",
    type=click.Choice(["stdio", "sse"]),
    default="stdio",
    help="MCP transport protocol.",
)
def serve(transport: str) -> None:
    """Start the PxStat MCP server.

    For Claude Desktop, add this to your config:

        {"mcpServers": {"pxstat": {"command": "uvx", "args": ["pxstat-mcp", "serve"]}}}
    """
    from pxstat_mcp.server import mcp

    logger.info(f"Starting PxStat MCP server ({transport} transport)")
    mcp.run(transport=cast('Literal["stdio", "sse"]', transport))


if __name__ == "__main__":
    cli()
