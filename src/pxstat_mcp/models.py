"""Domain models for PxStat API responses.

All public models use Pydantic v2 for validation and serialization.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# JSON-RPC envelope
# ---------------------------------------------------------------------------


class RpcError(BaseModel):
    """The ``error`` member of a failed JSON-RPC response.

    Attributes:
        code: JSON-RPC error code (e.g. ``-32602`` for invalid params).
        message: Human-readable description from the API.
        data: Optional extra detail the API attached to the error.
    """

    code: int
    message: str
    data: Any = None

    model_config = {"frozen": True}


class Envelope(BaseModel):
    """Top-level JSON-RPC response.

    Exactly one of ``data`` and ``error`` is expected. Which one applies is
    decided by key presence (see ``model_fields_set``), not by value.
    """

    jsonrpc: str | None = None
    id: int | str | None = None
    data: Any = None
    error: RpcError | None = None

    model_config = {"frozen": True}

    @property
    def has_data(self) -> bool:
        return "data" in self.model_fields_set


# ---------------------------------------------------------------------------
# ResultTable
# ---------------------------------------------------------------------------


class Category(BaseModel):
    """A single category of a dimension (e.g. ``"1"`` / ``"Male"``)."""

    id: str
    label: str

    model_config = {"frozen": True}


class Dimension(BaseModel):
    """One axis of a statistical cube.

    Attributes:
        id: Dimension identifier (e.g. ``C02199V02655``).
        label: Dimension label (e.g. ``Sex``); falls back to ``id``.
        role: JSON-stat role (``time``, ``geo`` or ``metric``), if declared.
        categories: Categories in JSON-stat index order.
    """

    id: str
    label: str
    role: str | None = None
    categories: list[Category] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def size(self) -> int:
        return len(self.categories)


class ResultTable(BaseModel):
    """A JSON-stat dataset flattened into rows.

    One row per observation, one column per dimension holding the category
    for that observation, and a final value column. Rows follow JSON-stat
    row-major order (the last dimension varies fastest).

    Attributes:
        label: Dataset title.
        source: Data source, if declared.
        updated: Last update timestamp, if declared.
        dimensions: Dimensions in declaration order.
        columns: Column names; dimensions first, value column last.
        rows: One tuple per observation, aligned with ``columns``.
    """

    label: str | None = None
    source: str | None = None
    updated: str | None = None
    dimensions: list[Dimension] = Field(default_factory=list)
    columns: list[str] = Field(default_factory=list)
    rows: list[tuple[Any, ...]] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    @property
    def value_column(self) -> str:
        return self.columns[-1]

    def to_dicts(self) -> list[dict[str, Any]]:
        """Convert rows to a list of ``{column: cell}`` dictionaries."""
        return [dict(zip(self.columns, row)) for row in self.rows]

    def as_mapping(self) -> dict[tuple[Any, ...], Any]:
        """Map each combination of dimension cells to its value."""
        return {row[:-1]: row[-1] for row in self.rows}

    def to_polars(self) -> Any:
        """Convert to a Polars DataFrame.

        Requires polars to be installed (pip install pxstat-mcp[polars]).

        Raises:
            ImportError: If polars is not installed.
        """
        try:
            import polars as pl
        except ImportError:
            raise ImportError(
                "polars is required for to_polars(). "
                "Install it with: pip install pxstat-mcp[polars]"
            ) from None

        return pl.DataFrame(self.rows, schema=self.columns, orient="row")

    def to_pandas(self) -> Any:
        """Convert to a pandas DataFrame.

        Requires pandas to be installed (pip install pxstat-mcp[pandas]).

        Raises:
            ImportError: If pandas is not installed.
        """
        try:
            import pandas as pd
        except ImportError:
            raise ImportError(
                "pandas is required for to_pandas(). "
                "Install it with: pip install pxstat-mcp[pandas]"
            ) from None

        return pd.DataFrame.from_records(self.rows, columns=self.columns)
