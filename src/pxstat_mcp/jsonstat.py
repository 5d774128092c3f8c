"""JSON-stat dataset to table conversion.

Turns the ``data`` member of a PxStat response into a
:class:`~pxstat_mcp.models.ResultTable`. The conversion works on the decoded
structure directly; it never re-serializes the payload.

Supported document shapes:
    - JSON-stat 2.0 ``"class": "dataset"`` with top-level ``id`` and ``size``
    - JSON-stat 2.0 ``"class": "collection"`` embedding datasets in
      ``link.item``
    - JSON-stat 1.x bundles (``{"name": {"dimension": {"id": ..., "size": ...}}}``)

Category ``index`` may be an array, an ``{id: position}`` object, or absent
for single-category dimensions. ``value`` may be a dense array or a sparse
``{"position": value}`` object; missing positions become ``None``.
"""

from __future__ import annotations

import itertools
import math
from collections import Counter
from typing import Any, Literal

from loguru import logger

from pxstat_mcp.exceptions import MalformedResponseError
from pxstat_mcp.models import Category, Dimension, ResultTable

Naming = Literal["label", "id"]


def _text(obj: Any) -> str | None:
    return None if obj is None else str(obj)


def _is_dataset(obj: Any) -> bool:
    if not isinstance(obj, dict):
        return False
    if obj.get("class") == "dataset":
        return True
    return "class" not in obj and "dimension" in obj and "value" in obj


def _find_datasets(doc: dict[str, Any]) -> list[tuple[str, dict[str, Any]]]:
    """Return ``(name, dataset)`` pairs contained in a JSON-stat document."""
    if _is_dataset(doc):
        return [(str(doc.get("label") or ""), doc)]

    if doc.get("class") == "collection":
        link = doc.get("link")
        items = link.get("item") if isinstance(link, dict) else None
        return [
            (str(item.get("label") or item.get("href") or ""), item)
            for item in items or []
            if isinstance(item, dict) and item.get("class") == "dataset"
        ]

    # JSON-stat 1.x bundle: every top-level member is a dataset
    return [(name, obj) for name, obj in doc.items() if _is_dataset(obj)]


def _select_dataset(doc: Any, dataset: str | int | None) -> dict[str, Any]:
    if not isinstance(doc, dict):
        raise MalformedResponseError(
            f"JSON-stat payload must be an object, got {type(doc).__name__}"
        )

    found = _find_datasets(doc)
    if not found:
        raise MalformedResponseError("JSON-stat payload contains no dataset")

    if dataset is None:
        if len(found) > 1:
            names = ", ".join(name for name, _ in found)
            raise MalformedResponseError(
                f"JSON-stat payload holds {len(found)} datasets ({names}); "
                "select one with dataset="
            )
        return found[0][1]

    if isinstance(dataset, int):
        if not 0 <= dataset < len(found):
            raise MalformedResponseError(
                f"Dataset index {dataset} out of range (0..{len(found) - 1})"
            )
        return found[dataset][1]

    for name, obj in found:
        if name == dataset:
            return obj
    raise MalformedResponseError(f"Dataset {dataset!r} not found in JSON-stat payload")


def _dimension_layout(ds: dict[str, Any]) -> tuple[list[str], list[int]]:
    """Read dimension ids and sizes from a 2.0 or 1.x dataset."""
    dims = ds.get("dimension")
    if not isinstance(dims, dict):
        raise MalformedResponseError("JSON-stat dataset has no 'dimension' object")

    if "id" in ds or "size" in ds:
        ids, sizes = ds.get("id"), ds.get("size")
    else:
        ids, sizes = dims.get("id"), dims.get("size")

    if not isinstance(ids, list) or not isinstance(sizes, list):
        raise MalformedResponseError("JSON-stat dataset lacks 'id'/'size' arrays")
    if len(ids) != len(sizes):
        raise MalformedResponseError(
            f"JSON-stat 'id' has {len(ids)} entries but 'size' has {len(sizes)}"
        )
    if not all(isinstance(s, int) and s >= 0 for s in sizes):
        raise MalformedResponseError(f"Invalid JSON-stat sizes: {sizes}")

    return [str(i) for i in ids], sizes


def _roles(ds: dict[str, Any]) -> dict[str, str]:
    """Map dimension id to role; 1.x keeps ``role`` inside ``dimension``."""
    role = ds.get("role")
    if role is None:
        role = (ds.get("dimension") or {}).get("role")
    if not isinstance(role, dict):
        return {}
    return {
        str(dim_id): str(name)
        for name, dim_ids in role.items()
        if isinstance(dim_ids, list)
        for dim_id in dim_ids
    }


def _category_ids(dim_id: str, category: dict[str, Any]) -> list[str]:
    index = category.get("index")
    if isinstance(index, list):
        return [str(c) for c in index]
    if isinstance(index, dict):
        positions = list(index.values())
        if not all(isinstance(p, int) and not isinstance(p, bool) for p in positions) or (
            sorted(positions) != list(range(len(positions)))
        ):
            raise MalformedResponseError(
                f"Dimension {dim_id!r} category index positions are not 0..{len(positions) - 1}"
            )
        return [str(c) for c in sorted(index, key=lambda c: index[c])]
    if index is None:
        labels = category.get("label")
        if isinstance(labels, dict):
            return [str(c) for c in labels]
    raise MalformedResponseError(f"Dimension {dim_id!r} has no usable category index")


def _parse_dimension(
    dim_id: str, size: int, obj: Any, role: str | None
) -> Dimension:
    if not isinstance(obj, dict):
        raise MalformedResponseError(f"Dimension {dim_id!r} is missing from 'dimension'")

    category = obj.get("category")
    if not isinstance(category, dict):
        raise MalformedResponseError(f"Dimension {dim_id!r} has no 'category' object")

    ids = _category_ids(dim_id, category)
    if len(ids) != size:
        raise MalformedResponseError(
            f"Dimension {dim_id!r} declares size {size} but has {len(ids)} categories"
        )

    labels = category.get("label")
    if not isinstance(labels, dict):
        labels = {}
    return Dimension(
        id=dim_id,
        label=str(obj.get("label") or dim_id),
        role=role,
        categories=[Category(id=c, label=str(labels.get(c, c))) for c in ids],
    )


def _unique_labels(dimensions: list[Dimension]) -> list[str]:
    """Dimension labels as column names; shared labels fall back to the id."""
    counts = Counter(d.label for d in dimensions)
    return [d.label if counts[d.label] == 1 else d.id for d in dimensions]


def _values(raw: Any, total: int) -> list[Any]:
    if isinstance(raw, list):
        if len(raw) != total:
            raise MalformedResponseError(
                f"JSON-stat value array has {len(raw)} entries, "
                f"dimension sizes imply {total}"
            )
        return raw

    if isinstance(raw, dict):
        values: list[Any] = [None] * total
        for key, val in raw.items():
            try:
                pos = int(key)
            except ValueError:
                raise MalformedResponseError(f"Invalid sparse value key {key!r}") from None
            if not 0 <= pos < total:
                raise MalformedResponseError(
                    f"Sparse value position {pos} outside cube of {total} cells"
                )
            values[pos] = val
        return values

    raise MalformedResponseError("JSON-stat dataset has no 'value' array or object")


def parse_dataset(
    doc: Any,
    *,
    dataset: str | int | None = None,
    naming: Naming = "label",
    value_column: str = "value",
) -> ResultTable:
    """Flatten a JSON-stat document into a :class:`ResultTable`.

    Args:
        doc: Decoded JSON-stat document (dataset, collection or 1.x bundle).
        dataset: Dataset to pick when ``doc`` holds several, by name/label or
            position. Required if there is more than one.
        naming: ``"label"`` uses dimension and category labels for columns and
            cells; ``"id"`` uses their identifiers.
        value_column: Name of the observation column.

    Raises:
        MalformedResponseError: If the document does not have the JSON-stat
            dataset shape or its sizes are inconsistent.
    """
    if naming not in ("label", "id"):
        raise ValueError(f"naming must be 'label' or 'id', got {naming!r}")

    ds = _select_dataset(doc, dataset)
    ids, sizes = _dimension_layout(ds)
    roles = _roles(ds)

    dimensions = [
        _parse_dimension(dim_id, size, ds["dimension"].get(dim_id), roles.get(dim_id))
        for dim_id, size in zip(ids, sizes)
    ]
    values = _values(ds.get("value"), math.prod(sizes))

    if naming == "label":
        columns = _unique_labels(dimensions)
        axes = [[c.label for c in d.categories] for d in dimensions]
    else:
        columns = [d.id for d in dimensions]
        axes = [[c.id for c in d.categories] for d in dimensions]

    if len(set(columns)) != len(columns):
        raise MalformedResponseError(f"Duplicate dimension columns: {columns}")
    if value_column in columns:
        raise MalformedResponseError(
            f"Dimension column {value_column!r} clashes with the value column"
        )
    columns.append(value_column)

    rows = [
        (*cells, value)
        for cells, value in zip(itertools.product(*axes), values)
    ]

    logger.debug(f"Parsed JSON-stat dataset: {len(dimensions)} dimensions, {len(rows)} rows")

    return ResultTable(
        label=_text(ds.get("label")),
        source=_text(ds.get("source")),
        updated=_text(ds.get("updated")),
        dimensions=dimensions,
        columns=columns,
        rows=rows,
    )
