"""Shared test fixtures for pxstat-mcp."""

from __future__ import annotations

import json
from typing import Any

import pytest


@pytest.fixture()
def e3002_query() -> str:
    """ReadDataset request for E3002: both sexes, all ages, State, Irish."""
    return json.dumps(
        {
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
    )


@pytest.fixture()
def e3002_cube() -> dict[str, Any]:
    """JSON-stat 2.0 dataset as returned in the ``data`` member."""
    return {
        "class": "dataset",
        "version": "2.0",
        "label": "Population 2011 to 2016",
        "source": "Central Statistics Office, Ireland",
        "updated": "2017-04-20T11:00:00Z",
        "id": [
            "STATISTIC",
            "TLIST(A1)",
            "C02199V02655",
            "C02076V02508",
            "C02701V03269",
            "C02786V03355",
        ],
        "size": [1, 2, 2, 1, 1, 1],
        "role": {"time": ["TLIST(A1)"], "metric": ["STATISTIC"]},
        "dimension": {
            "STATISTIC": {
                "label": "Statistic",
                "category": {
                    "index": ["E3002C01"],
                    "label": {"E3002C01": "Population 2011 to 2016 (Number)"},
                    "unit": {"E3002C01": {"label": "Number", "decimals": 0}},
                },
            },
            "TLIST(A1)": {
                "label": "CensusYear",
                "category": {
                    "index": ["2011", "2016"],
                    "label": {"2011": "2011", "2016": "2016"},
                },
            },
            "C02199V02655": {
                "label": "Sex",
                "category": {
                    "index": ["1", "2"],
                    "label": {"1": "Male", "2": "Female"},
                },
            },
            "C02076V02508": {
                "label": "Age Last Birthday",
                "category": {"index": ["-"], "label": {"-": "All ages"}},
            },
            "C02701V03269": {
                "label": "Usual Residence",
                "category": {"index": ["-01"], "label": {"-01": "State"}},
            },
            "C02786V03355": {
                "label": "Nationality",
                "category": {"index": ["22"], "label": {"22": "Irish"}},
            },
        },
        "value": [2272699, 2315553, 2354428, 2407437],
    }


@pytest.fixture()
def e3002_envelope(e3002_cube: dict[str, Any]) -> dict[str, Any]:
    """Successful JSON-RPC response wrapping the E3002 dataset."""
    return {"jsonrpc": "2.0", "data": e3002_cube, "id": None}


@pytest.fixture()
def invalid_params_envelope() -> dict[str, Any]:
    """JSON-RPC error response for a query with bad parameters."""
    return {
        "jsonrpc": "2.0",
        "error": {"code": -32602, "message": "Invalid params"},
        "id": None,
    }
