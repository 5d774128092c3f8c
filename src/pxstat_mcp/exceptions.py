"""Exceptions for pxstat-mcp.

Three failure kinds are kept apart so callers can tell where a problem lies:

- :class:`TransportError`: the HTTP exchange itself failed (non-200 status,
  network error, timeout). The query content was never evaluated.
- :class:`ApiError`: the API answered with a JSON-RPC ``error`` object. The
  query is at fault (unknown matrix, bad dimension or category, ...).
- :class:`MalformedResponseError`: the response does not match the JSON-RPC
  envelope or the JSON-stat dataset shape.
"""

from __future__ import annotations

from typing import Any


class PxStatError(Exception):
    """Base exception for pxstat-mcp errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class TransportError(PxStatError):
    """The HTTP request failed or returned a status other than 200.

    ``status_code`` is ``None`` when no response was received at all.
    """

    def __init__(self, status_code: int | None, message: str | None = None) -> None:
        if message is None:
            message = f"HTTP {status_code} from PxStat endpoint"
        super().__init__(message, status_code=status_code)


class ApiError(PxStatError):
    """The API reported a JSON-RPC error for the submitted query."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.data = data

    def __str__(self) -> str:
        return f"API error {self.code}: {self.message}"


class MalformedResponseError(PxStatError):
    """The response is not a valid envelope or JSON-stat dataset."""
