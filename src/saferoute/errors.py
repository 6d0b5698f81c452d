# Copyright 2025 msq
from __future__ import annotations


class ValidationError(ValueError):
    """Malformed input: zone catalog, coordinates or query parameters."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class LocationNotFoundError(RuntimeError):
    """A free-text location could not be resolved to a coordinate."""

    def __init__(self, query: str) -> None:
        super().__init__(f"location not found: {query}")
        self.query = query
