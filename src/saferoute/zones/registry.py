# Copyright 2025 msq
from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

import structlog

from .index import ZoneIndex
from .models import Zone


@dataclass(slots=True)
class ZoneRegistryState:
    """The index currently served and when it was installed."""

    index: ZoneIndex
    loaded_at: datetime


class ZoneRegistry:
    """Holds the live ``ZoneIndex`` and swaps it atomically on reload."""

    def __init__(self, index: ZoneIndex | None = None) -> None:
        self._state = ZoneRegistryState(index or ZoneIndex.empty(), datetime.now(timezone.utc))
        self._lock = threading.Lock()
        self._logger = structlog.get_logger(__name__)

    def current(self) -> ZoneIndex:
        """Snapshot to use for one whole query."""
        return self._state.index

    def snapshot(self) -> ZoneRegistryState:
        state = self._state
        return ZoneRegistryState(state.index, state.loaded_at)

    def replace(self, zones: Iterable[Zone]) -> ZoneIndex:
        """Validate ``zones`` then install them; a failed load keeps the old index."""
        index = ZoneIndex.load(zones)
        self.install(index)
        return index

    def install(self, index: ZoneIndex) -> None:
        with self._lock:
            previous = self._state.index
            self._state = ZoneRegistryState(index, datetime.now(timezone.utc))
        self._logger.info(
            "zone_index_swapped",
            previous_count=len(previous),
            zone_count=len(index),
        )
