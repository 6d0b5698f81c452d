# Copyright 2025 msq
from __future__ import annotations

import asyncio
from typing import List, Protocol

import structlog

from saferoute.geo import GeoPoint, haversine_meters

from .models import IncidentReport

logger = structlog.get_logger(__name__)


class IncidentStore(Protocol):
    async def add(self, report: IncidentReport) -> IncidentReport: ...

    async def list_all(self) -> List[IncidentReport]: ...

    async def list_near(self, point: GeoPoint, radius_meters: float) -> List[IncidentReport]: ...


class InMemoryIncidentStore:
    """Process-local incident list, kept in submission order."""

    def __init__(self) -> None:
        self._reports: List[IncidentReport] = []
        self._lock = asyncio.Lock()

    async def add(self, report: IncidentReport) -> IncidentReport:
        async with self._lock:
            self._reports.append(report)
            total = len(self._reports)
        logger.info(
            "incident_reported",
            incident_id=report.id,
            incident_type=report.incident_type.value,
            total=total,
        )
        return report

    async def list_all(self) -> List[IncidentReport]:
        # list() copy so callers cannot mutate the store
        async with self._lock:
            return list(self._reports)

    async def list_near(self, point: GeoPoint, radius_meters: float) -> List[IncidentReport]:
        reports = await self.list_all()
        return [report for report in reports if haversine_meters(point, report.location) <= radius_meters]

    async def clear(self) -> None:
        async with self._lock:
            self._reports.clear()
