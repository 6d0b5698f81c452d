"""Application services."""

from .safety_service import LocationSafety, RoutePlanResult, SafetyMapService

__all__ = ["LocationSafety", "RoutePlanResult", "SafetyMapService"]
