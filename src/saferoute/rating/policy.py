# Copyright 2025 msq
from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from saferoute.errors import ValidationError
from saferoute.geo import DEFAULT_SAMPLE_TARGET
from saferoute.zones import ZoneCategory

# A zone still rates points up to this multiple of its radius from its centre.
PROXIMITY_FACTOR = 2.0
ROUTE_SAMPLE_POINTS = DEFAULT_SAMPLE_TARGET
# Average route weight below SAFE_THRESHOLD is safe, below MODERATE_THRESHOLD moderate.
SAFE_THRESHOLD = 0.2
MODERATE_THRESHOLD = 0.6
ZONE_WEIGHTS: Mapping[ZoneCategory, float] = MappingProxyType(
    {
        ZoneCategory.SAFE: 0.0,
        ZoneCategory.MODERATE: 0.5,
        ZoneCategory.UNSAFE: 1.0,
    }
)


@dataclass(frozen=True, slots=True)
class RatingPolicy:
    """Tunable constants of the rating engine."""

    proximity_factor: float = PROXIMITY_FACTOR
    sample_target_count: int = ROUTE_SAMPLE_POINTS
    safe_threshold: float = SAFE_THRESHOLD
    moderate_threshold: float = MODERATE_THRESHOLD
    weights: Mapping[ZoneCategory, float] = field(default_factory=lambda: ZONE_WEIGHTS)

    def __post_init__(self) -> None:
        if not math.isfinite(self.proximity_factor) or self.proximity_factor <= 0:
            raise ValidationError("proximity_factor must be positive", field="proximity_factor")
        if self.sample_target_count < 1:
            raise ValidationError("sample_target_count must be >= 1", field="sample_target_count")
        if not 0.0 <= self.safe_threshold <= self.moderate_threshold:
            raise ValidationError(
                "thresholds must satisfy 0 <= safe_threshold <= moderate_threshold",
                field="safe_threshold",
            )
        for category in ZoneCategory:
            weight = self.weights.get(category)
            if weight is None or not 0.0 <= weight <= 1.0:
                raise ValidationError(f"weight for {category.value} must be in [0, 1]", field="weights")

    def weight_of(self, category: ZoneCategory) -> float:
        return self.weights[category]

    def category_for(self, average_weight: float) -> ZoneCategory:
        if average_weight < self.safe_threshold:
            return ZoneCategory.SAFE
        if average_weight < self.moderate_threshold:
            return ZoneCategory.MODERATE
        return ZoneCategory.UNSAFE


DEFAULT_POLICY = RatingPolicy()
