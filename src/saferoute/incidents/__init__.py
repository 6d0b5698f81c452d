"""Anonymous incident reports and incident-density scoring."""

from .density import IncidentDensityScorer, IncidentSafetyScore, ScoreLevel
from .models import IncidentReport, IncidentType, ReportedWhen
from .store import IncidentStore, InMemoryIncidentStore

__all__ = [
    "IncidentDensityScorer",
    "IncidentReport",
    "IncidentSafetyScore",
    "IncidentStore",
    "IncidentType",
    "InMemoryIncidentStore",
    "ReportedWhen",
    "ScoreLevel",
]
