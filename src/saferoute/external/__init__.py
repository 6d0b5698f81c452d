"""Third-party directions and search collaborators."""

from .geocoding import (
    GeocodeProvider,
    GeocodeResult,
    GeocodingError,
    LocationResolver,
    NominatimClient,
    parse_coordinate_pair,
)
from .routing import OpenRouteServiceClient, PathProvider, RoutePath, RoutingError

__all__ = [
    "GeocodeProvider",
    "GeocodeResult",
    "GeocodingError",
    "LocationResolver",
    "NominatimClient",
    "OpenRouteServiceClient",
    "PathProvider",
    "RoutePath",
    "RoutingError",
    "parse_coordinate_pair",
]
