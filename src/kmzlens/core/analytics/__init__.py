"""
Location analytics for parsed KMZ archives.
"""

from .analyzer import analyze, analyze_routes, create_location_clusters, flatten
from .geodesy import (
    EARTH_RADIUS_KM,
    CoordinateAccumulator,
    calculate_bounds,
    calculate_centroid,
    haversine_km,
    haversine_km_array,
    route_distance_km,
)

__all__ = [
    "analyze",
    "analyze_routes",
    "create_location_clusters",
    "flatten",
    "EARTH_RADIUS_KM",
    "CoordinateAccumulator",
    "calculate_bounds",
    "calculate_centroid",
    "haversine_km",
    "haversine_km_array",
    "route_distance_km",
]
