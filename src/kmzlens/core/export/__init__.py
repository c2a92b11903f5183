"""
Export of parsed archives to GeoJSON and of their statistics to JSON.
"""

from .geojson import (
    ANALYTICS_SUFFIX,
    GEOJSON_SUFFIX,
    AnalyticsExporter,
    GeoJSONExporter,
    GeospatialExporter,
    dumps_analytics,
    dumps_geojson,
    export_filename,
    geometry_to_geojson,
    placemark_to_feature,
    stats_to_dict,
    to_feature_collection,
)

__all__ = [
    "ANALYTICS_SUFFIX",
    "GEOJSON_SUFFIX",
    "AnalyticsExporter",
    "GeoJSONExporter",
    "GeospatialExporter",
    "dumps_analytics",
    "dumps_geojson",
    "export_filename",
    "geometry_to_geojson",
    "placemark_to_feature",
    "stats_to_dict",
    "to_feature_collection",
]
