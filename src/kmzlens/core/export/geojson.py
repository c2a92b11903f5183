"""
GeoJSON and analytics JSON export.

Provides export functionality to:
- GeoJSON FeatureCollection (QGIS/web mapping), one feature per placemark
- Analytics JSON, the serialized LocationStats of a document

GeoJSON positions are [longitude, latitude]; placemark coordinates are stored
latitude first, so every position is swapped on the way out.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from kmzlens.core.analytics import analyze, flatten
from kmzlens.models.analytics import LocationStats
from kmzlens.models.archive import (
    ArchiveDocument,
    Coordinate,
    Geometry,
    LineStringGeometry,
    Placemark,
    PointGeometry,
    PolygonGeometry,
)

logger = logging.getLogger(__name__)

GEOJSON_SUFFIX = ".geojson"
ANALYTICS_SUFFIX = "_analytics.json"

_UNSAFE_PATH_PARTS = re.compile(r"[\\/]+|\.\.")


def _position(coordinate: Coordinate) -> List[float]:
    return [coordinate.lng, coordinate.lat]


def geometry_to_geojson(geometry: Geometry) -> Dict[str, Any]:
    """Convert a placemark geometry to a GeoJSON geometry dict."""
    if isinstance(geometry, PointGeometry):
        coordinates: Any = _position(geometry.coordinate)
    elif isinstance(geometry, LineStringGeometry):
        coordinates = [_position(c) for c in geometry.coordinates]
    elif isinstance(geometry, PolygonGeometry):
        coordinates = [[_position(c) for c in ring] for ring in geometry.rings]
    else:
        raise TypeError(f"Unsupported geometry: {type(geometry).__name__}")

    return {"type": geometry.type, "coordinates": coordinates}


def placemark_to_feature(placemark: Placemark) -> Dict[str, Any]:
    """Create a GeoJSON feature from a placemark."""
    return {
        "type": "Feature",
        "id": placemark.id,
        "properties": {
            "name": placemark.name,
            "description": placemark.description,
            "styleUrl": placemark.style_ref,
            **placemark.extra_properties,
        },
        "geometry": geometry_to_geojson(placemark.geometry),
    }


def to_feature_collection(document: ArchiveDocument) -> Dict[str, Any]:
    """
    Build a GeoJSON FeatureCollection from every placemark of a document.

    Args:
        document: Parsed archive

    Returns:
        FeatureCollection dict with features in document order
    """
    return {
        "type": "FeatureCollection",
        "name": document.name,
        "features": [placemark_to_feature(p) for p in flatten(document)],
    }


def dumps_geojson(document: ArchiveDocument, indent: int = 2) -> str:
    """Serialize the FeatureCollection of a document to GeoJSON text."""
    return json.dumps(to_feature_collection(document), indent=indent)


def stats_to_dict(stats: LocationStats) -> Dict[str, Any]:
    """JSON-safe dictionary of location statistics."""
    return stats.model_dump(mode="json")


def dumps_analytics(stats: LocationStats, indent: int = 2) -> str:
    """Serialize location statistics to JSON text."""
    return json.dumps(stats_to_dict(stats), indent=indent)


def export_filename(document_name: str, suffix: str = GEOJSON_SUFFIX) -> str:
    """
    Download filename for a document export.

    Path separators and ".." segments in the document name become underscores,
    so the name always stays inside the export directory. Runs of whitespace
    become a single underscore.

    Examples:
        >>> export_filename("My Saved Places")
        'My_Saved_Places.geojson'
        >>> export_filename("My Saved Places", ANALYTICS_SUFFIX)
        'My_Saved_Places_analytics.json'
        >>> export_filename("../escaped")
        '__escaped.geojson'
    """
    safe_name = _UNSAFE_PATH_PARTS.sub("_", document_name)
    return re.sub(r"\s+", "_", safe_name) + suffix


class GeospatialExporter:
    """Base class for file exporters."""

    suffix: str = ""

    def render(self, document: ArchiveDocument) -> str:
        """
        Render the export as text.

        Raises:
            NotImplementedError: Must be implemented by subclass
        """
        raise NotImplementedError("Subclass must implement render()")

    def export(self, document: ArchiveDocument, output_path: Union[str, Path]) -> Path:
        """
        Write the export of a document to a file.

        Args:
            document: Parsed archive
            output_path: File to write, or a directory to write the default
                export filename into

        Returns:
            Path of the written file
        """
        output_path = Path(output_path)
        if output_path.is_dir():
            output_path = output_path / export_filename(document.name, self.suffix)

        logger.info(f"Exporting {type(self).__name__} output to {output_path}")
        output_path.write_text(self.render(document), encoding="utf-8")
        return output_path


class GeoJSONExporter(GeospatialExporter):
    """Export the flattened placemarks of a document as GeoJSON."""

    suffix = GEOJSON_SUFFIX

    def render(self, document: ArchiveDocument) -> str:
        return dumps_geojson(document)


class AnalyticsExporter(GeospatialExporter):
    """Export the location statistics of a document as JSON."""

    suffix = ANALYTICS_SUFFIX

    def __init__(self, max_distance_km: Optional[float] = None) -> None:
        self.max_distance_km = max_distance_km

    def render(self, document: ArchiveDocument) -> str:
        return dumps_analytics(analyze(document, self.max_distance_km))
