"""
Data models and schemas.
"""

from .analytics import (
    ArchiveAnalysisResponse,
    BoundingBox,
    LocationCluster,
    LocationStats,
    RouteAnalysis,
)
from .archive import (
    ArchiveDocument,
    Coordinate,
    Folder,
    Geometry,
    LineStringGeometry,
    ParseResult,
    Placemark,
    PointGeometry,
    PolygonGeometry,
)
from .errors import ErrorDetail, ErrorResponse

__all__ = [
    # Archive tree
    "ArchiveDocument",
    "Coordinate",
    "Folder",
    "Geometry",
    "LineStringGeometry",
    "ParseResult",
    "Placemark",
    "PointGeometry",
    "PolygonGeometry",
    # Analytics
    "ArchiveAnalysisResponse",
    "BoundingBox",
    "LocationCluster",
    "LocationStats",
    "RouteAnalysis",
    # Errors
    "ErrorDetail",
    "ErrorResponse",
]
