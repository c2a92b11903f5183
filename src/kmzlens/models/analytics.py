"""
Pydantic models for location analytics derived from a parsed archive.

These are recomputed on every analysis call and carry no identity beyond it.
"""

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field

from .archive import ArchiveDocument, Coordinate, Placemark


class BoundingBox(BaseModel):
    """
    Axis-aligned latitude/longitude box.

    The empty box (north=-90, south=90, east=-180, west=180) is inverted and
    stands for "no coordinates".
    """

    model_config = ConfigDict(frozen=True)

    north: float = Field(..., description="Maximum latitude")
    south: float = Field(..., description="Minimum latitude")
    east: float = Field(..., description="Maximum longitude")
    west: float = Field(..., description="Minimum longitude")

    @classmethod
    def empty(cls) -> "BoundingBox":
        return cls(north=-90.0, south=90.0, east=-180.0, west=180.0)

    @property
    def is_empty(self) -> bool:
        return self.north < self.south or self.east < self.west


class LocationCluster(BaseModel):
    """
    Group of point placemarks lying within the clustering distance of a seed.

    Attributes:
        id: Cluster identifier by formation order ("cluster_0", ...)
        center: Seed coordinate, or member centroid for multi-member clusters
        members: Member placemarks in formation order
        radius_km: Largest distance from the center to a member
    """

    model_config = ConfigDict(frozen=True)

    id: str
    center: Coordinate
    members: Tuple[Placemark, ...]
    radius_km: float = Field(0.0, ge=0)

    @property
    def size(self) -> int:
        return len(self.members)


class RouteAnalysis(BaseModel):
    """
    Distance and extent of a LineString placemark.

    Attributes:
        id: Id of the source placemark
        name: Name of the source placemark
        total_distance_km: Sum of great-circle legs between consecutive waypoints
        coordinates: Route waypoints
        waypoint_count: Number of waypoints
        bounds: Bounding box of the waypoints
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    total_distance_km: float = Field(..., ge=0)
    coordinates: Tuple[Coordinate, ...]
    waypoint_count: int = Field(..., ge=0)
    bounds: BoundingBox


class LocationStats(BaseModel):
    """
    Aggregate statistics for all placemarks of a document.

    Attributes:
        total_placemarks: Number of placemarks in the flattened tree
        point_count: Number of Point placemarks
        line_string_count: Number of LineString placemarks
        polygon_count: Number of Polygon placemarks
        average_coordinate: Mean of every folded coordinate (vertex weighted)
        bounds: Bounding box of every folded coordinate
        clusters: Point clusters, largest first
        routes: Route analyses, longest first
    """

    model_config = ConfigDict(frozen=True)

    total_placemarks: int = 0
    point_count: int = 0
    line_string_count: int = 0
    polygon_count: int = 0
    average_coordinate: Coordinate = Field(
        default_factory=lambda: Coordinate(lat=0.0, lng=0.0)
    )
    bounds: BoundingBox = Field(default_factory=BoundingBox.empty)
    clusters: Tuple[LocationCluster, ...] = ()
    routes: Tuple[RouteAnalysis, ...] = ()


class ArchiveAnalysisResponse(BaseModel):
    """
    Response model pairing a parsed document with its statistics.
    """

    document: ArchiveDocument
    stats: LocationStats
