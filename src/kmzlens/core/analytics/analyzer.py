"""
Location analytics over a parsed archive.

Flattens the folder tree, counts geometry types, averages and bounds every
coordinate, clusters point placemarks by proximity and measures routes.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from kmzlens.core.config import settings
from kmzlens.models.analytics import LocationCluster, LocationStats, RouteAnalysis
from kmzlens.models.archive import (
    ArchiveDocument,
    Folder,
    LineStringGeometry,
    Placemark,
    PointGeometry,
    PolygonGeometry,
)
from kmzlens.utils.logging import log_performance

from .geodesy import (
    CoordinateAccumulator,
    calculate_bounds,
    calculate_centroid,
    haversine_km_array,
    route_distance_km,
)

logger = logging.getLogger(__name__)


def flatten(document: ArchiveDocument) -> List[Placemark]:
    """
    All placemarks of a document in depth-first pre-order.

    Root placemarks come first, then each root folder's own placemarks before
    those of its subfolders, recursively.

    Args:
        document: Parsed archive

    Returns:
        Placemarks in document order
    """
    placemarks: List[Placemark] = list(document.root_placemarks)

    def extract_from_folders(folders: Sequence[Folder]) -> None:
        for folder in folders:
            placemarks.extend(folder.placemarks)
            extract_from_folders(folder.subfolders)

    extract_from_folders(document.root_folders)
    return placemarks


def create_location_clusters(
    point_placemarks: Sequence[Placemark], max_distance_km: float = 1.0
) -> List[LocationCluster]:
    """
    Greedy proximity clustering of point placemarks.

    Each placemark not yet assigned seeds a new cluster; every other unassigned
    placemark within max_distance_km of the seed coordinate joins it. Membership
    is always measured from the seed, not from the moving centroid, so a member
    may end up further than max_distance_km from the final center.

    Multi-member clusters are re-centered on the member centroid and their
    radius set to the largest centroid-to-member distance. This is O(n²) in the
    number of points.

    Args:
        point_placemarks: Placemarks with Point geometry, in flatten order
        max_distance_km: Membership threshold in kilometers

    Returns:
        Clusters sorted by descending member count, ties in formation order
    """
    if not point_placemarks:
        return []

    coordinates = [p.geometry.coordinate for p in point_placemarks]
    lats = np.array([c.lat for c in coordinates], dtype=float)
    lngs = np.array([c.lng for c in coordinates], dtype=float)
    assigned = np.zeros(len(point_placemarks), dtype=bool)

    clusters: List[LocationCluster] = []
    for seed_index, seed in enumerate(coordinates):
        if assigned[seed_index]:
            continue

        distances = haversine_km_array(seed, lats, lngs)
        member_mask = ~assigned & (distances <= max_distance_km)
        member_mask[seed_index] = True
        member_indices = np.flatnonzero(member_mask)
        assigned[member_indices] = True

        members = tuple(point_placemarks[i] for i in member_indices)
        center = seed
        radius_km = 0.0
        if len(members) > 1:
            center = calculate_centroid([coordinates[i] for i in member_indices])
            radius_km = float(
                haversine_km_array(
                    center, lats[member_indices], lngs[member_indices]
                ).max()
            )

        clusters.append(
            LocationCluster(
                id=f"cluster_{len(clusters)}",
                center=center,
                members=members,
                radius_km=radius_km,
            )
        )

    return sorted(clusters, key=lambda cluster: cluster.size, reverse=True)


def analyze_routes(route_placemarks: Sequence[Placemark]) -> List[RouteAnalysis]:
    """
    Distance, waypoint count and bounds for each LineString placemark.

    Args:
        route_placemarks: Placemarks with LineString geometry

    Returns:
        Route analyses sorted by descending total distance
    """
    routes = []
    for placemark in route_placemarks:
        coordinates = placemark.geometry.coordinates
        routes.append(
            RouteAnalysis(
                id=placemark.id,
                name=placemark.name,
                total_distance_km=route_distance_km(coordinates),
                coordinates=coordinates,
                waypoint_count=len(coordinates),
                bounds=calculate_bounds(coordinates),
            )
        )

    return sorted(routes, key=lambda route: route.total_distance_km, reverse=True)


@log_performance(log_level=logging.DEBUG)
def analyze(
    document: ArchiveDocument, max_distance_km: Optional[float] = None
) -> LocationStats:
    """
    Compute location statistics for a parsed archive.

    The average coordinate is taken over every folded coordinate rather than
    per placemark, so a line or polygon weighs in proportion to its vertex
    count. Polygons contribute their outer ring only.

    Args:
        document: Parsed archive
        max_distance_km: Clustering threshold, defaults to the configured
            cluster_max_distance_km

    Returns:
        LocationStats; for a document without placemarks all counts are zero,
        the bounds are the empty box and there are no clusters or routes
    """
    if max_distance_km is None:
        max_distance_km = settings.cluster_max_distance_km

    placemarks = flatten(document)
    if not placemarks:
        return LocationStats()

    accumulator = CoordinateAccumulator()
    points: List[Placemark] = []
    lines: List[Placemark] = []
    polygon_count = 0

    for placemark in placemarks:
        geometry = placemark.geometry
        if isinstance(geometry, PointGeometry):
            points.append(placemark)
        elif isinstance(geometry, LineStringGeometry):
            lines.append(placemark)
        elif isinstance(geometry, PolygonGeometry):
            polygon_count += 1
        accumulator.add_all(geometry.iter_coordinates())

    stats = LocationStats(
        total_placemarks=len(placemarks),
        point_count=len(points),
        line_string_count=len(lines),
        polygon_count=polygon_count,
        average_coordinate=accumulator.average,
        bounds=accumulator.bounds,
        clusters=tuple(create_location_clusters(points, max_distance_km)),
        routes=tuple(analyze_routes(lines)),
    )

    logger.info(
        f"Analyzed '{document.name}': {stats.total_placemarks} placemarks, "
        f"{len(stats.clusters)} clusters, {len(stats.routes)} routes"
    )
    return stats
