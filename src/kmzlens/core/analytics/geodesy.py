"""
Great-circle distance, centroid and bounding box helpers.

Distances use the haversine formula on a sphere of radius 6371 km. Centroids
are plain means of latitude/longitude degrees. Antimeridian crossing is not
handled.
"""

import math
from typing import Iterable, Sequence

import numpy as np

from kmzlens.models.analytics import BoundingBox
from kmzlens.models.archive import Coordinate

EARTH_RADIUS_KM = 6371.0


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    """
    Great-circle distance between two coordinates.

    Args:
        a: First coordinate
        b: Second coordinate

    Returns:
        Distance in kilometers; symmetric in its arguments and 0 for equal points
    """
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)

    h = math.sin(d_lat / 2) ** 2 + math.cos(math.radians(a.lat)) * math.cos(
        math.radians(b.lat)
    ) * math.sin(d_lng / 2) ** 2
    h = min(1.0, h)

    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def haversine_km_array(
    origin: Coordinate, lats: np.ndarray, lngs: np.ndarray
) -> np.ndarray:
    """
    Great-circle distances from one coordinate to many.

    Args:
        origin: Coordinate to measure from
        lats: Latitudes in degrees
        lngs: Longitudes in degrees, same shape as lats

    Returns:
        Array of distances in kilometers
    """
    d_lat = np.radians(lats - origin.lat)
    d_lng = np.radians(lngs - origin.lng)

    h = np.sin(d_lat / 2) ** 2 + math.cos(math.radians(origin.lat)) * np.cos(
        np.radians(lats)
    ) * np.sin(d_lng / 2) ** 2
    h = np.clip(h, 0.0, 1.0)

    return EARTH_RADIUS_KM * 2 * np.arctan2(np.sqrt(h), np.sqrt(1 - h))


def route_distance_km(coordinates: Sequence[Coordinate]) -> float:
    """
    Total length of a path as the sum of its consecutive legs.
    """
    total = 0.0
    for previous, current in zip(coordinates, coordinates[1:]):
        total += haversine_km(previous, current)
    return total


def calculate_centroid(coordinates: Sequence[Coordinate]) -> Coordinate:
    """
    Arithmetic mean of latitudes and longitudes.

    Raises:
        ValueError: If no coordinates are given
    """
    if not coordinates:
        raise ValueError("Cannot compute the centroid of zero coordinates")

    count = len(coordinates)
    return Coordinate(
        lat=sum(c.lat for c in coordinates) / count,
        lng=sum(c.lng for c in coordinates) / count,
    )


class CoordinateAccumulator:
    """
    Running sum and bounds over folded coordinates.

    Starts from the empty (inverted) bounding box and a zero average.
    """

    __slots__ = ("lat_sum", "lng_sum", "count", "north", "south", "east", "west")

    def __init__(self) -> None:
        empty = BoundingBox.empty()
        self.lat_sum = 0.0
        self.lng_sum = 0.0
        self.count = 0
        self.north = empty.north
        self.south = empty.south
        self.east = empty.east
        self.west = empty.west

    def add(self, coordinate: Coordinate) -> None:
        self.lat_sum += coordinate.lat
        self.lng_sum += coordinate.lng
        self.count += 1
        self.north = max(self.north, coordinate.lat)
        self.south = min(self.south, coordinate.lat)
        self.east = max(self.east, coordinate.lng)
        self.west = min(self.west, coordinate.lng)

    def add_all(self, coordinates: Iterable[Coordinate]) -> None:
        for coordinate in coordinates:
            self.add(coordinate)

    @property
    def average(self) -> Coordinate:
        if self.count == 0:
            return Coordinate(lat=0.0, lng=0.0)
        return Coordinate(lat=self.lat_sum / self.count, lng=self.lng_sum / self.count)

    @property
    def bounds(self) -> BoundingBox:
        return BoundingBox(
            north=self.north, south=self.south, east=self.east, west=self.west
        )


def calculate_bounds(coordinates: Iterable[Coordinate]) -> BoundingBox:
    """
    Bounding box of the given coordinates; the empty box if there are none.
    """
    accumulator = CoordinateAccumulator()
    accumulator.add_all(coordinates)
    return accumulator.bounds
