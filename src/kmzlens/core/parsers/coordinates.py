"""
KML coordinate text parsing.

KML writes positions as whitespace separated `lon,lat[,alt]` groups. Parsing
is lenient: a malformed group is dropped and the remaining groups are kept.
"""

import logging
import math
import re
from typing import List, Optional

from kmzlens.models.archive import Coordinate

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def _parse_float(value: str) -> Optional[float]:
    try:
        number = float(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_coordinate_group(group: str) -> Optional[Coordinate]:
    """
    Parse a single `lon,lat[,alt]` group.

    Args:
        group: Comma separated coordinate group

    Returns:
        Coordinate, or None if longitude or latitude are missing or not numeric

    Examples:
        >>> parse_coordinate_group("-122.08,37.42,10")
        Coordinate(lat=37.42, lng=-122.08, alt=10.0)
    """
    values = group.split(",")
    if len(values) < 2:
        return None

    lng = _parse_float(values[0])
    lat = _parse_float(values[1])
    if lng is None or lat is None:
        return None

    # A bad altitude does not invalidate the position
    alt = _parse_float(values[2]) if len(values) > 2 and values[2] else None

    return Coordinate(lat=lat, lng=lng, alt=alt)


def parse_kml_coordinates(coord_string: Optional[str]) -> List[Coordinate]:
    """
    Parse KML coordinate text into coordinates in source order.

    Args:
        coord_string: Raw text of a KML <coordinates> element

    Returns:
        Parsed coordinates; empty if the text is empty or every group is malformed

    Examples:
        >>> parse_kml_coordinates("-122.08,37.42 notanumber,20 -122.09,37.43")
        [Coordinate(lat=37.42, lng=-122.08, alt=None), Coordinate(lat=37.43, lng=-122.09, alt=None)]
    """
    if not coord_string or not coord_string.strip():
        return []

    coordinates: List[Coordinate] = []
    for group in _WHITESPACE.split(coord_string.strip()):
        if not group:
            continue
        coordinate = parse_coordinate_group(group)
        if coordinate is None:
            logger.debug(f"Dropping malformed coordinate group: {group!r}")
            continue
        coordinates.append(coordinate)

    return coordinates
