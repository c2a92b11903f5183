"""
KMZ/KML parsing module for kmzlens.

Turns a KMZ archive into a typed ArchiveDocument tree of folders and
placemarks.
"""

from .coordinates import parse_coordinate_group, parse_kml_coordinates
from .kml_parser import KMLParser, parse_kml_string
from .kmz_parser import KMZParser, parse_archive, parse_kmz_file, select_main_kml

__all__ = [
    # Coordinates
    "parse_coordinate_group",
    "parse_kml_coordinates",
    # KML
    "KMLParser",
    "parse_kml_string",
    # KMZ
    "KMZParser",
    "parse_archive",
    "parse_kmz_file",
    "select_main_kml",
]
