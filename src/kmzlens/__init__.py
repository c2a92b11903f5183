"""
kmzlens - KMZ placemark extraction and location analytics.

This package parses KMZ archives into a typed folder/placemark tree and derives
location statistics, proximity clusters, route distances and GeoJSON exports
from the parsed data.
"""

__version__ = "0.1.0"

from kmzlens.core.analytics import analyze, flatten  # noqa: E402
from kmzlens.core.export import to_feature_collection  # noqa: E402
from kmzlens.core.parsers import parse_archive  # noqa: E402

__all__ = [
    "__version__",
    "analyze",
    "flatten",
    "parse_archive",
    "to_feature_collection",
]
