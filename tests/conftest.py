"""
Shared fixtures for kmzlens tests.
"""

import io
import zipfile
from typing import Callable, Dict, Union

import pytest

SAMPLE_KML = """<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2">
  <Document>
    <name>My Saved Places</name>
    <description>Places from a weekend trip</description>
    <Placemark id="trailhead">
      <name>Trailhead</name>
      <styleUrl>#icon-parking</styleUrl>
      <ExtendedData>
        <Data name="category"><value>parking</value></Data>
      </ExtendedData>
      <Point><coordinates>-122.0822,37.4222,0</coordinates></Point>
    </Placemark>
    <Folder>
      <name>Hikes</name>
      <Placemark id="ridge-route">
        <name>Ridge Route</name>
        <LineString>
          <coordinates>
            -122.0822,37.4222,0
            -122.0850,37.4250,0
            -122.0900,37.4300,0
          </coordinates>
        </LineString>
      </Placemark>
      <Folder>
        <name>Viewpoints</name>
        <Placemark id="overlook">
          <name>Overlook</name>
          <Point><coordinates>-122.0825,37.4225</coordinates></Point>
        </Placemark>
      </Folder>
    </Folder>
    <Folder>
      <Placemark id="meadow">
        <name>Meadow</name>
        <Polygon>
          <outerBoundaryIs>
            <LinearRing>
              <coordinates>-122.1,37.4 -122.1,37.5 -122.0,37.5 -122.1,37.4</coordinates>
            </LinearRing>
          </outerBoundaryIs>
        </Polygon>
      </Placemark>
    </Folder>
  </Document>
</kml>
"""


def build_kmz(entries: Dict[str, Union[str, bytes]]) -> bytes:
    """Build an in-memory KMZ archive; entries are written in dict order."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def sample_kml() -> str:
    return SAMPLE_KML


@pytest.fixture
def sample_kmz() -> bytes:
    """KMZ archive holding the sample document as doc.kml."""
    return build_kmz({"doc.kml": SAMPLE_KML, "images/icon.png": b"\x89PNG"})


@pytest.fixture
def make_kmz() -> Callable[[Dict[str, Union[str, bytes]]], bytes]:
    return build_kmz
