"""
KML parsing module.

Builds the typed folder/placemark tree of an ArchiveDocument from KML markup.
"""

import logging
import uuid
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional, Tuple, Union

from kmzlens.core.errors import MalformedMarkupError
from kmzlens.models.archive import (
    ArchiveDocument,
    Coordinate,
    Folder,
    Geometry,
    LineStringGeometry,
    Placemark,
    PointGeometry,
    PolygonGeometry,
)
from kmzlens.utils.logging import PerformanceTimer

from .coordinates import parse_kml_coordinates

logger = logging.getLogger(__name__)

# KML namespace
KML_NS = "{http://www.opengis.net/kml/2.2}"

DEFAULT_DOCUMENT_NAME = "Untitled"
DEFAULT_FOLDER_NAME = "Untitled Folder"
DEFAULT_PLACEMARK_NAME = "Untitled Placemark"


def generate_placemark_id() -> str:
    """Generate an id for a placemark that has none in the source."""
    return f"placemark_{uuid.uuid4().hex}"


class KMLParser:
    """
    Parse KML markup into an ArchiveDocument.

    Handles:
    - Document and Folder hierarchy, in document order
    - Point, LineString and Polygon placemarks
    - Extended data
    - Style references

    Placemarks without a usable geometry and malformed coordinate groups are
    dropped; only markup that is not well-formed XML fails the parse.
    """

    def __init__(self) -> None:
        self.namespace: str = KML_NS

    def parse(
        self, kml_content: Union[str, bytes], source_entry: Optional[str] = None
    ) -> ArchiveDocument:
        """
        Parse KML content.

        Args:
            kml_content: KML content as string or bytes
            source_entry: Archive entry name the content was read from

        Returns:
            ArchiveDocument with the parsed tree

        Raises:
            MalformedMarkupError: If the content is not well-formed XML
        """
        kml_bytes = (
            kml_content.encode("utf-8") if isinstance(kml_content, str) else kml_content
        )

        with PerformanceTimer("kml_parse", log_level=logging.DEBUG):
            try:
                root = ET.fromstring(kml_bytes)
            except ET.ParseError as e:
                line_number = e.position[0] if e.position else None
                logger.warning(f"Malformed KML markup: {e}")
                raise MalformedMarkupError(
                    f"KML document is not well-formed XML: {e}",
                    line_number=line_number,
                ) from e

            self.namespace = root.tag.split("}")[0] + "}" if "}" in root.tag else ""

            container = self._find_root_container(root)
            placemarks, folders = self._parse_children(container)

            document = ArchiveDocument(
                name=self._child_text(container, "name") or DEFAULT_DOCUMENT_NAME,
                description=self._child_text(container, "description"),
                root_placemarks=placemarks,
                root_folders=folders,
                source_entry=source_entry,
            )

        logger.info(
            f"Parsed KML document '{document.name}': "
            f"{len(document.root_placemarks)} root placemarks, "
            f"{len(document.root_folders)} root folders"
        )
        return document

    def _find_root_container(self, root: ET.Element) -> ET.Element:
        """
        Locate the logical root: first Document, else first Folder, else the root.
        """
        for tag in ("Document", "Folder"):
            element = next(root.iter(f"{self.namespace}{tag}"), None)
            if element is not None:
                return element
        return root

    def _parse_children(
        self, element: ET.Element
    ) -> Tuple[Tuple[Placemark, ...], Tuple[Folder, ...]]:
        """
        Parse direct-child Placemark and Folder elements of a container.
        """
        placemarks: List[Placemark] = []
        for placemark_elem in element.findall(f"{self.namespace}Placemark"):
            try:
                placemark = self.parse_placemark(placemark_elem)
            except ValueError as e:
                logger.warning(f"Failed to parse placemark: {e}")
                continue
            if placemark is not None:
                placemarks.append(placemark)

        folders = tuple(
            self._parse_folder(folder_elem)
            for folder_elem in element.findall(f"{self.namespace}Folder")
        )
        return tuple(placemarks), folders

    def _parse_folder(self, element: ET.Element) -> Folder:
        placemarks, subfolders = self._parse_children(element)
        return Folder(
            name=self._child_text(element, "name") or DEFAULT_FOLDER_NAME,
            description=self._child_text(element, "description"),
            placemarks=placemarks,
            subfolders=subfolders,
        )

    def parse_placemark(self, element: ET.Element) -> Optional[Placemark]:
        """
        Parse a single Placemark element.

        Args:
            element: Placemark XML element

        Returns:
            Placemark, or None if no Point, LineString or Polygon with at least
            one valid coordinate was found
        """
        name = self._child_text(element, "name") or DEFAULT_PLACEMARK_NAME

        geometry = self._parse_geometry(element)
        if geometry is None:
            logger.warning(f"No valid geometry found for placemark: {name}")
            return None

        return Placemark(
            id=element.get("id") or generate_placemark_id(),
            name=name,
            description=self._child_text(element, "description"),
            style_ref=self._child_text(element, "styleUrl"),
            geometry=geometry,
            extra_properties=self._parse_extended_data(element),
        )

    def _parse_geometry(self, element: ET.Element) -> Optional[Geometry]:
        """
        Extract geometry in fixed priority: Point, then LineString, then Polygon.

        Geometries are searched among all descendants so the first member of a
        MultiGeometry is found. A type whose coordinates yield nothing falls
        through to the next type.
        """
        point_elem = element.find(f".//{self.namespace}Point")
        if point_elem is not None:
            coords = self._parse_coordinates_of(point_elem)
            if coords:
                return PointGeometry(coordinate=coords[0])

        line_elem = element.find(f".//{self.namespace}LineString")
        if line_elem is not None:
            coords = self._parse_coordinates_of(line_elem)
            if coords:
                return LineStringGeometry(coordinates=tuple(coords))

        polygon_elem = element.find(f".//{self.namespace}Polygon")
        if polygon_elem is not None:
            ns = self.namespace
            outer_coords = polygon_elem.find(
                f"{ns}outerBoundaryIs/{ns}LinearRing/{ns}coordinates"
            )
            coords = parse_kml_coordinates(self._text(outer_coords))
            if coords:
                # Inner boundaries (holes) are not extracted
                return PolygonGeometry(rings=(tuple(coords),))

        return None

    def _parse_coordinates_of(self, element: ET.Element) -> List[Coordinate]:
        return parse_kml_coordinates(
            self._text(element.find(f"{self.namespace}coordinates"))
        )

    def _parse_extended_data(self, element: ET.Element) -> Dict[str, Any]:
        """
        Parse ExtendedData Data and SchemaData values into a dictionary.
        """
        properties: Dict[str, Any] = {}
        extended_data = element.find(f"{self.namespace}ExtendedData")
        if extended_data is None:
            return properties

        for data in extended_data.findall(f"{self.namespace}Data"):
            name = data.get("name")
            value = self._child_text(data, "value")
            if name and value is not None:
                properties[name] = value

        for schema_data in extended_data.findall(f"{self.namespace}SchemaData"):
            for simple_data in schema_data.findall(f"{self.namespace}SimpleData"):
                name = simple_data.get("name")
                value = self._text(simple_data)
                if name and value is not None:
                    properties[name] = value

        return properties

    def _child_text(self, element: ET.Element, tag: str) -> Optional[str]:
        return self._text(element.find(f"{self.namespace}{tag}"))

    @staticmethod
    def _text(element: Optional[ET.Element]) -> Optional[str]:
        """Trimmed text content of an element; None when absent or blank."""
        if element is None:
            return None
        content = "".join(element.itertext()).strip()
        return content or None


def parse_kml_string(
    kml_content: Union[str, bytes], source_entry: Optional[str] = None
) -> ArchiveDocument:
    """
    Convenience function to parse KML content.

    Args:
        kml_content: KML content as string or bytes
        source_entry: Archive entry name the content was read from

    Returns:
        ArchiveDocument
    """
    return KMLParser().parse(kml_content, source_entry=source_entry)
