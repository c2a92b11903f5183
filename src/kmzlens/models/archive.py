"""
Pydantic models for the parsed KMZ document tree.

A parsed archive is an owned tree: an ArchiveDocument holds root placemarks and
folders, each Folder holds its own placemarks and subfolders. All models are
frozen once built by the parser.
"""

from typing import Annotated, Any, Dict, Iterator, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    """
    A geographic position in degrees.

    Attributes:
        lat: Latitude
        lng: Longitude
        alt: Optional altitude in meters as written in the source
    """

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., description="Latitude in degrees")
    lng: float = Field(..., description="Longitude in degrees")
    alt: Optional[float] = Field(None, description="Altitude in meters")


class PointGeometry(BaseModel):
    """Single-position geometry."""

    model_config = ConfigDict(frozen=True)

    type: Literal["Point"] = "Point"
    coordinate: Coordinate

    def iter_coordinates(self) -> Iterator[Coordinate]:
        yield self.coordinate


class LineStringGeometry(BaseModel):
    """Ordered path of positions."""

    model_config = ConfigDict(frozen=True)

    type: Literal["LineString"] = "LineString"
    coordinates: Tuple[Coordinate, ...]

    def iter_coordinates(self) -> Iterator[Coordinate]:
        return iter(self.coordinates)


class PolygonGeometry(BaseModel):
    """
    Polygon as a sequence of rings.

    The parser only fills rings[0] (the outer boundary); analytics also only
    reads the outer ring.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["Polygon"] = "Polygon"
    rings: Tuple[Tuple[Coordinate, ...], ...]

    @property
    def outer_ring(self) -> Tuple[Coordinate, ...]:
        return self.rings[0] if self.rings else ()

    def iter_coordinates(self) -> Iterator[Coordinate]:
        return iter(self.outer_ring)


Geometry = Annotated[
    Union[PointGeometry, LineStringGeometry, PolygonGeometry],
    Field(discriminator="type"),
]


class Placemark(BaseModel):
    """
    A named geographic feature with exactly one geometry.

    Attributes:
        id: Identifier from the source, or a generated one unique within the process
        name: Placemark name
        description: Placemark description
        style_ref: Style reference (the KML styleUrl text)
        geometry: Point, LineString or Polygon geometry
        extra_properties: ExtendedData values keyed by name
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Placemark identifier")
    name: str = Field(..., description="Placemark name")
    description: Optional[str] = Field(None, description="Placemark description")
    style_ref: Optional[str] = Field(None, description="Style reference")
    geometry: Geometry
    extra_properties: Dict[str, Any] = Field(
        default_factory=dict, description="Additional properties from ExtendedData"
    )

    @property
    def geometry_type(self) -> str:
        return self.geometry.type


class Folder(BaseModel):
    """Named container of placemarks and nested folders."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Folder name")
    description: Optional[str] = Field(None, description="Folder description")
    placemarks: Tuple[Placemark, ...] = ()
    subfolders: Tuple["Folder", ...] = ()


Folder.model_rebuild()


class ArchiveDocument(BaseModel):
    """
    Root of a parsed KMZ archive.

    Attributes:
        name: Document name ("Untitled" when the source has none)
        description: Document description
        root_placemarks: Placemarks directly under the root container
        root_folders: Folders directly under the root container
        source_entry: Archive entry the document was read from
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Document name")
    description: Optional[str] = Field(None, description="Document description")
    root_placemarks: Tuple[Placemark, ...] = ()
    root_folders: Tuple[Folder, ...] = ()
    source_entry: Optional[str] = Field(
        None, description="Name of the archive entry that was parsed"
    )


class ParseResult(BaseModel):
    """
    Tagged outcome of parsing an archive.

    Exactly one of `document` (on success) or `error` (on failure) is set.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    document: Optional[ArchiveDocument] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def ok(cls, document: ArchiveDocument) -> "ParseResult":
        return cls(success=True, document=document)

    @classmethod
    def failure(cls, message: str, error_code: str) -> "ParseResult":
        return cls(success=False, error=message, error_code=error_code)
