"""
Archive parsing, analytics and export API endpoints.

Endpoints are plain `def` functions so FastAPI runs the CPU-bound parsing and
analysis in its thread pool. Nothing is stored between requests.
"""

import logging
from typing import Annotated, Any, Dict, Optional, Union
from urllib.parse import quote

from fastapi import APIRouter, File, Query, UploadFile, status
from fastapi.responses import JSONResponse

from kmzlens.core.analytics import analyze
from kmzlens.core.config import settings
from kmzlens.core.errors import ValidationError
from kmzlens.core.export import GEOJSON_SUFFIX, export_filename, to_feature_collection
from kmzlens.core.parsers import KMZParser
from kmzlens.models.analytics import ArchiveAnalysisResponse
from kmzlens.models.archive import ArchiveDocument
from kmzlens.models.errors import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/archives", tags=["archives"])

ArchiveUpload = Annotated[
    UploadFile,
    File(
        description=(
            "KMZ archive to parse. "
            f"Maximum size: {settings.max_archive_size_mb}MB."
        )
    ),
]

PARSE_RESPONSES: Dict[Union[int, str], Dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Missing or empty upload"},
    422: {"model": ErrorResponse, "description": "Archive or KML could not be parsed"},
}


def _read_archive(file: UploadFile) -> bytes:
    """Read the whole uploaded archive into memory."""
    if not file.filename:
        raise ValidationError("Filename is required", field="file")

    data = file.file.read()
    if not data:
        raise ValidationError("Uploaded file is empty", field="file")

    logger.info(f"Received archive {file.filename} ({len(data)} bytes)")
    return data


def _parse_upload(file: UploadFile) -> ArchiveDocument:
    return KMZParser().parse(_read_archive(file))


@router.post(
    "/parse",
    response_model=ArchiveDocument,
    responses=PARSE_RESPONSES,
    summary="Parse a KMZ archive",
    description="Parse a KMZ archive into its folder and placemark tree.",
)
def parse_archive_endpoint(file: ArchiveUpload) -> ArchiveDocument:
    return _parse_upload(file)


@router.post(
    "/analyze",
    response_model=ArchiveAnalysisResponse,
    responses=PARSE_RESPONSES,
    summary="Parse and analyze a KMZ archive",
    description=(
        "Parse a KMZ archive and compute placemark counts, bounds, point "
        "clusters and route distances."
    ),
)
def analyze_archive_endpoint(
    file: ArchiveUpload,
    max_distance_km: Annotated[
        Optional[float],
        Query(gt=0, description="Clustering distance threshold in kilometers"),
    ] = None,
) -> ArchiveAnalysisResponse:
    """
    Parse an uploaded archive and analyze it.

    Args:
        file: The uploaded KMZ archive (multipart/form-data)
        max_distance_km: Clustering threshold, defaults to the configured value

    Returns:
        The parsed document and its location statistics
    """
    document = _parse_upload(file)
    return ArchiveAnalysisResponse(
        document=document, stats=analyze(document, max_distance_km)
    )


@router.post(
    "/geojson",
    responses={
        200: {"content": {"application/geo+json": {}}},
        **PARSE_RESPONSES,
    },
    summary="Convert a KMZ archive to GeoJSON",
    description="Parse a KMZ archive and return its placemarks as a GeoJSON FeatureCollection.",
)
def geojson_archive_endpoint(file: ArchiveUpload) -> JSONResponse:
    document = _parse_upload(file)
    filename = export_filename(document.name, GEOJSON_SUFFIX)
    return JSONResponse(
        content=to_feature_collection(document),
        media_type="application/geo+json",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )


@router.post(
    "/contents",
    status_code=status.HTTP_200_OK,
    responses=PARSE_RESPONSES,
    summary="List KMZ archive entries",
    description="List the KML, image and other entries of a KMZ archive without parsing them.",
)
def archive_contents_endpoint(file: ArchiveUpload) -> Dict[str, Any]:
    return KMZParser().list_contents(_read_archive(file))
