"""
Response bodies for API errors.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class ErrorDetail(BaseModel):
    """One field-level problem of a rejected request."""

    field: Optional[str] = Field(None, description="Dotted location of the field")
    message: str
    code: Optional[str] = Field(None, description="Validation error type")


class ErrorResponse(BaseModel):
    """
    Body returned for every failed request.

    Attributes:
        error_code: Machine-readable code such as ARCHIVE_ERROR
        message: Human-readable message
        details: Technical details (entry names, line numbers, sizes)
        timestamp: When the error occurred, UTC
        request_id: Correlation ID of the request
        suggestions: Hints for fixing the upload
        errors: Field-level problems of a rejected request
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error_code": "NO_MARKUP_FOUND",
                "message": "No KML file found in KMZ archive",
                "details": {"file_type": "KMZ", "entries": ["readme.txt"]},
                "timestamp": "2025-11-10T15:30:00+00:00",
                "request_id": "550e8400-e29b-41d4-a716-446655440000",
                "suggestions": ["Make sure the archive contains a doc.kml file"],
            }
        }
    )

    error_code: str = Field(
        ..., examples=["ARCHIVE_ERROR", "NO_MARKUP_FOUND", "MALFORMED_MARKUP"]
    )
    message: str
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    request_id: Optional[str] = None
    suggestions: Optional[List[str]] = None
    errors: Optional[List[ErrorDetail]] = None

    @field_serializer("timestamp")
    def serialize_timestamp(self, timestamp: datetime) -> str:
        return timestamp.isoformat()
