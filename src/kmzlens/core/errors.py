"""
Exceptions raised by kmzlens.

Every error carries a machine-readable code, the HTTP status the API answers
with, optional technical details and hints for the user. Parse failures share
the ParseError base so callers can handle archive and markup problems alike.
"""

from typing import Any, Dict, List, Optional


class KmzlensException(Exception):
    """
    Base exception for all kmzlens-specific errors.

    Subclasses set `error_code`, `status_code` and `default_suggestions` as
    class attributes; constructor arguments override them per instance.

    Attributes:
        message: User-facing message
        error_code: String identifier for the error type
        status_code: HTTP status code for API responses
        details: Technical details for logging/debugging
        suggestions: Hints for resolving the error
    """

    error_code: str = "INTERNAL_ERROR"
    status_code: int = 500
    default_suggestions: List[str] = []

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        if error_code is not None:
            self.error_code = error_code
        if status_code is not None:
            self.status_code = status_code
        self.details = dict(details) if details else {}
        self.suggestions = list(suggestions or self.default_suggestions)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form used in API error bodies."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "suggestions": self.suggestions,
        }

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(error_code={self.error_code!r}, "
            f"message={self.message!r}, status_code={self.status_code})"
        )


class ValidationError(KmzlensException):
    """Bad request input such as a missing or empty upload (HTTP 400)."""

    error_code = "VALIDATION_ERROR"
    status_code = 400
    default_suggestions = ["Check the input format and try again"]

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        details = dict(details) if details else {}
        if field:
            details["field"] = field
        super().__init__(message, details=details, suggestions=suggestions)


class ParseError(KmzlensException):
    """
    An archive or its KML document could not be parsed (HTTP 422).

    `file_type` ("KMZ" or "KML") and `line_number` are copied into details
    when given.
    """

    error_code = "PARSE_ERROR"
    status_code = 422
    default_suggestions = [
        "Verify the file is a valid KMZ file",
        "Check for XML syntax errors",
        "Try opening the file in Google Earth to validate it",
    ]

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        file_type: Optional[str] = None,
        line_number: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        details = dict(details) if details else {}
        if file_type:
            details["file_type"] = file_type
        if line_number:
            details["line_number"] = line_number
        super().__init__(
            message, error_code=error_code, details=details, suggestions=suggestions
        )


class ArchiveError(ParseError):
    """The input bytes cannot be opened as a ZIP archive, or are too large."""

    error_code = "ARCHIVE_ERROR"
    default_suggestions = [
        "Verify the file is a KMZ (zipped KML) archive",
        "Re-export the file from Google Earth or Google My Maps",
    ]

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, file_type="KMZ", details=details)


class NoMarkupFoundError(ParseError):
    """The archive holds no .kml entry."""

    error_code = "NO_MARKUP_FOUND"
    default_suggestions = ["Make sure the archive contains a doc.kml file"]

    def __init__(
        self,
        message: str = "No KML file found in KMZ archive",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, file_type="KMZ", details=details)


class MalformedMarkupError(ParseError):
    """The selected KML entry is not well-formed XML."""

    error_code = "MALFORMED_MARKUP"
    default_suggestions = [
        "Verify the KML file is well-formed XML",
        "Check for unclosed tags or invalid characters",
    ]

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message, file_type="KML", line_number=line_number, details=details
        )
