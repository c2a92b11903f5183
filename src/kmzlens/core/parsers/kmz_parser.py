"""
KMZ parsing module.

Opens a KMZ (zipped KML) archive held in memory, selects its main KML entry and
parses it into an ArchiveDocument.
"""

import io
import logging
import zipfile
import zlib
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from kmzlens.core.config import settings
from kmzlens.core.errors import ArchiveError, NoMarkupFoundError, ParseError
from kmzlens.models.archive import ArchiveDocument, ParseResult

from .kml_parser import KMLParser

logger = logging.getLogger(__name__)

MAIN_KML_NAME = "doc.kml"
KML_EXTENSION = ".kml"
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".bmp"}

# Errors zipfile and zlib raise for corrupt, truncated or encrypted archives
_ARCHIVE_READ_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    NotImplementedError,
    RuntimeError,
)


def select_main_kml(names: List[str]) -> Optional[str]:
    """
    Choose the main KML entry of an archive.

    Priority:
    1. An entry named exactly doc.kml (KML convention)
    2. The first entry, in archive order, ending with .kml

    Args:
        names: Archive entry names in archive order

    Returns:
        Selected entry name, or None if the archive has no KML entry
    """
    if MAIN_KML_NAME in names:
        return MAIN_KML_NAME

    for name in names:
        if name.lower().endswith(KML_EXTENSION):
            logger.info(f"No doc.kml found, using first KML file: {name}")
            return name

    return None


class KMZParser:
    """
    Parse KMZ archives by extracting and parsing the contained KML.

    The whole archive is held and parsed in memory.
    """

    def __init__(self, max_archive_size_bytes: Optional[int] = None) -> None:
        """
        Initialize KMZ parser.

        Args:
            max_archive_size_bytes: Largest archive accepted, defaults to the
                configured max_archive_size_mb
        """
        self.max_archive_size_bytes = (
            max_archive_size_bytes
            if max_archive_size_bytes is not None
            else settings.max_archive_size_bytes
        )

    def parse(self, data: bytes) -> ArchiveDocument:
        """
        Parse KMZ archive bytes.

        Args:
            data: Complete KMZ archive content

        Returns:
            ArchiveDocument parsed from the main KML entry

        Raises:
            ArchiveError: If the bytes cannot be opened as a ZIP archive
            NoMarkupFoundError: If the archive contains no .kml entry
            MalformedMarkupError: If the KML entry is not well-formed XML
        """
        entry_name, kml_content = self._extract_main_kml(data)
        return KMLParser().parse(kml_content, source_entry=entry_name)

    def _open_archive(self, data: bytes) -> zipfile.ZipFile:
        if len(data) > self.max_archive_size_bytes:
            raise ArchiveError(
                f"KMZ file too large: {len(data)} bytes "
                f"(max {self.max_archive_size_bytes} bytes)",
                details={"archive_size": len(data)},
            )

        try:
            return zipfile.ZipFile(io.BytesIO(data), "r")
        except _ARCHIVE_READ_ERRORS as e:
            logger.warning(f"Invalid ZIP file: {e}")
            raise ArchiveError(f"Failed to open KMZ archive: {e}") from e

    def _extract_main_kml(self, data: bytes) -> Tuple[str, bytes]:
        with self._open_archive(data) as zf:
            names = [info.filename for info in zf.infolist() if not info.is_dir()]
            main_kml = select_main_kml(names)
            if main_kml is None:
                logger.warning("No KML files found in KMZ archive")
                raise NoMarkupFoundError(details={"entries": names})

            logger.info(f"Extracting KML file: {main_kml}")
            try:
                return main_kml, zf.read(main_kml)
            except _ARCHIVE_READ_ERRORS as e:
                logger.warning(f"Failed to read {main_kml} from archive: {e}")
                raise ArchiveError(
                    f"Failed to read {main_kml} from KMZ archive: {e}"
                ) from e

    def list_contents(self, data: bytes) -> Dict[str, Any]:
        """
        List all files in a KMZ archive without parsing them.

        Args:
            data: Complete KMZ archive content

        Returns:
            Dictionary with KML, image and other entries and their sizes

        Raises:
            ArchiveError: If the bytes cannot be opened as a ZIP archive
        """
        contents: Dict[str, Any] = {
            "kml_files": [],
            "image_files": [],
            "other_files": [],
            "total_files": 0,
            "total_size": 0,
        }

        with self._open_archive(data) as zf:
            for file_info in zf.infolist():
                if file_info.is_dir():
                    continue

                filename = file_info.filename
                file_size = file_info.file_size
                extension = Path(filename).suffix.lower()

                contents["total_files"] += 1
                contents["total_size"] += file_size

                entry = {"name": filename, "size": file_size}
                if extension == KML_EXTENSION:
                    contents["kml_files"].append(entry)
                elif extension in IMAGE_EXTENSIONS:
                    contents["image_files"].append(entry)
                else:
                    contents["other_files"].append(entry)

        return contents


def parse_archive(
    data: bytes, max_archive_size_bytes: Optional[int] = None
) -> ParseResult:
    """
    Parse KMZ archive bytes into a tagged result.

    Archive, missing-markup and malformed-markup failures are reported in the
    result instead of being raised.

    Args:
        data: Complete KMZ archive content
        max_archive_size_bytes: Largest archive accepted

    Returns:
        ParseResult with the document on success, or the error message and code
    """
    try:
        document = KMZParser(max_archive_size_bytes=max_archive_size_bytes).parse(data)
    except ParseError as e:
        logger.error(f"Failed to parse KMZ: {e}")
        return ParseResult.failure(f"Failed to parse KMZ file: {e.message}", e.error_code)

    return ParseResult.ok(document)


def parse_kmz_file(file_path: Union[str, Path]) -> ArchiveDocument:
    """
    Convenience function to parse a KMZ file from disk.

    Args:
        file_path: Path to KMZ file

    Returns:
        ArchiveDocument
    """
    return KMZParser().parse(Path(file_path).read_bytes())
