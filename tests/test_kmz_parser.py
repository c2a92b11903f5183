"""
Tests for KMZ archive parsing.

Tests cover:
- Main KML entry selection
- Archive, missing markup and malformed markup failures
- Archive size limit
- File listing
- Tagged parse results
"""

import pytest

from kmzlens.core.analytics import flatten
from kmzlens.core.errors import ArchiveError, MalformedMarkupError, NoMarkupFoundError
from kmzlens.core.parsers import KMZParser, parse_archive, parse_kmz_file, select_main_kml

OTHER_KML = (
    '<kml xmlns="http://www.opengis.net/kml/2.2">'
    "<Document><name>Other</name></Document></kml>"
)


class TestSelectMainKml:
    """Tests for choosing the KML entry to parse."""

    def test_doc_kml_preferred(self):
        assert select_main_kml(["a.kml", "doc.kml", "b.kml"]) == "doc.kml"

    def test_first_kml_in_archive_order(self):
        assert select_main_kml(["readme.txt", "layers/b.kml", "a.kml"]) == "layers/b.kml"

    def test_extension_case_insensitive(self):
        assert select_main_kml(["PLACES.KML"]) == "PLACES.KML"

    def test_nested_doc_kml_is_not_exact_match(self):
        assert select_main_kml(["a.kml", "files/doc.kml"]) == "a.kml"

    def test_no_kml(self):
        assert select_main_kml(["readme.txt", "icon.png"]) is None
        assert select_main_kml([]) is None


class TestKMZParser:
    """Tests for KMZParser."""

    def test_parse_sample_archive(self, sample_kmz):
        document = KMZParser().parse(sample_kmz)

        assert document.name == "My Saved Places"
        assert document.source_entry == "doc.kml"
        assert len(document.root_folders) == 2

    def test_doc_kml_wins_over_earlier_entry(self, make_kmz, sample_kml):
        data = make_kmz({"other.kml": OTHER_KML, "doc.kml": sample_kml})

        document = KMZParser().parse(data)

        assert document.name == "My Saved Places"

    def test_first_kml_used_without_doc_kml(self, make_kmz, sample_kml):
        data = make_kmz({"notes.txt": "hello", "places.kml": OTHER_KML, "z.kml": sample_kml})

        document = KMZParser().parse(data)

        assert document.name == "Other"
        assert document.source_entry == "places.kml"

    def test_directory_entries_skipped(self, make_kmz):
        data = make_kmz({"layers.kml/": b"", "layers.kml/doc.kml": OTHER_KML})

        document = KMZParser().parse(data)

        assert document.source_entry == "layers.kml/doc.kml"

    def test_garbage_bytes(self):
        """Test bytes that are not a ZIP archive."""
        with pytest.raises(ArchiveError) as exc_info:
            KMZParser().parse(b"this is definitely not a zip archive")

        assert exc_info.value.error_code == "ARCHIVE_ERROR"
        assert exc_info.value.status_code == 422

    def test_empty_bytes(self):
        with pytest.raises(ArchiveError):
            KMZParser().parse(b"")

    def test_archive_without_kml(self, make_kmz):
        data = make_kmz({"readme.txt": "no markup here", "icon.png": b"\x89PNG"})

        with pytest.raises(NoMarkupFoundError) as exc_info:
            KMZParser().parse(data)

        assert exc_info.value.error_code == "NO_MARKUP_FOUND"
        assert exc_info.value.details["entries"] == ["readme.txt", "icon.png"]

    def test_empty_archive(self, make_kmz):
        with pytest.raises(NoMarkupFoundError):
            KMZParser().parse(make_kmz({}))

    def test_malformed_kml(self, make_kmz):
        data = make_kmz({"doc.kml": "<kml><Document></kml>"})

        with pytest.raises(MalformedMarkupError):
            KMZParser().parse(data)

    def test_archive_too_large(self, sample_kmz):
        parser = KMZParser(max_archive_size_bytes=len(sample_kmz) - 1)

        with pytest.raises(ArchiveError) as exc_info:
            parser.parse(sample_kmz)

        assert "too large" in exc_info.value.message
        assert exc_info.value.details["archive_size"] == len(sample_kmz)

    def test_archive_at_size_limit(self, sample_kmz):
        parser = KMZParser(max_archive_size_bytes=len(sample_kmz))

        assert parser.parse(sample_kmz).name == "My Saved Places"

    def test_reparse_is_deterministic(self, sample_kmz):
        """Test parsing the same bytes twice gives the same names, geometries and order."""
        first = KMZParser().parse(sample_kmz)
        second = KMZParser().parse(sample_kmz)

        assert first.name == second.name
        assert [f.name for f in first.root_folders] == [f.name for f in second.root_folders]
        assert [(p.name, p.geometry) for p in flatten(first)] == [
            (p.name, p.geometry) for p in flatten(second)
        ]

    def test_parse_kmz_file(self, tmp_path, sample_kmz):
        kmz_path = tmp_path / "places.kmz"
        kmz_path.write_bytes(sample_kmz)

        document = parse_kmz_file(kmz_path)

        assert document.name == "My Saved Places"


class TestListContents:
    """Tests for listing archive entries."""

    def test_list_contents(self, make_kmz, sample_kml):
        data = make_kmz(
            {
                "doc.kml": sample_kml,
                "images/": b"",
                "images/photo.JPG": b"jpeg-bytes",
                "notes.txt": "hello",
            }
        )

        contents = KMZParser().list_contents(data)

        assert contents["total_files"] == 3
        assert [f["name"] for f in contents["kml_files"]] == ["doc.kml"]
        assert contents["image_files"] == [{"name": "images/photo.JPG", "size": 10}]
        assert contents["other_files"] == [{"name": "notes.txt", "size": 5}]
        assert contents["total_size"] == len(sample_kml.encode("utf-8")) + 10 + 5

    def test_list_contents_invalid_archive(self):
        with pytest.raises(ArchiveError):
            KMZParser().list_contents(b"not a zip")


class TestParseArchive:
    """Tests for the tagged parse result."""

    def test_success(self, sample_kmz):
        result = parse_archive(sample_kmz)

        assert result.success
        assert result.document is not None
        assert result.document.name == "My Saved Places"
        assert result.error is None

    @pytest.mark.parametrize(
        "entries, error_code",
        [
            ({"readme.txt": "x"}, "NO_MARKUP_FOUND"),
            ({"doc.kml": "<kml><unclosed></kml>"}, "MALFORMED_MARKUP"),
        ],
    )
    def test_failures(self, make_kmz, entries, error_code):
        result = parse_archive(make_kmz(entries))

        assert not result.success
        assert result.document is None
        assert result.error_code == error_code
        assert result.error.startswith("Failed to parse KMZ file:")

    def test_invalid_archive(self):
        result = parse_archive(b"\x00\x01\x02")

        assert not result.success
        assert result.error_code == "ARCHIVE_ERROR"

    def test_size_limit(self, sample_kmz):
        result = parse_archive(sample_kmz, max_archive_size_bytes=16)

        assert result.error_code == "ARCHIVE_ERROR"
