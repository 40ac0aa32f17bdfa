"""
Tests for the pypdf-backed attachment writer.
"""

from unittest.mock import MagicMock, patch

import pytest

from zugferd_extractor.container import RELAXED, STRICT, extract_attachments, safe_filename
from zugferd_extractor.exceptions import ContainerError

from .samples import CII_XML, write_pdf


class TestSafeFilename:
    """Tests for attachment name sanitising."""

    def test_plain_name_unchanged(self):
        assert safe_filename("factur-x.xml", 0) == "factur-x.xml"

    def test_directory_components_removed(self):
        assert safe_filename("../../etc/zugferd-invoice.xml", 0) == "zugferd-invoice.xml"
        assert safe_filename("C:\\docs\\cii.xml", 0) == "cii.xml"

    def test_reserved_characters_replaced(self):
        assert safe_filename('inv<1>:"x".xml', 0) == "inv_1___x_.xml"

    def test_empty_name_gets_placeholder(self):
        assert safe_filename("", 3) == "attachment-3"
        assert safe_filename("..", 1) == "attachment-1"


class TestExtractAttachments:
    """Tests for writing embedded files to a directory."""

    def test_writes_every_attachment(self, tmp_path):
        pdf = write_pdf(tmp_path / "in.pdf", {
            "factur-x.xml": CII_XML,
            "terms.txt": b"payable within 30 days",
        })
        out = tmp_path / "out"
        out.mkdir()

        written = extract_attachments(pdf, out, STRICT)

        assert sorted(p.name for p in written) == ["factur-x.xml", "terms.txt"]
        assert (out / "factur-x.xml").read_bytes() == CII_XML

    def test_pdf_without_attachments(self, tmp_path):
        pdf = write_pdf(tmp_path / "in.pdf")
        assert extract_attachments(pdf, tmp_path, RELAXED) == []

    def test_unparseable_file_raises_in_strict_mode(self, tmp_path, garbage_file):
        with pytest.raises(ContainerError, match="strict PDF parsing failed"):
            extract_attachments(garbage_file, tmp_path, STRICT)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ContainerError):
            extract_attachments(tmp_path / "missing.pdf", tmp_path, STRICT)


class BrokenStreamAttachments(dict):
    """Attachment mapping whose 'bad.xml' entry fails to decode."""

    def __getitem__(self, key):
        if key == "bad.xml":
            raise ValueError("FlateDecode failed")
        return super().__getitem__(key)


class TestStreamDecoding:
    """Tests for how undecodable attachment streams are handled."""

    def _fake_reader(self):
        reader = MagicMock()
        reader.attachments = BrokenStreamAttachments({
            "bad.xml": [b""],
            "cii.xml": [CII_XML],
        })
        return reader

    def test_strict_mode_fails(self, tmp_path):
        with patch("zugferd_extractor.container.PdfReader", return_value=self._fake_reader()):
            with pytest.raises(ContainerError, match="bad.xml"):
                extract_attachments(tmp_path / "x.pdf", tmp_path, STRICT)

    def test_relaxed_mode_skips_stream(self, tmp_path):
        with patch("zugferd_extractor.container.PdfReader", return_value=self._fake_reader()):
            written = extract_attachments(tmp_path / "x.pdf", tmp_path, RELAXED)

        assert [p.name for p in written] == ["cii.xml"]

    def test_duplicate_streams_get_numbered_names(self, tmp_path):
        reader = MagicMock()
        reader.attachments = {"cii.xml": [CII_XML, b"<second/>"]}
        with patch("zugferd_extractor.container.PdfReader", return_value=reader):
            written = extract_attachments(tmp_path / "x.pdf", tmp_path, STRICT)

        assert [p.name for p in written] == ["cii.xml", "cii-1.xml"]
        assert (tmp_path / "cii-1.xml").read_bytes() == b"<second/>"
