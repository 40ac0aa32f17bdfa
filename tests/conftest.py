"""
Shared fixtures: sample invoice XML and PDFs built with pypdf.
"""

from pathlib import Path

import pytest

from .samples import CII_XML, write_pdf


@pytest.fixture
def cii_xml() -> bytes:
    return CII_XML


@pytest.fixture
def zugferd_pdf(tmp_path) -> Path:
    """PDF with a ZUGFeRD 2.x attachment under its canonical name."""
    return write_pdf(tmp_path / "invoice.pdf", {"zugferd-invoice.xml": CII_XML})


@pytest.fixture
def empty_pdf(tmp_path) -> Path:
    """PDF without any embedded files."""
    return write_pdf(tmp_path / "empty.pdf")


@pytest.fixture
def garbage_file(tmp_path) -> Path:
    """File with a .pdf name that is neither a PDF nor contains XML."""
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"this is not a pdf at all")
    return path
