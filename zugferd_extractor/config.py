"""
Configuration constants and enums for the ZUGFeRD XML Extractor.
"""

import logging
import os
import sys
from enum import Enum
from typing import Final, Optional

# ============================================================================
# Canonical Attachment Names
# ============================================================================

# Standard names under which invoice XML is embedded, highest priority first
KNOWN_XML_FILENAMES: Final[tuple[str, ...]] = (
    "ZUGFeRD-invoice.xml",  # ZUGFeRD 1.0
    "zugferd-invoice.xml",  # ZUGFeRD 2.0/2.1
    "factur-x.xml",         # Factur-X
    "xrechnung.xml",        # XRechnung
    "cii.xml",              # Cross Industry Invoice
)

# Name used by the byte scan when the content gives no format hint
FALLBACK_XML_FILENAME: Final[str] = "invoice.xml"

# ============================================================================
# Classifier Indicators
# ============================================================================

# Lower-case substrings; any single match marks content as invoice XML
INVOICE_INDICATORS: Final[tuple[str, ...]] = (
    "crossindustrydocument",
    "crossindustryinvoice",
    "urn:ferd:",
    "urn:cen.eu:en16931",
    "zugferd",
    "factur-x",
    "xrechnung",
    "rsm:crossindustrydocument",
)

# Case-sensitive markers for the structural check
ROOT_ELEMENTS: Final[tuple[str, ...]] = (
    "CrossIndustryDocument",
    "CrossIndustryInvoice",
)

NAMESPACE_URIS: Final[tuple[str, ...]] = (
    "urn:ferd:",
    "urn:cen.eu:en16931",
)

ZUGFERD_V1_NAMESPACE: Final[str] = "urn:ferd:pdfa:crossindustrydocument:invoice:1p0"

# ============================================================================
# Byte Scan Markers
# ============================================================================

XML_START_MARKERS: Final[tuple[bytes, ...]] = (
    b'<?xml version="1.0"',
    b"<rsm:CrossIndustryDocument",
    b"<rsm:CrossIndustryInvoice",
)

XML_END_MARKERS: Final[tuple[bytes, ...]] = (
    b"</rsm:CrossIndustryDocument>",
    b"</rsm:CrossIndustryInvoice>",
    b"</CrossIndustryDocument>",
    b"</CrossIndustryInvoice>",
)

# ============================================================================
# Error Kinds and Stages
# ============================================================================

class ErrorKind(str, Enum):
    """Categories of extraction failures."""
    CONTAINER_UNREADABLE = "container_unreadable"
    NO_ATTACHMENTS = "no_attachments"
    NO_INVOICE_CANDIDATE = "no_invoice_candidate"
    OUTPUT_WRITE_FAILED = "output_write_failed"
    INPUT_PATTERN_EMPTY = "input_pattern_empty"


class Stage(str, Enum):
    """Top-level stages of a single-document extraction."""
    ATTACHMENTS = "attachments"
    EMPTY = "empty"
    DISCOVERY = "discovery"
    WRITE = "write"


# ============================================================================
# Runtime Configuration
# ============================================================================

def _default_workers() -> int:
    value = os.getenv("ZUGFERD_WORKERS")
    if value and value.isdigit() and int(value) > 0:
        return int(value)
    return os.cpu_count() or 1


DEFAULT_WORKERS: Final[int] = _default_workers()

# Parent directory for scratch directories (None = system temp dir)
SCRATCH_DIR: Final[Optional[str]] = os.getenv("ZUGFERD_TMP_DIR") or None

# ============================================================================
# Logging Configuration
# ============================================================================

LOG_LEVEL: Final[str] = os.getenv("LOG_LEVEL", "WARNING")

def setup_logging() -> logging.Logger:
    """Configure and return the application logger."""
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.WARNING),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )
    return logging.getLogger("zugferd_extractor")


def set_verbose(verbose: bool) -> None:
    """Switch the package logger between verbose diagnostics and quiet mode."""
    logger.setLevel(logging.DEBUG if verbose else getattr(logging, LOG_LEVEL.upper(), logging.WARNING))


logger = setup_logging()
