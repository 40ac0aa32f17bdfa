"""
Attachment extraction strategies.

A PDF's embedded files are read with escalating tolerance:
1. StandardStrategy   - pypdf with strict parsing
2. RelaxedStrategy    - pypdf with lenient parsing and stream decoding
3. ManualScanStrategy - raw byte scan for invoice XML, no PDF parsing

StrategyChain tries them in order and returns the first non-empty result.
"""

import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence, Union

from .classifier import is_likely_invoice_xml
from .config import (
    FALLBACK_XML_FILENAME,
    SCRATCH_DIR,
    XML_END_MARKERS,
    XML_START_MARKERS,
    ZUGFERD_V1_NAMESPACE,
    logger,
)
from .container import RELAXED, STRICT, ContainerConfig, extract_attachments
from .exceptions import AttachmentExtractionError, ContainerError

# Attachment name -> raw bytes
AttachmentSet = dict[str, bytes]


class AttachmentStrategy(ABC):
    """Contract for one way of turning a PDF into its attachments."""

    name: str = "strategy"

    @abstractmethod
    def extract(self, pdf_path: Path) -> AttachmentSet:
        """
        Read the embedded files of a PDF.

        Args:
            pdf_path: Path to the PDF file

        Returns:
            Mapping of attachment name to content. May be empty.

        Raises:
            ContainerError: If the strategy cannot read the file
        """


def read_extracted_files(directory: Path) -> AttachmentSet:
    """Load every regular file in ``directory`` into memory."""
    attachments: AttachmentSet = {}

    for entry in sorted(directory.iterdir()):
        if entry.is_dir():
            continue
        try:
            data = entry.read_bytes()
        except OSError as e:
            logger.warning(f"Could not read extracted file {entry.name}: {e}")
            continue
        attachments[entry.name] = data
        logger.debug(f"  Attachment read: {entry.name} ({len(data)} bytes)")

    return attachments


class StandardStrategy(AttachmentStrategy):
    """Extract attachments with the PDF parser in strict mode."""

    name = "standard"
    config: ContainerConfig = STRICT

    def __init__(self, scratch_dir: Optional[str] = SCRATCH_DIR):
        self.scratch_dir = scratch_dir

    def extract(self, pdf_path: Path) -> AttachmentSet:
        # Scratch directory is removed on every exit path
        try:
            with tempfile.TemporaryDirectory(
                prefix=f"zugferd_extract_{self.name}_", dir=self.scratch_dir
            ) as temp_dir:
                logger.debug(f"Using temporary directory: {temp_dir}")
                extract_attachments(pdf_path, temp_dir, self.config)
                return read_extracted_files(Path(temp_dir))
        except OSError as e:
            raise ContainerError(f"scratch directory error: {e}") from e


class RelaxedStrategy(StandardStrategy):
    """Extract attachments with lenient parsing for malformed PDFs."""

    name = "relaxed"
    config = RELAXED


# ============================================================================
# Manual Byte Scan
# ============================================================================

def slice_xml_at(data: bytes, start: int) -> Optional[bytes]:
    """
    Cut an XML document out of ``data`` beginning at ``start``.

    The slice ends after the earliest closing tag of any known root element,
    regardless of which root element was opened. Returns None when no
    closing tag follows.
    """
    if start < 0 or start >= len(data):
        return None

    end: Optional[int] = None
    for marker in XML_END_MARKERS:
        idx = data.find(marker, start)
        if idx != -1:
            candidate_end = idx + len(marker)
            if end is None or candidate_end < end:
                end = candidate_end

    if end is None:
        return None
    return data[start:end]


def guess_xml_filename(data: bytes) -> str:
    """Pick the canonical attachment name that fits the XML content."""
    content = data.lower()

    if b"xrechnung" in content:
        return "xrechnung.xml"
    if b"factur-x" in content:
        return "factur-x.xml"
    if b"zugferd" in content:
        if ZUGFERD_V1_NAMESPACE.encode("ascii") in content:
            return "ZUGFeRD-invoice.xml"
        return "zugferd-invoice.xml"
    return FALLBACK_XML_FILENAME


def _find_all(data: bytes, marker: bytes) -> list[int]:
    positions = []
    idx = data.find(marker)
    while idx != -1:
        positions.append(idx)
        idx = data.find(marker, idx + 1)
    return positions


def _unique_name(attachments: AttachmentSet, name: str) -> str:
    if name not in attachments:
        return name
    stem, suffix = Path(name).stem, Path(name).suffix
    counter = 2
    while f"{stem}-{counter}{suffix}" in attachments:
        counter += 1
    return f"{stem}-{counter}{suffix}"


# Declaration, then only whitespace, comments or processing instructions
_XML_PROLOG = re.compile(rb"<\?xml[^>]*\?>(?:\s|<!--.*?-->|<\?.*?\?>)*\Z", re.DOTALL)


def scan_for_xml(data: bytes) -> AttachmentSet:
    """
    Find invoice XML documents stored uncompressed in raw PDF bytes.

    Every start marker position is sliced, in file order. A slice starting
    inside the previous one ends at the same closing tag, so it is the
    tighter cut of the same document and replaces it. The exception is a
    root element directly preceded by the previous slice's XML declaration:
    that declaration belongs to the document and the longer slice is kept.
    """
    attachments: AttachmentSet = {}

    positions = sorted({
        pos for marker in XML_START_MARKERS for pos in _find_all(data, marker)
    })

    last_name: Optional[str] = None
    last_start = last_end = 0
    for pos in positions:
        xml_data = slice_xml_at(data, pos)
        if not xml_data or not is_likely_invoice_xml(xml_data):
            continue

        if last_name is not None and pos < last_end:
            if _XML_PROLOG.match(data, last_start, pos):
                continue
            del attachments[last_name]

        name = _unique_name(attachments, guess_xml_filename(xml_data))
        attachments[name] = xml_data
        last_name, last_start, last_end = name, pos, pos + len(xml_data)
        logger.debug(f"  XML extracted manually from position {pos} as {name}")

    return attachments


class ManualScanStrategy(AttachmentStrategy):
    """Search the raw file for invoice XML without parsing the PDF."""

    name = "manual"

    def extract(self, pdf_path: Path) -> AttachmentSet:
        try:
            data = Path(pdf_path).read_bytes()
        except OSError as e:
            raise ContainerError(f"cannot read PDF: {e}") from e

        attachments = scan_for_xml(data)
        if not attachments:
            raise ContainerError("manual extraction found no XML attachments")
        return attachments


# ============================================================================
# Strategy Chain
# ============================================================================

class StrategyChain:
    """
    Composite strategy that falls back through increasingly tolerant methods.

    A strategy that raises ContainerError or returns no attachments counts
    as failed and the next one is tried. Only when all fail is an error
    raised.
    """

    def __init__(self, strategies: Optional[Sequence[AttachmentStrategy]] = None):
        self.strategies = list(strategies) if strategies is not None else default_strategies()

    def extract(self, pdf_path: Union[str, Path]) -> AttachmentSet:
        """
        Return the attachments found by the first successful strategy.

        Raises:
            AttachmentExtractionError: If every strategy failed
        """
        pdf_path = Path(pdf_path)
        failures: list[tuple[str, str]] = []

        for strategy in self.strategies:
            logger.debug(f"Trying {strategy.name} extraction for {pdf_path.name}")
            try:
                attachments = strategy.extract(pdf_path)
            except ContainerError as e:
                logger.debug(f"{strategy.name.capitalize()} extraction failed: {e}")
                failures.append((strategy.name, str(e)))
                continue

            if attachments:
                return attachments

            logger.debug(f"{strategy.name.capitalize()} extraction found no attachments")
            failures.append((strategy.name, "no attachments found"))

        raise AttachmentExtractionError(failures)


def default_strategies() -> list[AttachmentStrategy]:
    """Standard, relaxed and manual extraction, in that order."""
    return [StandardStrategy(), RelaxedStrategy(), ManualScanStrategy()]
