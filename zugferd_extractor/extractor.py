"""
Single-document extraction of embedded invoice XML.

This module provides functionality to:
- Read the attachments of a PDF via the strategy chain
- Select the ZUGFeRD / Factur-X / XRechnung XML among them
- Derive the output path and write the XML unchanged
"""

from pathlib import Path
from typing import Optional, Sequence, Union

from .classifier import is_structurally_valid, matched_indicators
from .config import KNOWN_XML_FILENAMES, ErrorKind, Stage, logger
from .discovery import find_invoice_xml
from .exceptions import (
    AttachmentExtractionError,
    ExtractionError,
    NoInvoiceXMLError,
)
from .schemas import ExtractionFailure, ExtractionOutcome, ExtractionSuccess
from .strategies import StrategyChain


# ============================================================================
# Output Helpers
# ============================================================================

def derive_output_path(
    input_path: Union[str, Path],
    xml_filename: str,
    output_path: Optional[Union[str, Path]] = None,
    known_names: Sequence[str] = KNOWN_XML_FILENAMES,
) -> Path:
    """
    Work out where the extracted XML goes.

    An explicit ``output_path`` is used as given. Otherwise the file lands
    next to the PDF, keeping the attachment name when it is a canonical one
    and using the PDF's stem with ``.xml`` when it is not.
    """
    if output_path:
        return Path(output_path)

    input_path = Path(input_path)
    if xml_filename in known_names:
        output_filename = xml_filename
    else:
        output_filename = f"{input_path.stem}.xml"

    return input_path.parent / output_filename


def save_xml(data: bytes, output_path: Path) -> None:
    """
    Write XML bytes to ``output_path``, creating parent directories.

    Existing files are overwritten.

    Raises:
        OSError: If the directory or file cannot be written
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if output_path.exists():
        logger.info(f"  Warning: output file exists and will be overwritten: {output_path}")

    output_path.write_bytes(data)


# ============================================================================
# Extractor
# ============================================================================

class ZugferdExtractor:
    """
    Extracts the invoice XML embedded in one PDF.

    Attributes:
        input_path: PDF to read
        output_path: Explicit output file, or None for the default location
        chain: Attachment extraction strategies to use
    """

    def __init__(
        self,
        input_path: Union[str, Path],
        output_path: Optional[Union[str, Path]] = None,
        chain: Optional[StrategyChain] = None,
        known_names: Sequence[str] = KNOWN_XML_FILENAMES,
    ):
        self.input_path = Path(input_path)
        self.output_path = Path(output_path) if output_path else None
        self.chain = chain or StrategyChain()
        self.known_names = known_names

    def _fail(self, stage: Stage, kind: ErrorKind, detail: str) -> ExtractionError:
        return ExtractionError(stage, kind, str(self.input_path), detail)

    def extract(self) -> ExtractionSuccess:
        """
        Run the full pipeline for this PDF.

        Returns:
            ExtractionSuccess describing the written file

        Raises:
            ExtractionError: If any stage fails; ``stage`` names which one
        """
        logger.info(f"Processing PDF: {self.input_path}")

        try:
            attachments = self.chain.extract(self.input_path)
        except AttachmentExtractionError as e:
            raise self._fail(Stage.ATTACHMENTS, ErrorKind.CONTAINER_UNREADABLE, str(e)) from e

        if not attachments:
            raise self._fail(
                Stage.EMPTY,
                ErrorKind.NO_ATTACHMENTS,
                "no embedded files found in PDF",
            )

        logger.debug(f"Found {len(attachments)} attachment(s)")
        for filename in attachments:
            logger.debug(f"  - {filename}")

        try:
            candidate = find_invoice_xml(attachments, self.known_names)
        except NoInvoiceXMLError as e:
            raise self._fail(Stage.DISCOVERY, ErrorKind.NO_INVOICE_CANDIDATE, str(e)) from e

        output_path = derive_output_path(
            self.input_path, candidate.name, self.output_path, self.known_names
        )

        try:
            save_xml(candidate.data, output_path)
        except OSError as e:
            raise self._fail(
                Stage.WRITE,
                ErrorKind.OUTPUT_WRITE_FAILED,
                f"error writing XML file {output_path}: {e}",
            ) from e

        valid = is_structurally_valid(candidate.data)
        if not valid:
            logger.info(f"  Warning: XML from {self.input_path.name} may not be a valid ZUGFeRD format")

        logger.info(f"Extracted {candidate.name} ({len(candidate.data)} bytes) to {output_path}")

        return ExtractionSuccess(
            input_path=str(self.input_path),
            output_path=str(output_path),
            source_name=candidate.name,
            byte_length=len(candidate.data),
            indicators=matched_indicators(candidate.data),
            structurally_valid=valid,
        )


def extract_xml_from_pdf(
    input_path: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
) -> ExtractionSuccess:
    """
    Extract the invoice XML from a PDF file.

    Args:
        input_path: Path to the PDF file
        output_path: Optional explicit output file

    Returns:
        ExtractionSuccess with the output path and source attachment name

    Raises:
        ExtractionError: If the XML cannot be extracted or written
    """
    return ZugferdExtractor(input_path, output_path).extract()


def run_extraction(
    input_path: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
    chain: Optional[StrategyChain] = None,
) -> ExtractionOutcome:
    """Like extract_xml_from_pdf, but returns failures instead of raising."""
    try:
        return ZugferdExtractor(input_path, output_path, chain).extract()
    except ExtractionError as e:
        return ExtractionFailure(
            input_path=str(input_path),
            error_kind=e.kind,
            stage=e.stage,
            detail=e.detail,
        )
