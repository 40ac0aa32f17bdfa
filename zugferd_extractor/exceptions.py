"""Exceptions raised by the ZUGFeRD XML Extractor.

Hierarchy:
    ZugferdExtractorError (base)
    ├── ContainerError              – the PDF parser could not read attachments
    ├── AttachmentExtractionError   – every extraction strategy failed
    ├── NoInvoiceXMLError           – attachments found, none is invoice XML
    ├── ExtractionError             – a single-document stage failed
    └── InputPatternError           – the input pattern matched no PDF files
"""

from __future__ import annotations

from .config import ErrorKind, Stage


class ZugferdExtractorError(Exception):
    """Base class for all extractor errors."""

    kind: ErrorKind | None = None


class ContainerError(ZugferdExtractorError):
    """The PDF parser failed to open the file or to write its attachments."""

    kind = ErrorKind.CONTAINER_UNREADABLE


class AttachmentExtractionError(ZugferdExtractorError):
    """All attachment extraction strategies were tried and none produced a file."""

    kind = ErrorKind.CONTAINER_UNREADABLE

    def __init__(self, failures: list[tuple[str, str]]) -> None:
        self.failures = failures
        details = "; ".join(f"{name}: {reason}" for name, reason in failures)
        super().__init__(
            f"all {len(failures)} extraction methods failed ({details})"
        )


class NoInvoiceXMLError(ZugferdExtractorError):
    """No attachment passed the invoice XML check."""

    kind = ErrorKind.NO_INVOICE_CANDIDATE

    def __init__(self, attachment_names: list[str]) -> None:
        self.attachment_names = attachment_names
        super().__init__(
            f"no ZUGFeRD XML attachment found. Available attachments: {attachment_names}"
        )


class ExtractionError(ZugferdExtractorError):
    """A stage of the single-document pipeline failed."""

    def __init__(
        self,
        stage: Stage,
        kind: ErrorKind,
        input_path: str,
        detail: str,
    ) -> None:
        self.stage = stage
        self.kind = kind
        self.input_path = input_path
        self.detail = detail
        super().__init__(f"[{stage.value}] {detail}")


class InputPatternError(ZugferdExtractorError):
    """The input pattern resolved to no usable files."""

    kind = ErrorKind.INPUT_PATTERN_EMPTY

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        super().__init__(f"no PDF files found matching pattern: {pattern}")
