"""
ZUGFeRD XML Extractor

Extracts the structured invoice XML (ZUGFeRD, Factur-X, XRechnung)
embedded in PDF invoices, for single files or whole batches.
"""

__version__ = "1.0.0"
__author__ = "ZUGFeRD Extractor Team"

from .classifier import is_likely_invoice_xml, is_structurally_valid
from .discovery import find_invoice_xml
from .extractor import ZugferdExtractor, extract_xml_from_pdf, run_extraction
from .batch import BatchProcessor, process_pattern
from .schemas import BatchSummary, CandidateXML, ExtractionFailure, ExtractionSuccess

__all__ = [
    "is_likely_invoice_xml",
    "is_structurally_valid",
    "find_invoice_xml",
    "ZugferdExtractor",
    "extract_xml_from_pdf",
    "run_extraction",
    "BatchProcessor",
    "process_pattern",
    "BatchSummary",
    "CandidateXML",
    "ExtractionFailure",
    "ExtractionSuccess",
]
