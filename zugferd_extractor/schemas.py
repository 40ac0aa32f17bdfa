"""
Pydantic models for extraction results.

This module defines the data structures passed between the pipeline stages
and reported to callers:
- CandidateXML for the attachment selected by discovery
- ExtractionSuccess / ExtractionFailure for the outcome of one input
- BatchSummary for the tally of a batch run
"""

from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

from .config import ErrorKind, Stage


class CandidateXML(BaseModel):
    """Invoice XML chosen from a container's attachments."""
    data: bytes = Field(..., description="Raw XML bytes as embedded in the container")
    name: str = Field(..., description="Attachment name the bytes came from")

    model_config = {"frozen": True}


class ExtractionSuccess(BaseModel):
    """
    Outcome of a successful single-document extraction.

    Attributes:
        input_path: Container the XML was taken from
        output_path: File the XML was written to
        source_name: Original attachment name inside the container
        byte_length: Number of bytes written
        indicators: Classifier indicators found in the XML
        structurally_valid: Result of the advisory structural check
    """
    status: Literal["success"] = "success"
    input_path: str = Field(..., description="Path of the processed container")
    output_path: str = Field(..., description="Path of the written XML file")
    source_name: str = Field(..., description="Attachment name inside the container")
    byte_length: int = Field(..., ge=0, description="Size of the written XML in bytes")
    indicators: list[str] = Field(
        default_factory=list,
        description="Invoice indicators matched in the XML"
    )
    structurally_valid: bool = Field(
        False,
        description="Advisory result of the structural check; never affects success"
    )

    model_config = {"frozen": True}


class ExtractionFailure(BaseModel):
    """Outcome of a failed single-document extraction."""
    status: Literal["failure"] = "failure"
    input_path: str = Field(..., description="Path of the processed container")
    error_kind: ErrorKind = Field(..., description="Category of the failure")
    stage: Optional[Stage] = Field(None, description="Pipeline stage that failed")
    detail: str = Field(..., description="Human-readable error detail")

    model_config = {"frozen": True}


ExtractionOutcome = Union[ExtractionSuccess, ExtractionFailure]


class BatchSummary(BaseModel):
    """
    Aggregated result of a batch run.

    Per-file outcomes are kept in completion order, which is not
    deterministic; the counts are.
    """
    total_files: int = Field(..., ge=0, description="Number of PDF files processed")
    successful: int = Field(..., ge=0, description="Number of successful extractions")
    failed: int = Field(..., ge=0, description="Number of failed extractions")
    outcomes: list[Union[ExtractionSuccess, ExtractionFailure]] = Field(
        default_factory=list,
        description="Per-file outcomes in completion order"
    )
