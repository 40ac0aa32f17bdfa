"""
Batch extraction over many PDFs with a bounded worker pool.
"""

import glob
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Optional, Sequence, Union

from .config import DEFAULT_WORKERS, ErrorKind, logger
from .exceptions import InputPatternError
from .extractor import run_extraction
from .schemas import BatchSummary, ExtractionFailure, ExtractionOutcome
from .strategies import StrategyChain


def resolve_inputs(pattern: str) -> list[str]:
    """Expand a path or glob pattern into matching paths, sorted."""
    return sorted(glob.glob(pattern))


def filter_pdf_files(paths: Sequence[Union[str, Path]]) -> list[Path]:
    """Keep only paths with a ``.pdf`` extension (any case)."""
    return [Path(p) for p in paths if Path(p).suffix.lower() == ".pdf"]


def warn_shared_output_paths(outcomes: Sequence[ExtractionOutcome]) -> list[str]:
    """
    Log a warning for every output file written by more than one input.

    Returns the shared output paths.
    """
    counts = Counter(o.output_path for o in outcomes if o.status == "success")
    shared = sorted(path for path, count in counts.items() if count > 1)
    for path in shared:
        sources = sorted(
            o.input_path for o in outcomes
            if o.status == "success" and o.output_path == path
        )
        logger.warning(f"Output {path} was written by {len(sources)} inputs: {sources}")
    return shared


class BatchProcessor:
    """
    Runs single-document extraction over many PDFs concurrently.

    Each worker handles one PDF at a time. Results are only collected once
    every worker has finished, so the tally always covers all inputs.

    Attributes:
        output_dir: If set, every XML is written as ``<pdf-stem>.xml`` here
        workers: Maximum number of concurrent extractions
    """

    def __init__(
        self,
        output_dir: Optional[Union[str, Path]] = None,
        workers: int = DEFAULT_WORKERS,
        chain: Optional[StrategyChain] = None,
    ):
        self.output_dir = Path(output_dir) if output_dir else None
        self.workers = max(1, workers)
        self.chain = chain

    def output_path_for(self, pdf_path: Path) -> Optional[Path]:
        if self.output_dir is None:
            return None
        return self.output_dir / f"{pdf_path.stem}.xml"

    def _process_one(self, pdf_path: Path) -> ExtractionOutcome:
        return run_extraction(pdf_path, self.output_path_for(pdf_path), self.chain)

    def process(
        self,
        paths: Sequence[Union[str, Path]],
        pattern: Optional[str] = None,
    ) -> BatchSummary:
        """
        Extract XML from every PDF among ``paths``.

        Non-PDF paths are dropped before any work starts. A failing PDF
        never stops the others.

        Args:
            paths: Candidate input paths
            pattern: Pattern the paths came from, reported when none is a PDF

        Raises:
            InputPatternError: If no PDF remains after filtering
        """
        pdf_files = filter_pdf_files(paths)
        if not pdf_files:
            raise InputPatternError(pattern or ", ".join(str(p) for p in paths) or "<empty>")

        workers = min(self.workers, len(pdf_files))
        logger.info(f"Processing {len(pdf_files)} PDF files with {workers} workers")

        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_path = {
                executor.submit(self._process_one, pdf_path): pdf_path
                for pdf_path in pdf_files
            }
        # Executor shutdown waited for all workers

        outcomes: list[ExtractionOutcome] = []
        for future in as_completed(future_to_path):
            pdf_path = future_to_path[future]
            try:
                outcomes.append(future.result())
            except Exception as e:
                logger.exception(f"Unexpected error processing {pdf_path}")
                outcomes.append(ExtractionFailure(
                    input_path=str(pdf_path),
                    error_kind=ErrorKind.CONTAINER_UNREADABLE,
                    detail=f"unexpected error: {e}",
                ))

        warn_shared_output_paths(outcomes)
        successful = sum(1 for o in outcomes if o.status == "success")

        logger.info(f"Batch complete: {successful} successful, {len(outcomes) - successful} failed")

        return BatchSummary(
            total_files=len(outcomes),
            successful=successful,
            failed=len(outcomes) - successful,
            outcomes=outcomes,
        )


def process_pattern(
    pattern: str,
    output_dir: Optional[Union[str, Path]] = None,
    workers: int = DEFAULT_WORKERS,
) -> BatchSummary:
    """
    Resolve a glob pattern and run a batch over the PDFs it matches.

    Raises:
        InputPatternError: If the pattern matches no PDF files
    """
    return BatchProcessor(output_dir, workers).process(resolve_inputs(pattern), pattern)


def format_batch_summary(summary: BatchSummary) -> str:
    """
    Format a BatchSummary as human-readable text for CLI output.

    Args:
        summary: BatchSummary to format

    Returns:
        One line per file followed by the tally
    """
    lines = []
    for outcome in summary.outcomes:
        if outcome.status == "success":
            lines.append(f"✅ {outcome.input_path} -> {outcome.output_path}")
        else:
            lines.append(f"❌ {outcome.input_path}: {outcome.detail}")

    lines.append("")
    lines.append(
        f"Batch processing complete: {summary.successful} successful, "
        f"{summary.failed} failed"
    )
    return "\n".join(lines)
