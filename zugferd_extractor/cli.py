"""
Command-line interface for the ZUGFeRD XML Extractor.

Extracts the embedded invoice XML from one PDF, or from every PDF matched
by a glob pattern using a pool of workers.
"""

from pathlib import Path
from typing import NoReturn, Optional

import typer

from . import __version__
from .config import DEFAULT_WORKERS, set_verbose
from .batch import BatchProcessor, filter_pdf_files, format_batch_summary, resolve_inputs
from .exceptions import ZugferdExtractorError
from .extractor import extract_xml_from_pdf


EPILOG = "Supported formats: ZUGFeRD 1.0, 2.0, 2.1 and 2.3, Factur-X, XRechnung."


# Create Typer app
app = typer.Typer(
    name="zugferd-extractor",
    help="Extract the embedded ZUGFeRD / Factur-X / XRechnung XML from PDF invoices.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"ZUGFeRD XML Extractor v{__version__}")
        raise typer.Exit()


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


def _prepare_output_dir(output: Path) -> None:
    """Make sure the batch output path is a usable directory."""
    if output.exists():
        if not output.is_dir():
            _fail("output path must be a directory when multiple files are processed")
        return
    try:
        output.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        _fail(f"cannot create output directory: {e}")


def _run_single(pdf_path: str, output: Optional[Path], verbose: bool) -> None:
    try:
        result = extract_xml_from_pdf(pdf_path, output)
    except ZugferdExtractorError as e:
        _fail(f"failed to extract XML: {e}")

    typer.echo(f"✓ XML extracted to: {result.output_path}")
    if verbose:
        typer.echo(f"  Original XML filename: {result.source_name}")
        typer.echo(f"  XML size: {result.byte_length} bytes")
        if result.structurally_valid:
            typer.echo("  ✓ XML appears to be a valid ZUGFeRD format")
        else:
            typer.echo("  ⚠ Warning: XML may not be a valid ZUGFeRD format")


def _run_batch(files: list[str], output: Optional[Path], workers: int) -> None:
    pdf_files = filter_pdf_files(files)
    if not pdf_files:
        _fail("no PDF files found among the matched paths")

    if output is not None:
        _prepare_output_dir(output)

    typer.echo(f"Found {len(pdf_files)} PDF files to process")

    processor = BatchProcessor(output_dir=output, workers=min(workers, len(pdf_files)))
    try:
        summary = processor.process(pdf_files)
    except ZugferdExtractorError as e:
        _fail(str(e))

    typer.echo(format_batch_summary(summary))

    if summary.successful == 0:
        raise typer.Exit(code=1)


@app.command(epilog=EPILOG)
def extract(
    pattern: str = typer.Argument(
        ...,
        help="Path to a ZUGFeRD PDF or a glob pattern such as '*.pdf'",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output XML file, or output directory when several files match",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Print diagnostics for every extraction step",
    ),
    workers: int = typer.Option(
        DEFAULT_WORKERS,
        "--workers",
        "-w",
        min=1,
        help="Number of parallel workers for batch processing",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version information and exit.",
    ),
) -> None:
    """
    Extract the invoice XML embedded in PDF files.

    Example: zugferd-extractor -o xml/ "invoices/*.pdf"

    A single match is written to OUTPUT (or next to the PDF). Several
    matches are processed in parallel and written to the OUTPUT directory
    (or next to each PDF).
    """
    set_verbose(verbose)

    files = resolve_inputs(pattern)
    if not files:
        _fail(f"no files found matching pattern '{pattern}'")

    if len(files) > 1:
        _run_batch(files, output, workers)
    else:
        _run_single(files[0], output, verbose)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
