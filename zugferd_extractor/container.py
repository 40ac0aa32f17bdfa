"""
PDF attachment access.

Wraps pypdf behind a single call that writes every embedded file of a PDF
into a target directory. Two configurations are provided: STRICT rejects
malformed documents and undecodable streams, RELAXED tolerates both.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from pypdf import PdfReader

from .config import logger
from .exceptions import ContainerError


@dataclass(frozen=True)
class ContainerConfig:
    """
    Parser settings for reading a PDF's embedded files.

    Attributes:
        strict: Reject structurally malformed PDFs instead of repairing them
        decode_all_streams: Fail when any embedded file stream cannot be decoded
    """
    name: str
    strict: bool = True
    decode_all_streams: bool = True


STRICT = ContainerConfig(name="strict", strict=True, decode_all_streams=True)
RELAXED = ContainerConfig(name="relaxed", strict=False, decode_all_streams=False)

_UNSAFE_CHARS = re.compile(r'[\x00-\x1f<>:"/\\|?*]')


def safe_filename(name: str, index: int) -> str:
    """Turn an attachment name into a file name usable inside the scratch dir."""
    # Attachment names may carry directory components from the producing system
    base = re.split(r"[/\\]", name)[-1]
    base = _UNSAFE_CHARS.sub("_", base).strip(" .")
    if not base:
        base = f"attachment-{index}"
    return base


def _unique_path(dest_dir: Path, filename: str) -> Path:
    target = dest_dir / filename
    counter = 1
    while target.exists():
        stem, suffix = Path(filename).stem, Path(filename).suffix
        target = dest_dir / f"{stem}-{counter}{suffix}"
        counter += 1
    return target


def extract_attachments(
    pdf_path: Union[str, Path],
    dest_dir: Union[str, Path],
    config: ContainerConfig = STRICT,
) -> list[Path]:
    """
    Write all embedded files of a PDF into ``dest_dir``.

    Args:
        pdf_path: Path to the PDF file
        dest_dir: Existing directory to write the attachments to
        config: Parser configuration (STRICT or RELAXED)

    Returns:
        Paths of the written files

    Raises:
        ContainerError: If the PDF cannot be parsed or, with
            ``decode_all_streams``, an attachment cannot be decoded
    """
    dest_dir = Path(dest_dir)

    try:
        reader = PdfReader(str(pdf_path), strict=config.strict)
        attachments = reader.attachments
        names = list(attachments.keys())
    except Exception as e:
        raise ContainerError(f"{config.name} PDF parsing failed: {e}") from e

    written: list[Path] = []
    for index, name in enumerate(names):
        try:
            streams = attachments[name]
        except Exception as e:
            if config.decode_all_streams:
                raise ContainerError(
                    f"{config.name} PDF parsing failed: cannot decode attachment {name!r}: {e}"
                ) from e
            logger.info(f"Skipping undecodable attachment {name!r}: {e}")
            continue

        filename = safe_filename(name, index)
        for data in streams:
            target = _unique_path(dest_dir, filename)
            try:
                target.write_bytes(data)
            except OSError as e:
                raise ContainerError(f"cannot write attachment {name!r}: {e}") from e
            written.append(target)

    return written
