"""
FASTA Stream Decoding

Opens a reference file as a buffered binary stream, transparently
decompressing gzip input. Two detection policies are provided:

- Extension (default): the final suffix must be exactly ".gz"
  (case-sensitive). "ref.fa.gz" is compressed, "ref.fa.GZ" is not.
- Magic bytes: the first two bytes must be 1f 8b.

Multi-member gzip files (e.g. written by bgzip or pigz) decompress as one
continuous stream.

Errors:
    Opening a missing or unreadable file raises OSError immediately.
    Corrupt gzip data is only detected once the stream is read
    (gzip.BadGzipFile or EOFError), so it surfaces from the FASTA parser.
"""

import gzip
import logging
from pathlib import Path
from typing import BinaryIO, Callable, Union

logger = logging.getLogger(__name__)

GZIP_SUFFIX = ".gz"
GZIP_MAGIC = b"\x1f\x8b"

PathLike = Union[str, Path]

# Any callable mapping a path to an open binary stream can replace the default
StreamOpener = Callable[[Path], BinaryIO]


def is_gzip_path(path: PathLike) -> bool:
    """
    Check whether a path names a gzip file by its final extension.

    Examples:
        >>> is_gzip_path("reference.fa.gz")
        True
        >>> is_gzip_path("reference.fa")
        False
        >>> is_gzip_path("reference.fa.GZ")
        False
    """
    return Path(path).suffix == GZIP_SUFFIX


def open_fasta_stream(path: PathLike) -> BinaryIO:
    """
    Open a FASTA file for binary reading, using the extension rule.

    Args:
        path: Path to a plain or gzip-compressed FASTA file

    Returns:
        Buffered binary stream of decompressed FASTA text

    Raises:
        OSError: If the file cannot be opened
    """
    path = Path(path)
    if is_gzip_path(path):
        logger.debug(f"Detected gzip extension, opening {path} with gzip reader")
        return gzip.open(path, "rb")

    logger.debug(f"Opening {path} as plain-text file")
    return open(path, "rb")


def _has_gzip_magic(path: Path) -> bool:
    """Check if file starts with the gzip magic number."""
    with open(path, "rb") as f:
        return f.read(len(GZIP_MAGIC)) == GZIP_MAGIC


def open_fasta_stream_sniffed(path: PathLike) -> BinaryIO:
    """
    Open a FASTA file for binary reading, detecting gzip by content.

    Unlike open_fasta_stream(), a renamed compressed file is still
    decompressed, and a ".gz" file holding plain text is read as-is.

    Raises:
        OSError: If the file cannot be opened
    """
    path = Path(path)
    if _has_gzip_magic(path):
        logger.debug(f"Detected gzip magic bytes, opening {path} with gzip reader")
        return gzip.open(path, "rb")

    logger.debug(f"Opening {path} as plain-text file")
    return open(path, "rb")


STREAM_OPENERS = {
    "extension": open_fasta_stream,
    "magic": open_fasta_stream_sniffed,
}


def get_stream_opener(detection: str) -> StreamOpener:
    """
    Look up a stream opener by detection mode name.

    Args:
        detection: "extension" or "magic"

    Raises:
        ValueError: If the mode is unknown
    """
    try:
        return STREAM_OPENERS[detection]
    except KeyError:
        raise ValueError(
            f"Unknown compression detection mode: {detection!r} "
            f"(choose from {', '.join(sorted(STREAM_OPENERS))})"
        ) from None
