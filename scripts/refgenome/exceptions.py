"""
Error Types for Reference Genome Loading and Access

Error categories:
- Data faults: malformed FASTA content, duplicate contig names
- Caller misuse: unknown contig names, inverted or negative ranges

I/O problems (missing file, corrupt gzip stream) are not wrapped; the
original OSError / EOFError reaches the caller.
"""

from pathlib import Path
from typing import Optional, Union


class ReferenceGenomeError(Exception):
    """Base class for all reference genome errors."""


class DuplicateContigError(ReferenceGenomeError):
    """A contig name was inserted twice."""

    def __init__(self, contig_key: str):
        self.contig_key = contig_key
        super().__init__(
            f'Contig key "{contig_key}" is already in the reference genome'
        )


class FastaFormatError(ReferenceGenomeError, ValueError):
    """FASTA content could not be parsed into named records."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


class ContigNotFoundError(ReferenceGenomeError, KeyError):
    """Requested contig is not part of the reference genome."""

    def __init__(self, contig_key: str):
        self.contig_key = contig_key
        super().__init__(contig_key)

    def __str__(self) -> str:
        return f'Contig "{self.contig_key}" is not in the reference genome'


class InvalidRangeError(ReferenceGenomeError, ValueError):
    """Slice coordinates are inverted or negative."""

    def __init__(self, contig_key: str, start: int, end: int):
        self.contig_key = contig_key
        self.start = start
        self.end = end
        if start < 0 or end < 0:
            detail = "negative coordinate"
        else:
            detail = f"start > end: {start} > {end}"
        super().__init__(
            f"Invalid range {contig_key}:{start}-{end} ({detail})"
        )
