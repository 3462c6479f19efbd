"""
Reference Genome - Core Library

In-memory access to FASTA reference genomes:
- Transparent gzip decoding (extension or magic-byte detection)
- Ordered, uniquely named contigs with upper-cased sequence
- Zero-copy whole-contig and range reads with end truncation
"""

from .decoding import (
    is_gzip_path,
    open_fasta_stream,
    open_fasta_stream_sniffed,
    get_stream_opener,
    StreamOpener,
    GZIP_SUFFIX,
)

from .exceptions import (
    ReferenceGenomeError,
    DuplicateContigError,
    FastaFormatError,
    ContigNotFoundError,
    InvalidRangeError,
)

from .reference_genome import (
    ReferenceGenome,
    normalize_sequence,
)

__version__ = "1.0.0"

__all__ = [
    # Decoding
    "is_gzip_path",
    "open_fasta_stream",
    "open_fasta_stream_sniffed",
    "get_stream_opener",
    "StreamOpener",
    "GZIP_SUFFIX",
    # Errors
    "ReferenceGenomeError",
    "DuplicateContigError",
    "FastaFormatError",
    "ContigNotFoundError",
    "InvalidRangeError",
    # Store
    "ReferenceGenome",
    "normalize_sequence",
]
