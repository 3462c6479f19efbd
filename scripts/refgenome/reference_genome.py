"""
In-Memory Reference Genome

Loads a FASTA file (plain or gzip-compressed) into memory and provides
bounds-checked, zero-copy access to contig sequences.

Storage Model:
--------------
- Contig names are unique and kept in load order.
- Every sequence is stored once as upper-cased, immutable bytes.
- Reads return read-only memoryview objects aliasing the stored bytes.
  bytes(view) or view.tobytes() gives an independent copy.

Coordinate System:
------------------
All coordinates are 0-based and half-open: get_slice("chr1", 3, 8) returns
bases 3..7. Coordinates past the contig end are truncated to the contig
length with a warning rather than raising, so windowed scans near contig
ends stay simple:

    contig = ACGTACGT (length 8)
    get_slice(contig, 0, 1000) -> ACGTACGT   (end truncated to 8)
    get_slice(contig, 9, 20)   -> <empty>    (start and end truncated to 8)

Unknown contig names raise ContigNotFoundError and inverted ranges raise
InvalidRangeError; both indicate caller bugs rather than bad input data.
"""

import io
import logging
from collections import OrderedDict
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from Bio import SeqIO

from .decoding import PathLike, StreamOpener, open_fasta_stream
from .exceptions import (
    ContigNotFoundError,
    DuplicateContigError,
    FastaFormatError,
    InvalidRangeError,
)

# Decoded text must map back to the original bytes one-to-one
FASTA_TEXT_ENCODING = "latin-1"

SequenceLike = Union[str, bytes, bytearray, memoryview]


def normalize_sequence(sequence) -> bytes:
    """
    Convert a sequence to upper-cased bytes.

    Only ASCII letters change case; other bytes are kept as-is. Strings are
    encoded as UTF-8, and any other object (e.g. Bio.Seq.Seq) is converted
    with str() first.

    Examples:
        >>> normalize_sequence("Acgt")
        b'ACGT'
        >>> normalize_sequence(b"nnRy")
        b'NNRY'
    """
    if isinstance(sequence, (bytes, bytearray, memoryview)):
        data = bytes(sequence)
    else:
        data = str(sequence).encode("utf-8")
    return data.upper()


def _parse_records(handle: io.TextIOBase, path: Path) -> Iterator:
    """Yield SeqRecords from a FASTA handle, reporting parser errors as FastaFormatError."""
    try:
        yield from SeqIO.parse(handle, "fasta")
    except ValueError as exc:
        raise FastaFormatError(str(exc), path) from exc


class ReferenceGenome:
    """
    Wrapper around a reference genome held in memory.

    Build one with ReferenceGenome.from_fasta() or start from
    ReferenceGenome.empty_reference() and call add_contig().

    The genome is meant to be built once and then shared read-only.
    add_contig() is not safe to call concurrently on one instance.

    Args:
        filename: Source of the data, informational only
        logger: Receives clamping warnings and load progress messages;
            defaults to this module's logger
    """

    def __init__(
        self,
        filename: PathLike = "",
        logger: Optional[logging.Logger] = None,
    ):
        self._filename = Path(filename) if filename else None
        self._contig_keys: List[str] = []
        self._contig_map: Dict[str, bytes] = {}
        self._logger = logger if logger is not None else logging.getLogger(__name__)

    @classmethod
    def empty_reference(cls, logger: Optional[logging.Logger] = None) -> "ReferenceGenome":
        """Create an empty reference genome, to be populated with add_contig()."""
        return cls(filename="", logger=logger)

    @classmethod
    def from_fasta(
        cls,
        fasta_fn: PathLike,
        opener: StreamOpener = open_fasta_stream,
        logger: Optional[logging.Logger] = None,
    ) -> "ReferenceGenome":
        """
        Load a reference genome from a FASTA file.

        Records are added in file order; each identifier (first word of the
        header line) becomes a contig name and the sequence is upper-cased.
        Either the whole file loads or an exception is raised; a partially
        loaded genome is never returned.

        Args:
            fasta_fn: FASTA path, gzip allowed (see refgenome.decoding)
            opener: Callable returning a binary stream for the path
            logger: Optional logger for the returned genome

        Returns:
            Fully populated ReferenceGenome

        Raises:
            OSError: If the file cannot be opened or read, including
                corrupt gzip data
            EOFError: If a gzip stream is truncated
            FastaFormatError: If a record is malformed or has no identifier
            DuplicateContigError: If two records share an identifier

        Examples:
            >>> genome = ReferenceGenome.from_fasta("reference.fa.gz")
            >>> genome.contig_keys
            ('chr1', 'chr2')
        """
        fasta_fn = Path(fasta_fn)
        genome = cls(filename=fasta_fn, logger=logger)
        genome._logger.debug(f"Loading {fasta_fn}...")

        with opener(fasta_fn) as raw_stream, \
             io.TextIOWrapper(raw_stream, encoding=FASTA_TEXT_ENCODING) as handle:
            for record in _parse_records(handle, fasta_fn):
                if not record.id:
                    raise FastaFormatError(
                        f"record #{len(genome) + 1} has no identifier", fasta_fn
                    )
                sequence = str(record.seq).encode(FASTA_TEXT_ENCODING)
                genome._insert(record.id, sequence.upper())

        genome._logger.debug(f"Finished loading {len(genome)} contigs.")
        return genome

    def _insert(self, contig_key: str, normalized: bytes) -> None:
        if contig_key in self._contig_map:
            raise DuplicateContigError(contig_key)
        self._contig_keys.append(contig_key)
        self._contig_map[contig_key] = normalized

    def add_contig(self, contig_key: str, contig_sequence: SequenceLike) -> None:
        """
        Add a new contig to the reference genome.

        Args:
            contig_key: Name of the contig
            contig_sequence: Sequence to add; it is upper-cased automatically

        Raises:
            DuplicateContigError: If contig_key is already present. The
                genome is left unchanged.
        """
        self._insert(contig_key, normalize_sequence(contig_sequence))

    @property
    def filename(self) -> Optional[Path]:
        """Path the genome was loaded from; None if built in memory."""
        return self._filename

    @property
    def contig_keys(self) -> Tuple[str, ...]:
        """Contig names in the order they were added."""
        return tuple(self._contig_keys)

    def _get_contig(self, chromosome: str) -> bytes:
        try:
            return self._contig_map[chromosome]
        except KeyError:
            raise ContigNotFoundError(chromosome) from None

    def contig_length(self, chromosome: str) -> int:
        """Length of a contig in bases."""
        return len(self._get_contig(chromosome))

    def contig_lengths(self) -> "OrderedDict[str, int]":
        """Map of contig name to length, in load order."""
        return OrderedDict(
            (key, len(self._contig_map[key])) for key in self._contig_keys
        )

    def get_slice(self, chromosome: str, start: int, end: int) -> memoryview:
        """
        Retrieve a reference slice from 0-based coordinates.

        If start or end goes past the contig length it is truncated to the
        contig length and a warning is logged.

        Args:
            chromosome: Contig to slice from
            start: 0-based start index (included)
            end: 0-based end index (excluded)

        Returns:
            Read-only view of the requested bases (possibly empty)

        Raises:
            ContigNotFoundError: If chromosome is not in the genome
            InvalidRangeError: If start > end or either coordinate is negative

        Examples:
            >>> genome.get_slice("chr1", 3, 8).tobytes()
            b'TACGT'
        """
        full_contig = self._get_contig(chromosome)
        if start < 0 or end < 0 or start > end:
            raise InvalidRangeError(chromosome, start, end)

        contig_len = len(full_contig)
        truncated_start = start
        if start > contig_len:
            self._logger.warning(
                f"Received get_slice({chromosome!r}, {start}, {end}), "
                f"truncated start to {contig_len}"
            )
            truncated_start = contig_len

        truncated_end = end
        if end > contig_len:
            self._logger.warning(
                f"Received get_slice({chromosome!r}, {start}, {end}), "
                f"truncated end to {contig_len}"
            )
            truncated_end = contig_len

        return memoryview(full_contig)[truncated_start:truncated_end]

    def get_full_chromosome(self, chromosome: str) -> memoryview:
        """
        Retrieve a full contig by name.

        Raises:
            ContigNotFoundError: If chromosome is not in the genome
        """
        return memoryview(self._get_contig(chromosome))

    def __contains__(self, chromosome: object) -> bool:
        return chromosome in self._contig_map

    def __len__(self) -> int:
        return len(self._contig_keys)

    def __iter__(self) -> Iterator[str]:
        return iter(self.contig_keys)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(filename={self._filename!r}, "
            f"contigs={len(self)})"
        )
