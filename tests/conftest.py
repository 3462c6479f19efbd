"""
Pytest configuration and fixtures for reference genome tests.
"""

import gzip
import sys
import tempfile
from pathlib import Path

import pytest

# Add scripts directory to path for imports
scripts_dir = Path(__file__).parent.parent / "scripts"
sys.path.insert(0, str(scripts_dir))


# ============================================================================
# Path Fixtures
# ============================================================================

@pytest.fixture
def project_root():
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ============================================================================
# FASTA Fixtures
# ============================================================================

@pytest.fixture
def sample_fasta_content():
    """Two-contig reference: chr1 = ACGTACGT, chr2 = ACCATGTA."""
    return """\
>chr1 test contig one
ACGT
acgt
>chr2
ACCATGTA
"""


@pytest.fixture
def sample_fasta_file(temp_dir, sample_fasta_content):
    """Create a plain-text FASTA file."""
    fasta_path = temp_dir / "test_reference.fa"
    fasta_path.write_text(sample_fasta_content)
    return fasta_path


@pytest.fixture
def sample_fasta_gz_file(temp_dir, sample_fasta_content):
    """Create a gzip-compressed FASTA file with the same content."""
    fasta_path = temp_dir / "test_reference.fa.gz"
    with gzip.open(fasta_path, "wt") as f:
        f.write(sample_fasta_content)
    return fasta_path


@pytest.fixture
def multi_member_gz_file(temp_dir):
    """Create a gzip file made of independently compressed members, split mid-record."""
    fasta_path = temp_dir / "multi_member.fa.gz"
    members = [b">chr1\nACGT", b"ACGT\n>chr2\n", b"ACCATGTA\n"]
    fasta_path.write_bytes(b"".join(gzip.compress(member) for member in members))
    return fasta_path


@pytest.fixture
def write_fasta(temp_dir):
    """Factory fixture writing FASTA text to a file in the temp directory."""
    def _write(content, name="custom.fa"):
        fasta_path = temp_dir / name
        if isinstance(content, bytes):
            fasta_path.write_bytes(content)
        else:
            fasta_path.write_text(content)
        return fasta_path
    return _write


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def sample_config(sample_fasta_gz_file):
    """Provide a sample configuration dictionary."""
    return {
        "reference": {
            "fasta": str(sample_fasta_gz_file),
            "detect_compression": "extension",
        },
        "logging": {
            "level": "DEBUG",
            "log_file": None,
        },
        "output": {
            "summary_tsv": "contig_lengths.tsv",
        },
    }
