#!/usr/bin/env python3
"""
Reference Contig Summary

Loads a reference FASTA (plain or .gz), reports contig names and lengths,
and optionally prints a sub-sequence.

Regions are 0-based and end-exclusive (chr1:3-8 gives bases 3..7).
Coordinates past the contig end are truncated with a warning.

Usage:
    python 1_contig_summary.py --reference ref.fa.gz [--output contigs.tsv] [--region chr1:0-100]
    python 1_contig_summary.py --config config.yaml
"""

import os
import sys
import argparse
import csv
import logging
from typing import Optional, Tuple

import yaml

# Path configuration
_SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.dirname(_SCRIPT_DIR))

from refgenome import ReferenceGenome, ReferenceGenomeError, get_stream_opener  # noqa: E402
from utils.config_parser import load_config, get_nested, to_shell_var_name  # noqa: E402
from utils.log_setup import configure_logging  # noqa: E402

# REFGENOME_REFERENCE_FASTA is what `config_parser.py --export` writes
REFERENCE_ENV_VARS = ("REFGENOME_FASTA", to_shell_var_name("reference.fasta"))

logger = logging.getLogger(__name__)


def parse_region(region: str) -> Tuple[str, int, int]:
    """
    Parse a NAME:START-END region string.

    Contig names may contain ':', so the last ':' separates the coordinates.

    Examples:
        >>> parse_region("chr1:3-8")
        ('chr1', 3, 8)
        >>> parse_region("HLA-A*01:01:0-50")
        ('HLA-A*01:01', 0, 50)
    """
    name, sep, coords = region.rpartition(":")
    start, dash, end = coords.partition("-")
    if not sep or not name or not dash:
        raise ValueError(f"Region must look like NAME:START-END, got {region!r}")
    try:
        return name, int(start), int(end)
    except ValueError:
        raise ValueError(f"Region coordinates must be integers, got {region!r}") from None


def reference_from_env() -> Optional[str]:
    """Return the first reference path set in the environment, if any."""
    for var_name in REFERENCE_ENV_VARS:
        if os.environ.get(var_name):
            return os.environ[var_name]
    return None


def write_summary(genome: ReferenceGenome, output_path: str) -> None:
    """Write contig names and lengths as TSV, in load order."""
    with open(output_path, "w", newline="") as f:
        writer = csv.writer(f, delimiter="\t")
        writer.writerow(["contig", "length"])
        for contig, length in genome.contig_lengths().items():
            writer.writerow([contig, length])
    logger.info(f"Wrote {len(genome)} contigs to {output_path}")


def main():
    parser = argparse.ArgumentParser(
        description="Summarize contigs of a reference FASTA",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--reference", help="Reference FASTA (.gz ok); overrides config")
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument(
        "--detect",
        choices=["extension", "magic"],
        help="How to detect gzip input (default: extension)",
    )
    parser.add_argument("--output", help="Write contig lengths to this TSV")
    parser.add_argument("--region", help="Print sequence of NAME:START-END (0-based, end-exclusive)")
    parser.add_argument("--log-level", help="Logging level (default: INFO)")
    args = parser.parse_args()

    config = {}
    if args.config:
        try:
            config = load_config(args.config)
        except (OSError, yaml.YAMLError) as e:
            print(f"Error loading config {args.config}: {e}", file=sys.stderr)
            sys.exit(1)

    try:
        configure_logging(
            args.log_level or get_nested(config, "logging.level"),
            get_nested(config, "logging.log_file"),
        )
    except (OSError, ValueError) as e:
        print(f"Error configuring logging: {e}", file=sys.stderr)
        sys.exit(1)

    reference = args.reference or get_nested(config, "reference.fasta") or reference_from_env()
    if not reference:
        logger.error("No reference given (use --reference, --config or REFGENOME_FASTA)")
        sys.exit(1)

    try:
        opener = get_stream_opener(
            args.detect or get_nested(config, "reference.detect_compression")
        )
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    logger.info(f"Loading reference: {reference}")
    try:
        genome = ReferenceGenome.from_fasta(reference, opener=opener)
    except (OSError, EOFError, ReferenceGenomeError) as e:
        logger.error(f"Failed to load reference: {e}")
        sys.exit(1)

    logger.info(f"Loaded {len(genome)} contigs")
    for contig, length in genome.contig_lengths().items():
        logger.info(f"  {contig}: {length:,} bp")

    output = args.output or get_nested(config, "output.summary_tsv")
    if output:
        write_summary(genome, output)

    if args.region:
        try:
            name, start, end = parse_region(args.region)
            view = genome.get_slice(name, start, end)
        except (ValueError, ReferenceGenomeError) as e:
            logger.error(f"Invalid region: {e}")
            sys.exit(1)
        print(f">{name}:{start}-{end}")
        print(view.tobytes().decode("latin-1"))


if __name__ == "__main__":
    main()
