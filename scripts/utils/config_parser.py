#!/usr/bin/env python3
"""
Reference Genome Configuration Parser

Parses YAML configuration files and exports values as environment variables
or shell-compatible format for use by bash scripts.

Usage:
    # Get single value
    python config_parser.py config.yaml --get reference.fasta

    # Export all as shell variables
    python config_parser.py config.yaml --export

    # Validate configuration
    python config_parser.py config.yaml --validate

    # As Python module
    from utils.config_parser import load_config, get_nested
    config = load_config("config.yaml")
    fasta = get_nested(config, "reference.fasta")
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

ENV_PREFIX = "REFGENOME_"

DETECTION_MODES = ("extension", "magic")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULTS: Dict[str, Any] = {
    "reference.detect_compression": "extension",
    "logging.level": "INFO",
}


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Dictionary containing configuration values

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML parsing fails
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(path, 'r') as f:
        config = yaml.safe_load(f)

    if config is None:
        return {}

    return config


def get_nested(config: Dict[str, Any], key_path: str, default: Any = None) -> Any:
    """
    Get a nested value from config using dot notation.

    Falls back to the built-in default for known keys when no explicit
    default is given.

    Examples:
        >>> config = {"reference": {"fasta": "/data/ref.fa.gz"}}
        >>> get_nested(config, "reference.fasta")
        '/data/ref.fa.gz'
        >>> get_nested(config, "logging.level")
        'INFO'
        >>> get_nested(config, "reference.missing", "default")
        'default'
    """
    if default is None:
        default = DEFAULTS.get(key_path)

    value = config
    for key in key_path.split('.'):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


def flatten_config(config: Dict[str, Any], prefix: str = "") -> Dict[str, str]:
    """
    Flatten nested config into flat dictionary with dot-notation keys.

    Examples:
        >>> flatten_config({"reference": {"fasta": "/data/ref.fa"}})
        {'reference.fasta': '/data/ref.fa'}
    """
    flat = {}

    for key, value in config.items():
        full_key = f"{prefix}.{key}" if prefix else key

        if isinstance(value, dict):
            flat.update(flatten_config(value, full_key))
        elif value is None:
            flat[full_key] = ""
        elif isinstance(value, bool):
            flat[full_key] = "true" if value else "false"
        else:
            flat[full_key] = str(value)

    return flat


def to_shell_var_name(key_path: str) -> str:
    """
    Convert dot-notation key to shell variable name.

    Examples:
        >>> to_shell_var_name("reference.detect_compression")
        'REFGENOME_REFERENCE_DETECT_COMPRESSION'
    """
    return ENV_PREFIX + key_path.upper().replace(".", "_").replace("-", "_")


def export_as_shell(config: Dict[str, Any]) -> str:
    """Export config as shell variable assignments."""
    lines = []

    for key, value in sorted(flatten_config(config).items()):
        var_name = to_shell_var_name(key)
        # Escape single quotes in value
        escaped_value = str(value).replace("'", "'\"'\"'")
        lines.append(f"export {var_name}='{escaped_value}'")

    return "\n".join(lines)


def validate_config(config: Dict[str, Any], check_files: bool = True) -> Tuple[bool, List[str]]:
    """
    Validate configuration for required fields.

    Args:
        config: Configuration dictionary
        check_files: Also check that the reference FASTA exists

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    errors = []

    fasta = get_nested(config, "reference.fasta")
    if not fasta or str(fasta).startswith("/path/to"):
        errors.append("Missing or placeholder: reference FASTA (reference.fasta)")
    elif check_files and not Path(fasta).exists():
        errors.append(f"Reference file not found: {fasta} (reference.fasta)")

    detection = get_nested(config, "reference.detect_compression")
    if detection not in DETECTION_MODES:
        errors.append(
            f"reference.detect_compression must be one of {', '.join(DETECTION_MODES)}, "
            f"got {detection}"
        )

    level = get_nested(config, "logging.level")
    if str(level).upper() not in LOG_LEVELS:
        errors.append(f"logging.level must be one of {', '.join(LOG_LEVELS)}, got {level}")

    return len(errors) == 0, errors


def print_config_summary(config: Dict[str, Any]) -> None:
    """Print every configured key, with built-in defaults filled in."""
    flat = {key: str(value) for key, value in DEFAULTS.items()}
    flat.update(flatten_config(config))

    print("Reference Genome Configuration")
    width = max(len(key) for key in flat)
    for key in sorted(flat):
        print(f"  {key.ljust(width)}  {flat[key] or 'not set'}")


def main():
    parser = argparse.ArgumentParser(
        description="Reference Genome Configuration Parser",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument("config", help="Path to YAML configuration file")

    action = parser.add_mutually_exclusive_group()
    action.add_argument(
        "--get",
        metavar="KEY",
        help="Get single value using dot notation (e.g., reference.fasta)"
    )
    action.add_argument(
        "--export",
        action="store_true",
        help="Export all config as shell variable assignments"
    )
    action.add_argument(
        "--validate",
        action="store_true",
        help="Validate configuration and report errors"
    )
    action.add_argument(
        "--summary",
        action="store_true",
        help="Print configuration summary (default)"
    )

    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except (OSError, yaml.YAMLError) as e:
        print(f"Error loading {args.config}: {e}", file=sys.stderr)
        sys.exit(1)

    if args.get:
        value = get_nested(config, args.get)
        if value is None:
            print(f"Key not found: {args.get}", file=sys.stderr)
            sys.exit(1)
        print(value)
    elif args.export:
        print(export_as_shell(config))
    elif args.validate:
        is_valid, errors = validate_config(config)
        if not is_valid:
            print("Configuration errors:", file=sys.stderr)
            for error in errors:
                print(f"  - {error}", file=sys.stderr)
            sys.exit(1)
        print("Configuration is valid!")
    else:
        print_config_summary(config)


if __name__ == "__main__":
    main()
