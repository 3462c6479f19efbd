# Reference Genome Utilities
"""Common utilities for the reference genome scripts."""

from .config_parser import load_config, get_nested, validate_config
from .log_setup import configure_logging

__all__ = ["load_config", "get_nested", "validate_config", "configure_logging"]
