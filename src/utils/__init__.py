"""
Utility Module for the Amount Detection Pipeline.

This module provides common utilities used across all other modules:
    - Logging configuration
    - Custom exceptions
    - File and amount-formatting helpers
"""

from .logger import setup_logger, get_logger
from .helpers import (
    ensure_directory,
    get_file_extension,
    generate_timestamp,
    format_amount,
    amount_variants,
    mentions_amount,
)

__all__ = [
    'setup_logger',
    'get_logger',
    'ensure_directory',
    'get_file_extension',
    'generate_timestamp',
    'format_amount',
    'amount_variants',
    'mentions_amount',
]
