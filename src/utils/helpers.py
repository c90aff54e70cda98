"""
Helper Utilities Module.

Small, generic helpers shared by the pipeline stages.

Functions:
    - ensure_directory: Create directory if it doesn't exist
    - get_file_extension: Extract file extension safely
    - generate_timestamp: Generate formatted timestamps
    - format_amount: Render an amount the way bills print it
    - amount_variants: Literal spellings of an amount
    - mentions_amount: Digit-boundary amount search in a line
"""

import re
from datetime import datetime
from pathlib import Path
from typing import List, Union


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.
    
    Args:
        path: Directory path to ensure exists.
        
    Returns:
        Path object pointing to the directory.
        
    Example:
        >>> ensure_directory("outputs/results")
        PosixPath('outputs/results')
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def get_file_extension(filepath: Union[str, Path]) -> str:
    """
    Extract the lowercase file extension (including the dot).
    
    Example:
        >>> get_file_extension("bill.JPG")
        ".jpg"
    """
    return Path(filepath).suffix.lower()


def generate_timestamp(format_str: str = "%Y%m%d_%H%M%S") -> str:
    """Generate a formatted timestamp string."""
    return datetime.now().strftime(format_str)


def format_amount(value: float) -> str:
    """
    Render an amount without a trailing ".0" for whole numbers.
    
    Example:
        >>> format_amount(1745.0)
        "1745"
        >>> format_amount(157.05)
        "157.05"
    """
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def amount_variants(value: float) -> List[str]:
    """
    Literal spellings of an amount as it may appear on a bill.
    
    Returns the two-decimal form first, then the plain form.
    
    Example:
        >>> amount_variants(1745.0)
        ["1745.00", "1745"]
    """
    variants = [f"{value:.2f}"]
    plain = format_amount(value)
    if plain not in variants:
        variants.append(plain)
    return variants


def mentions_amount(line: str, literal: str) -> bool:
    """
    Check whether a line prints the given amount literal.
    
    Matching respects digit boundaries, so "745.00" is not found
    inside "1745.00" and "745" is not found inside "745.50".
    """
    pattern = rf"(?<![\d.]){re.escape(literal)}(?!\d|\.\d)"
    return re.search(pattern, line) is not None
