"""
Currency symbol canonicalization for recognized bill text.

OCR output spells currencies many ways (Rs., R5, INR, USD after the
number, symbols glued to digits, comma thousands separators). These
rewrites bring the text to a fixed form the token extractor relies on.
"""

import re
from typing import List, Tuple, Pattern

from src.utils.logger import get_logger

logger = get_logger(__name__)

CURRENCY_SYMBOLS = "₹$€£"

# Applied in order
_REWRITES: List[Tuple[Pattern, str]] = [
    # Rupee spellings before a number, including common OCR misreads
    (re.compile(r"\b(?:Rs|RS|R5|P5|rs)\.?[ \t]*(?=\d)"), "₹ "),
    (re.compile(r"(?<=\d)[ \t]*(?:INR|inr)\b"), " ₹"),
    (re.compile(r"\$[ \t]*(?=\d)"), "$ "),
    (re.compile(r"(?<=\d)[ \t]*USD\b"), " $"),
    (re.compile(r"€[ \t]*(?=\d)"), "€ "),
    (re.compile(r"(?<=\d)[ \t]*EUR\b"), " €"),
    (re.compile(r"£[ \t]*(?=\d)"), "£ "),
    (re.compile(r"(?<=\d)[ \t]*GBP\b"), " £"),
]

_THOUSANDS = re.compile(r"(?<![\d.])\d{1,3}(?:,\d{3})+(?![\d,])")
_SYMBOL_THEN_DIGIT = re.compile(rf"([{CURRENCY_SYMBOLS}])[ \t]*(\d)")
_DIGIT_THEN_SYMBOL = re.compile(rf"(\d)[ \t]*([{CURRENCY_SYMBOLS}])")


def normalize_currency_symbols(text: str) -> str:
    """
    Canonicalize currency markers and thousands separators.
    
    Args:
        text: Raw recognized text.
        
    Returns:
        Text with ₹/$/€/£ separated from digits by one space and
        comma-grouped numbers joined (``1,902.05`` becomes ``1902.05``).
        
    Example:
        >>> normalize_currency_symbols("TOTAL Rs.1,902.05")
        'TOTAL ₹ 1902.05'
    """
    if not text:
        return ""
    
    for pattern, replacement in _REWRITES:
        text = pattern.sub(replacement, text)
    
    text = _THOUSANDS.sub(lambda m: m.group(0).replace(",", ""), text)
    text = _SYMBOL_THEN_DIGIT.sub(r"\1 \2", text)
    text = _DIGIT_THEN_SYMBOL.sub(r"\1 \2", text)
    
    logger.debug(f"Normalized currency symbols ({len(text)} chars)")
    return text
