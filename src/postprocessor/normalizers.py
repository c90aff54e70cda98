"""
Amount Cleaning Module.

This module turns a single raw token, or a value proposed by the
text-generation backend, into a validated non-negative number. OCR
commonly confuses letters with digits (l/I for 1, O for 0, S for 5, Z for
2, B for 8); those are repaired before parsing.

Author: ML Engineering Team
"""

import math
import re
from typing import Iterable, List, Optional, Union

from config import get_config
from src.utils.logger import get_logger
from src.utils.exceptions import InvalidAmountError

# Initialize module logger
logger = get_logger(__name__)


class AmountCleaner:
    """
    Cleans raw amount tokens into floats.
    
    Cleaning is total-or-reject: garbage never becomes zero, it raises
    InvalidAmountError. Zero itself is a legitimate amount (zero-value
    discounts) unless ``cleaning.allow_zero`` is turned off.
    
    Attributes:
        allow_zero: Whether 0 is an acceptable result
        
    Example:
        >>> cleaner = AmountCleaner()
        >>> cleaner.clean("$1,234.50")
        1234.5
        >>> cleaner.clean("Rs.7O5")
        705.0
        >>> cleaner.clean("-45")
        Traceback (most recent call last):
        ...
        InvalidAmountError: Invalid amount after cleaning: '-45'
    """
    
    CURRENCY_SYMBOLS = re.compile(r"[₹$€£¥¢¤]")
    CURRENCY_CODES = re.compile(r"USD|INR|EUR|GBP", re.IGNORECASE)
    CURRENCY_WORDS = re.compile(
        r"\b(?:Rs|dollar|rupee|euro|pound)s?\b\.?",
        re.IGNORECASE
    )
    SEPARATORS = re.compile(r"[,\s]")
    
    # OCR letter/digit confusions
    DIGIT_REPAIRS = [
        (re.compile(r"[lI]"), "1"),
        (re.compile(r"O"), "0"),
        (re.compile(r"S"), "5"),
        (re.compile(r"Z"), "2"),
        (re.compile(r"B"), "8"),
    ]
    
    NON_NUMERIC = re.compile(r"[^\d.]")
    LEADING_NUMBER = re.compile(r"^(?:\d+(?:\.\d*)?|\.\d+)")
    
    def __init__(self, allow_zero: Optional[bool] = None) -> None:
        """Initialize the cleaner with configuration."""
        self.allow_zero = (
            allow_zero if allow_zero is not None
            else get_config("cleaning.allow_zero", True)
        )
    
    def clean(self, raw: Union[str, int, float]) -> float:
        """
        Clean one raw amount.
        
        Args:
            raw: Token text, or a number proposed by the model.
            
        Returns:
            Non-negative float.
            
        Raises:
            InvalidAmountError: If nothing numeric remains or the amount
                               is negative.
        """
        if isinstance(raw, bool) or raw is None:
            raise InvalidAmountError(raw, "not an amount")
        
        if isinstance(raw, (int, float)):
            if not math.isfinite(raw) or raw < 0:
                raise InvalidAmountError(raw, "negative or not a finite number")
            return self._check_zero(raw, float(raw))
        
        if not isinstance(raw, str):
            raise InvalidAmountError(raw, f"unsupported type {type(raw).__name__}")
        
        raw_text = raw
        
        text = self.CURRENCY_SYMBOLS.sub("", raw_text)
        text = self.CURRENCY_CODES.sub("", text)
        text = self.CURRENCY_WORDS.sub("", text)
        text = self.SEPARATORS.sub("", text)
        
        if text.startswith(("-", "−")):
            raise InvalidAmountError(raw, "negative amount")
        
        for pattern, digit in self.DIGIT_REPAIRS:
            text = pattern.sub(digit, text)
        text = self.NON_NUMERIC.sub("", text)
        
        match = self.LEADING_NUMBER.match(text)
        if not match:
            raise InvalidAmountError(raw, "no numeric content")
        
        return self._check_zero(raw, float(match.group(0)))
    
    def _check_zero(self, raw: Union[str, int, float], value: float) -> float:
        if value == 0 and not self.allow_zero:
            raise InvalidAmountError(raw, "zero amounts are disabled")
        return value
    
    def clean_many(self, raws: Iterable[Union[str, int, float]]) -> List[float]:
        """
        Clean several amounts, dropping the ones that fail.
        
        Args:
            raws: Raw tokens or model values.
            
        Returns:
            Cleaned values in input order.
        """
        cleaned = []
        for raw in raws:
            try:
                cleaned.append(self.clean(raw))
            except InvalidAmountError as e:
                logger.debug(f"Dropped amount: {e}")
        return cleaned
