"""
Numeric Token Extraction.

This module pulls amount-like tokens out of canonicalized bill text and
scores how much the text looks like a bill at all. Dates, phone numbers,
reference codes, years and stray quantities are filtered out here so the
later stages only see plausible money values.

Author: ML Engineering Team
"""

import re
from typing import List, Optional, Tuple

from config import get_config
from src.utils.logger import get_logger
from .extraction_result import ExtractionResult

# Initialize module logger
logger = get_logger(__name__)

NOISY_DOCUMENT_REASON = "document too noisy"

# Dates are matched as whole alternatives so their parts never become tokens
_TOKEN_PATTERN = re.compile(
    r"\b(?P<date>\d{1,4}[-/]\d{1,2}[-/]\d{1,4})\b"
    r"|\b(?P<number>\d+(?:\.\d+)?)\b(?P<percent>%)?"
)

_PHONE_PATTERN = re.compile(r"^\d{10,}$")
_CODE_PATTERN = re.compile(r"^[A-Z0-9]{5,}$", re.IGNORECASE)
_YEAR_PATTERN = re.compile(r"^(?:19|20)\d{2}$")
_SINGLE_DIGIT_PATTERN = re.compile(r"^\d$")

# Checked in priority order
CURRENCY_MARKERS: List[Tuple[str, re.Pattern]] = [
    ("USD", re.compile(r"\$|\bUSD\b|\bdollars?\b", re.IGNORECASE)),
    ("INR", re.compile(r"₹|\bINR\b|\bRs\b\.?|\brupees?\b", re.IGNORECASE)),
    ("EUR", re.compile(r"€|\bEUR\b|\beuros?\b", re.IGNORECASE)),
    ("GBP", re.compile(r"£|\bGBP\b|\bpounds?\b", re.IGNORECASE)),
]

BILLING_KEYWORDS = re.compile(
    r"(?:total|amount|paid|due|balance|discount|gross|bill|payable|charges|fee|"
    r"tax|gst|cgst|sgst|igst|shipping|handling|delivery|mrp|subtotal|invoice)",
    re.IGNORECASE
)


class TokenExtractor:
    """
    Extracts numeric tokens, a currency hint and a confidence from text.
    
    Confidence is 0.4 for having at least one token, plus 0.3 for
    currency evidence, plus 0.3 for a billing keyword, halved for texts
    of at most ``short_text_length`` characters.
    
    Example:
        >>> extractor = TokenExtractor()
        >>> result = extractor.extract("SUB TOTAL $ 745.00")
        >>> result.raw_tokens
        ['745.00']
        >>> result.confidence
        1.0
    """
    
    def __init__(
        self,
        min_confidence: Optional[float] = None,
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
        short_text_length: Optional[int] = None,
        default_currency: Optional[str] = None
    ) -> None:
        self.min_confidence = (
            min_confidence if min_confidence is not None
            else get_config("extraction.min_confidence", 0.3)
        )
        self.min_value = (
            min_value if min_value is not None
            else get_config("extraction.min_value", 0.1)
        )
        self.max_value = (
            max_value if max_value is not None
            else get_config("extraction.max_value", 50000)
        )
        self.short_text_length = (
            short_text_length if short_text_length is not None
            else get_config("extraction.short_text_length", 10)
        )
        self.default_currency = default_currency or get_config(
            "extraction.default_currency", "USD"
        )
    
    def extract(self, text: str, raw_length: Optional[int] = None) -> ExtractionResult:
        """
        Extract amount tokens from canonicalized text.
        
        Args:
            text: Text with currency symbols already canonicalized.
            raw_length: Length of the text before canonicalization. Defaults
                       to ``len(text)``.
            
        Returns:
            ExtractionResult, or a failure marker with reason
            "document too noisy" when nothing usable was found.
        """
        text = text or ""
        stripped = text.strip()
        
        if not stripped:
            logger.info("Empty text, nothing to extract")
            return ExtractionResult.failure(NOISY_DOCUMENT_REASON)
        
        tokens = self.find_tokens(stripped)
        currency_hint, has_currency = self.detect_currency(stripped)
        has_keywords = BILLING_KEYWORDS.search(text) is not None
        
        length = raw_length if raw_length is not None else len(text)
        confidence = self.score(bool(tokens), has_currency, has_keywords, length)
        
        logger.info(
            f"Extracted {len(tokens)} tokens "
            f"(currency={currency_hint}, confidence={confidence})"
        )
        
        if confidence < self.min_confidence or not tokens:
            return ExtractionResult.failure(NOISY_DOCUMENT_REASON)
        
        return ExtractionResult(
            raw_tokens=tokens,
            currency_hint=currency_hint,
            confidence=confidence,
            processed_text=text
        )
    
    def find_tokens(self, text: str) -> List[str]:
        """
        Find numeric tokens that could be amounts.
        
        Args:
            text: Text to scan.
            
        Returns:
            Surviving tokens in order of appearance.
        """
        tokens = []
        
        for match in _TOKEN_PATTERN.finditer(text):
            if match.group('date'):
                logger.debug(f"Dropped date-like token: {match.group('date')}")
                continue
            
            token = match.group('number') + (match.group('percent') or "")
            if self._is_amount_like(token, match.group('number')):
                tokens.append(token)
            else:
                logger.debug(f"Dropped token: {token}")
        
        return tokens
    
    def _is_amount_like(self, token: str, number: str) -> bool:
        if _PHONE_PATTERN.match(number):
            return False
        if _CODE_PATTERN.match(token):
            return False
        if _YEAR_PATTERN.match(token):
            return False
        
        value = float(number)
        
        if value < self.min_value or value > self.max_value:
            return False
        if _SINGLE_DIGIT_PATTERN.match(token) and value < 10:
            return False
        # Stray ratio such as 0.5, not a price
        if 0 < value < 1 and '.' in token:
            return False
        
        return True
    
    def detect_currency(self, text: str) -> Tuple[str, bool]:
        """
        Pick the currency hint for a text.
        
        Args:
            text: Text to scan.
            
        Returns:
            Tuple of (currency code, whether any currency marker was found).
        """
        for code, pattern in CURRENCY_MARKERS:
            if pattern.search(text):
                return code, True
        return self.default_currency, False
    
    def score(
        self,
        has_tokens: bool,
        has_currency: bool,
        has_keywords: bool,
        length: int
    ) -> float:
        """Weighted extraction confidence, rounded to 2 decimals."""
        confidence = (
            (0.4 if has_tokens else 0.0)
            + (0.3 if has_currency else 0.0)
            + (0.3 if has_keywords else 0.0)
        )
        if length <= self.short_text_length:
            confidence *= 0.5
        return round(confidence, 2)
