"""
Rule-Based Amount Classification.

Used when the text-generation backend is unavailable or returns nothing
usable. Each candidate amount is typed from the keywords on the line
that prints it; an amount whose line carries no known keyword is
dropped rather than guessed.

Author: ML Engineering Team
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from config import get_config
from src.utils.helpers import amount_variants, mentions_amount
from src.utils.logger import get_logger
from .classification_result import (
    AmountType,
    ClassificationMethod,
    ClassificationResult,
    ClassifiedAmount,
)

# Initialize module logger
logger = get_logger(__name__)


@dataclass(frozen=True)
class FallbackRule:
    """
    One keyword rule.
    
    Attributes:
        amount_type: Category assigned on a match
        keywords: Lowercase substrings, any of which matches
        confidence: Confidence attached to the classified amount
        excludes: Substrings that veto the match
    """
    amount_type: AmountType
    keywords: Tuple[str, ...]
    confidence: float
    excludes: Tuple[str, ...] = ()
    
    def matches(self, line: str) -> bool:
        """Check a lowercased line against this rule."""
        if any(word in line for word in self.excludes):
            return False
        return any(word in line for word in self.keywords)


# Priority order, first match wins
FALLBACK_RULES: List[FallbackRule] = [
    FallbackRule(AmountType.MRP, ("mrp", "maximum retail"), 0.8),
    FallbackRule(
        AmountType.OTHER_CHARGES,
        ("check up", "examination", "consultation", "procedure",
         "service", "registration", "room"),
        0.8
    ),
    FallbackRule(AmountType.DUE, ("amount due", "due"), 0.9),
    FallbackRule(AmountType.DISCOUNT, ("discount", "saving"), 0.8),
    FallbackRule(AmountType.TOTAL, ("total",), 0.9, excludes=("sub",)),
    FallbackRule(AmountType.SUBTOTAL, ("sub total", "subtotal"), 0.9),
    FallbackRule(AmountType.PAID, ("amount paid", "paid"), 0.9),
    FallbackRule(AmountType.BALANCE, ("balance",), 0.9),
    FallbackRule(AmountType.TAX, ("tax", "gst", "cgst", "sgst", "igst"), 0.7),
    FallbackRule(AmountType.CHARGES, ("charges", "charge"), 0.7),
]


def find_amount_line(text: str, value: float) -> Optional[str]:
    """
    First line printing an amount.
    
    The two-decimal spelling is searched first, then the plain one.
    
    Args:
        text: Bill text.
        value: Amount to look for.
        
    Returns:
        The matching line, or None.
        
    Example:
        >>> find_amount_line("TOTAL 1745.00\\nSUB TOTAL 745.00", 745.0)
        'SUB TOTAL 745.00'
    """
    lines = (text or "").splitlines()
    for literal in amount_variants(value):
        for line in lines:
            if mentions_amount(line, literal):
                return line
    return None


class FallbackClassifier:
    """
    Deterministic keyword classifier.
    
    Only the top ``top_n`` candidates (by value) are considered. The
    overall confidence is fixed, reflecting lower reliability than the
    model path.
    
    Example:
        >>> classifier = FallbackClassifier()
        >>> result = classifier.classify([1902.05], "TOTAL 1902.05")
        >>> result.amounts[0].type
        <AmountType.TOTAL: 'total'>
    """
    
    def __init__(
        self,
        rules: Optional[List[FallbackRule]] = None,
        top_n: Optional[int] = None,
        confidence: Optional[float] = None
    ) -> None:
        self.rules = rules or FALLBACK_RULES
        self.top_n = top_n if top_n is not None else get_config(
            "classification.fallback.top_n", 5
        )
        self.confidence = confidence if confidence is not None else get_config(
            "classification.fallback.confidence", 0.6
        )
    
    def classify(self, amounts: Sequence[float], text: str) -> ClassificationResult:
        """
        Classify candidates from line keywords.
        
        Args:
            amounts: Candidate amounts.
            text: Bill text.
            
        Returns:
            ClassificationResult with method "fallback".
        """
        top = sorted(amounts, reverse=True)[:self.top_n]
        classified = []
        
        for value in top:
            amount = self.classify_one(value, text)
            if amount is not None:
                classified.append(amount)
        
        logger.info(
            f"Fallback classification: {len(classified)}/{len(top)} amounts typed"
        )
        
        return ClassificationResult(
            amounts=classified,
            confidence=self.confidence,
            method=ClassificationMethod.FALLBACK
        )
    
    def classify_one(self, value: float, text: str) -> Optional[ClassifiedAmount]:
        """Type a single amount, or return None without keyword evidence."""
        line = find_amount_line(text, value)
        if line is None:
            logger.debug(f"No line prints {value}, dropped")
            return None
        
        lowered = line.lower()
        for rule in self.rules:
            if rule.matches(lowered):
                return ClassifiedAmount(rule.amount_type, value, rule.confidence)
        
        logger.debug(f"No keyword on line {line.strip()!r} for {value}, dropped")
        return None
