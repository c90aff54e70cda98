"""
Billing term detection.

Flags which domain keywords appear in a bill's text. The flags ground
classification in textual evidence: a category whose terms never appear
is not assigned.
"""

import re
from typing import Dict, List

from src.utils.logger import get_logger
from .classification_result import AmountType

logger = get_logger(__name__)

TERM_PATTERNS: Dict[str, re.Pattern] = {
    "mrp": re.compile(r"\bmrp\b|maximum\s+retail\s+price"),
    "total": re.compile(r"\btotal\b"),
    "subtotal": re.compile(r"\bsub\s*total\b"),
    "discount": re.compile(r"\bdiscount\b"),
    "tax": re.compile(r"\btax\b|\b[csi]?gst\b"),
    "due": re.compile(r"\bdue\b|amount\s+due"),
    "paid": re.compile(r"\bpaid\b|amount\s+paid"),
    "balance": re.compile(r"\bbalance\b"),
    "charges": re.compile(r"\bcharges?\b"),
    "registration": re.compile(r"\bregistration\b"),
    "consultation": re.compile(r"\bconsult|\bexamination\b"),
    "room": re.compile(r"\broom\b"),
    "service": re.compile(r"\bservice\b"),
}

# Terms that count as evidence for each category
EVIDENCE_TERMS: Dict[AmountType, List[str]] = {
    AmountType.TOTAL: ["total"],
    AmountType.SUBTOTAL: ["subtotal"],
    AmountType.TAX: ["tax"],
    AmountType.DUE: ["due"],
    AmountType.PAID: ["paid"],
    AmountType.BALANCE: ["balance"],
    AmountType.DISCOUNT: ["discount"],
    AmountType.MRP: ["mrp"],
    AmountType.CHARGES: ["charges"],
    AmountType.OTHER_CHARGES: ["service", "registration", "consultation", "room", "charges"],
}


class TermDetector:
    """
    Detects billing terms in text.
    
    Example:
        >>> TermDetector().detect("SUB TOTAL 745.00\\nTAX 9% 157.05")
        {'total': True, 'subtotal': True, 'tax': True}
    """
    
    def __init__(self, patterns: Dict[str, re.Pattern] = None) -> None:
        self.patterns = patterns or TERM_PATTERNS
    
    def detect(self, text: str) -> Dict[str, bool]:
        """
        Find the terms present in a text.
        
        Args:
            text: Bill text.
            
        Returns:
            Mapping of present term names to True; absent terms are omitted.
        """
        lowered = (text or "").lower()
        terms = {
            name: True
            for name, pattern in self.patterns.items()
            if pattern.search(lowered)
        }
        logger.debug(f"Detected terms: {sorted(terms)}")
        return terms
    
    @staticmethod
    def has_evidence(amount_type: AmountType, terms: Dict[str, bool]) -> bool:
        """Whether any evidence term of a category was detected."""
        return any(terms.get(term) for term in EVIDENCE_TERMS[amount_type])
