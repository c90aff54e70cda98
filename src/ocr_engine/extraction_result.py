"""
Extraction Result Data Class.

This module defines the output of the token extraction stage: the
numeric tokens found in a bill's text together with a currency hint and
an extraction confidence, or a terminal "no amounts found" marker.

Author: ML Engineering Team
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Any, List, Optional

NO_AMOUNTS_FOUND = "no_amounts_found"


@dataclass
class ExtractionResult:
    """
    Represents the result of numeric token extraction.
    
    A result is either a success (tokens, hint, confidence) or a failure
    marker carrying ``status`` and ``reason``. Failure markers are terminal:
    callers stop the pipeline rather than retry.
    
    Attributes:
        raw_tokens: Numeric tokens in order of appearance
        currency_hint: One of USD, INR, EUR, GBP
        confidence: Extraction confidence (0-1)
        processed_text: Currency-canonicalized text the tokens came from
        status: "no_amounts_found" for a failure marker, otherwise None
        reason: Human readable failure reason
        
    Example:
        >>> result = ExtractionResult(
        ...     raw_tokens=["745.00", "157.05"],
        ...     currency_hint="USD",
        ...     confidence=1.0
        ... )
        >>> result.is_failure
        False
    """
    raw_tokens: List[str] = field(default_factory=list)
    currency_hint: str = "USD"
    confidence: float = 0.0
    processed_text: str = ""
    
    status: Optional[str] = None
    reason: Optional[str] = None
    
    @classmethod
    def failure(cls, reason: str) -> 'ExtractionResult':
        """Build a terminal failure marker."""
        return cls(status=NO_AMOUNTS_FOUND, reason=reason)
    
    @property
    def is_failure(self) -> bool:
        """Whether this result is a failure marker."""
        return self.status == NO_AMOUNTS_FOUND
    
    def with_ocr_confidence(self, ocr_confidence: Optional[float]) -> 'ExtractionResult':
        """
        Scale the extraction confidence by the recognizer's confidence.
        
        Args:
            ocr_confidence: Text recognition confidence (0-1), or None.
            
        Returns:
            A copy with the combined confidence, rounded to 2 decimals.
            Failure markers and a missing OCR confidence are returned as is.
        """
        if self.is_failure or ocr_confidence is None:
            return self
        return replace(self, confidence=round(self.confidence * ocr_confidence, 2))
    
    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the stage-one response payload.
        
        Returns:
            ``{status, reason}`` for failures, otherwise
            ``{raw_tokens, currency_hint, confidence}``.
        """
        if self.is_failure:
            return {'status': self.status, 'reason': self.reason}
        return {
            'raw_tokens': list(self.raw_tokens),
            'currency_hint': self.currency_hint,
            'confidence': self.confidence
        }
    
    def __repr__(self) -> str:
        if self.is_failure:
            return f"ExtractionResult(status={self.status}, reason={self.reason!r})"
        return (
            f"ExtractionResult(tokens={len(self.raw_tokens)}, "
            f"currency={self.currency_hint}, confidence={self.confidence})"
        )
