"""
Classification Result Data Classes.

This module defines the closed set of amount categories and the records
produced by the classification stage.

Author: ML Engineering Team
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional

from src.utils.helpers import format_amount


class AmountType(str, Enum):
    """Closed set of amount categories found on bills."""
    TOTAL = "total"
    SUBTOTAL = "subtotal"
    TAX = "tax"
    DUE = "due"
    PAID = "paid"
    BALANCE = "balance"
    DISCOUNT = "discount"
    MRP = "mrp"
    CHARGES = "charges"
    OTHER_CHARGES = "other_charges"
    
    @classmethod
    def parse(cls, value: Any) -> Optional['AmountType']:
        """Return the member named by ``value``, or None if there is none."""
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


# Categories the model is asked to use
MODEL_AMOUNT_TYPES = (
    AmountType.TOTAL,
    AmountType.SUBTOTAL,
    AmountType.TAX,
    AmountType.DUE,
    AmountType.OTHER_CHARGES,
)


class ClassificationMethod(str, Enum):
    """Which path produced a classification."""
    MODEL = "model"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ClassifiedAmount:
    """
    One amount with its category.
    
    Attributes:
        type: Amount category
        value: Amount value (non-negative)
        confidence: Per-amount confidence when the producing rule has one
    """
    type: AmountType
    value: float
    confidence: Optional[float] = None
    
    def to_dict(self) -> Dict[str, Any]:
        data = {'type': self.type.value, 'value': self.value}
        if self.confidence is not None:
            data['confidence'] = self.confidence
        return data
    
    def __str__(self) -> str:
        return f"{self.type.value}={format_amount(self.value)}"


@dataclass
class ClassificationResult:
    """
    Output of the classification stage.
    
    Attributes:
        amounts: Classified amounts
        confidence: Overall confidence (0-1)
        method: Whether the model or the rule-based fallback produced it
        
    Example:
        >>> result = ClassificationResult(
        ...     amounts=[ClassifiedAmount(AmountType.TOTAL, 1902.05)],
        ...     confidence=0.9,
        ...     method=ClassificationMethod.MODEL
        ... )
        >>> result.to_dict()['amounts']
        [{'type': 'total', 'value': 1902.05}]
    """
    amounts: List[ClassifiedAmount] = field(default_factory=list)
    confidence: float = 0.0
    method: ClassificationMethod = ClassificationMethod.MODEL
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'amounts': [amount.to_dict() for amount in self.amounts],
            'confidence': self.confidence
        }
    
    def __repr__(self) -> str:
        return (
            f"ClassificationResult(amounts={len(self.amounts)}, "
            f"confidence={self.confidence}, method={self.method.value})"
        )
