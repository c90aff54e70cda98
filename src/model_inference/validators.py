"""
Data Validators Module.

This module validates what the text-generation backend returns before
the pipeline trusts it:
    - Confidence values
    - Classified amount entries

Author: ML Engineering Team
"""

import math
from typing import Any, Dict, List, Optional, Tuple

from src.utils.logger import get_logger
from .classification_result import AmountType, ClassifiedAmount

# Initialize module logger
logger = get_logger(__name__)


def is_number(value: Any) -> bool:
    """True for int/float values that are not booleans."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def clamp_confidence(value: Any, default: float) -> float:
    """
    Read a confidence reported by the model.
    
    Args:
        value: Reported value, possibly missing or of the wrong type.
        default: Used when the value is missing, zero or not a number.
        
    Returns:
        Confidence clamped to [0, 1].
        
    Example:
        >>> clamp_confidence(1.4, 0.8)
        1.0
        >>> clamp_confidence("high", 0.8)
        0.8
    """
    if not is_number(value) or value != value or not value:
        return default
    return max(0.0, min(1.0, float(value)))


class ClassificationValidator:
    """
    Validates classified amount entries proposed by the model.
    
    An entry must be a mapping with a ``type`` naming one of the ten
    amount categories and a numeric, non-boolean, non-negative ``value``.
    Invalid entries are dropped, never repaired.
    
    Example:
        >>> validator = ClassificationValidator()
        >>> validator.validate([
        ...     {"type": "total", "value": 1902.05},
        ...     {"type": "grand", "value": 10},
        ...     {"type": "tax", "value": "157.05"},
        ... ])
        [ClassifiedAmount(type=<AmountType.TOTAL: 'total'>, value=1902.05, confidence=None)]
    """
    
    def validate_entry(self, entry: Any) -> Tuple[bool, str]:
        """
        Validate one entry with detailed feedback.
        
        Args:
            entry: One element of the model's ``amounts`` list.
            
        Returns:
            Tuple of (is_valid, message).
        """
        if not isinstance(entry, dict):
            return False, "Entry is not an object"
        
        if AmountType.parse(entry.get('type')) is None:
            return False, f"Unknown amount type: {entry.get('type')!r}"
        
        value = entry.get('value')
        if not is_number(value):
            return False, f"Value is not a number: {value!r}"
        
        if not math.isfinite(value) or value < 0:
            return False, f"Value is negative or not finite: {value!r}"
        
        return True, "Valid"
    
    def validate(self, entries: List[Any]) -> List[ClassifiedAmount]:
        """
        Keep the valid entries.
        
        Args:
            entries: The model's ``amounts`` list.
            
        Returns:
            ClassifiedAmount records for the valid entries, in order.
        """
        valid = []
        for entry in entries:
            ok, message = self.validate_entry(entry)
            if not ok:
                logger.debug(f"Dropped classified entry {entry!r}: {message}")
                continue
            valid.append(ClassifiedAmount(
                type=AmountType(entry['type']),
                value=float(entry['value']),
                confidence=self._entry_confidence(entry)
            ))
        return valid
    
    @staticmethod
    def _entry_confidence(entry: Dict[str, Any]) -> Optional[float]:
        value = entry.get('confidence')
        if not is_number(value):
            return None
        return max(0.0, min(1.0, float(value)))
