"""
Response Building Module.

This module serializes one detection request into its outcome: the
staged success payload echoing every pipeline stage, or a
``{status, reason}`` failure payload, each with an HTTP-style status
code.

Success payload:
    {
        "step1_ocr_extraction": {"raw_tokens", "currency_hint", "confidence"},
        "step2_normalization": {"normalized_amounts", "normalization_confidence"},
        "step3_classification": {"amounts", "confidence"},
        "step4_final_output": {"currency", "amounts", "status": "ok"}
    }

Author: ML Engineering Team
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List

from src.utils.logger import get_logger
from src.utils.exceptions import NoAmountsFoundError, NoValidAmountsError
from src.ocr_engine.extraction_result import NO_AMOUNTS_FOUND, ExtractionResult
from src.postprocessor.processor import NormalizationResult
from src.model_inference.classification_result import AmountType, ClassificationResult

# Initialize module logger
logger = get_logger(__name__)

STATUS_OK = 200
STATUS_NO_AMOUNTS = 400
STATUS_ERROR = 500


@dataclass(frozen=True)
class FinalAmount:
    """
    A classified amount with its source line.
    
    Attributes:
        type: Amount category
        value: Amount value
        source: Supporting line of bill text (or synthetic citation)
    """
    type: AmountType
    value: float
    source: str
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type.value,
            'value': self.value,
            'source': f"text: '{self.source}'"
        }


@dataclass
class DetectionOutcome:
    """
    Serialized result of one detection request.
    
    Attributes:
        status_code: 200, 400 or 500
        payload: JSON-ready response body
    """
    status_code: int
    payload: Dict[str, Any] = field(default_factory=dict)
    
    @property
    def ok(self) -> bool:
        return self.status_code == STATUS_OK
    
    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.payload, indent=indent, ensure_ascii=False)


def build_success(
    extraction: ExtractionResult,
    normalization: NormalizationResult,
    classification: ClassificationResult,
    final_amounts: List[FinalAmount]
) -> DetectionOutcome:
    """
    Build the staged 200 response.
    
    Args:
        extraction: Stage one result.
        normalization: Stage two result.
        classification: Stage three result.
        final_amounts: Provenance-annotated amounts.
        
    Returns:
        DetectionOutcome with status 200.
    """
    payload = {
        'step1_ocr_extraction': extraction.to_dict(),
        'step2_normalization': normalization.to_dict(),
        'step3_classification': classification.to_dict(),
        'step4_final_output': {
            'currency': extraction.currency_hint,
            'amounts': [amount.to_dict() for amount in final_amounts],
            'status': 'ok'
        }
    }
    return DetectionOutcome(STATUS_OK, payload)


def build_failure(reason: str, status: str = NO_AMOUNTS_FOUND,
                  status_code: int = STATUS_NO_AMOUNTS) -> DetectionOutcome:
    """Build a ``{status, reason}`` failure response."""
    return DetectionOutcome(status_code, {'status': status, 'reason': reason})


def outcome_from_error(error: Exception) -> DetectionOutcome:
    """
    Map an exception to its failure response.
    
    "No amounts" errors become 400 responses; everything else is 500.
    Tracebacks never reach the payload.
    """
    if isinstance(error, (NoAmountsFoundError, NoValidAmountsError)):
        return build_failure(error.reason)
    
    reason = getattr(error, 'message', None) or str(error) or type(error).__name__
    logger.error(f"Detection failed: {reason}")
    return build_failure(reason, status='error', status_code=STATUS_ERROR)
