"""
Amount Classification Module.

This module assigns each candidate amount a category. The
text-generation backend is asked first, constrained by the billing terms
actually present in the text; its answer is validated and every entry
without textual evidence is dropped. Any failure on that path hands the
candidates to the rule-based FallbackClassifier.

Usage:
    from src.model_inference import AmountClassifier
    
    classifier = AmountClassifier(model_client=client)
    result = classifier.classify([1902.05, 157.05], text)

Author: ML Engineering Team
"""

from typing import Any, Dict, Optional, Sequence

from config import get_config
from src.utils.logger import get_logger
from .validators import ClassificationValidator, clamp_confidence
from .classification_result import (
    AmountType,
    ClassificationMethod,
    ClassificationResult,
    ClassifiedAmount,
)
from .fallback_classifier import FallbackClassifier, find_amount_line
from .prompts import build_classification_prompt
from .term_detector import TermDetector

# Initialize module logger
logger = get_logger(__name__)


class AmountClassifier:
    """
    Model-backed classifier with a rule-based fallback.
    
    Attributes:
        model_client: Object exposing ``get_json(prompt)``, or None to
                     always use the fallback
        term_detector: TermDetector instance
        validator: ClassificationValidator instance
        fallback: FallbackClassifier instance
        
    Example:
        >>> classifier = AmountClassifier(model_client=None)
        >>> result = classifier.classify([157.05], "TAX 9% 157.05")
        >>> result.method
        <ClassificationMethod.FALLBACK: 'fallback'>
    """
    
    def __init__(
        self,
        model_client: Optional[Any] = None,
        term_detector: Optional[TermDetector] = None,
        validator: Optional[ClassificationValidator] = None,
        fallback: Optional[FallbackClassifier] = None
    ) -> None:
        """Initialize the classifier with its collaborators."""
        self.model_client = model_client
        self.term_detector = term_detector or TermDetector()
        self.validator = validator or ClassificationValidator()
        self.fallback = fallback or FallbackClassifier()
        self.default_confidence = get_config("classification.default_confidence", 0.8)
    
    def classify(self, amounts: Sequence[float], text: str) -> ClassificationResult:
        """
        Classify candidate amounts.
        
        Args:
            amounts: Candidate set from normalization.
            text: Bill text.
            
        Returns:
            ClassificationResult from the model, or from the fallback when
            the model path fails.
        """
        terms = self.term_detector.detect(text)
        
        if self.model_client is None:
            logger.info("No text-generation backend, using rule-based classification")
            return self.fallback.classify(amounts, text)
        
        try:
            result = self._classify_with_model(amounts, text, terms)
        except Exception as e:
            logger.warning(f"Model classification failed, using fallback: {e!r}")
            return self.fallback.classify(amounts, text)
        
        if result is None:
            return self.fallback.classify(amounts, text)
        
        logger.info(
            f"Model classification: {len(result.amounts)} amounts "
            f"(confidence={result.confidence})"
        )
        return result
    
    def _classify_with_model(
        self,
        amounts: Sequence[float],
        text: str,
        terms: Dict[str, bool]
    ) -> Optional[ClassificationResult]:
        prompt = build_classification_prompt(amounts, terms, text)
        payload = self.model_client.get_json(prompt)
        
        entries = payload.get('amounts') if isinstance(payload, dict) else None
        if not isinstance(entries, list):
            logger.warning("Invalid classification response: 'amounts' is not a list")
            return None
        
        validated = self.validator.validate(entries)
        evidenced = [
            amount for amount in validated
            if self.has_evidence(amount, terms, text)
        ]
        
        if not evidenced:
            logger.warning("No valid classified amounts in model response")
            return None
        
        return ClassificationResult(
            amounts=evidenced,
            confidence=clamp_confidence(payload.get('confidence'), self.default_confidence),
            method=ClassificationMethod.MODEL
        )
    
    def has_evidence(
        self,
        amount: ClassifiedAmount,
        terms: Dict[str, bool],
        text: str
    ) -> bool:
        """
        Whether the text supports an amount's category.
        
        A detected term of the category counts. Line-item charges are
        also supported by their value being printed on some line.
        """
        if TermDetector.has_evidence(amount.type, terms):
            return True
        if amount.type is AmountType.OTHER_CHARGES and find_amount_line(text, amount.value):
            return True
        logger.debug(f"No textual evidence for {amount}, dropped")
        return False
