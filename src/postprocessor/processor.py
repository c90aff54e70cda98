"""
Normalization Stage Module.

This module provides the NormalizationProcessor, which orchestrates the
second pipeline stage: clean the raw tokens locally, ask the
text-generation backend for the amounts it sees, and aggregate both
(plus the important raw amounts) into the candidate set.

Operations:
    - Clean raw tokens
    - Query the backend for normalized amounts
    - Validate the backend response
    - Aggregate and deduplicate
    - Fall back to local evidence when the backend fails

Author: ML Engineering Team
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from config import get_config
from src.utils.logger import get_logger
from src.utils.exceptions import MalformedBackendResponseError
from src.model_inference.prompts import build_normalization_prompt
from .aggregator import AmountAggregator, decimal_token_values, important_raw_amounts
from .normalizers import AmountCleaner
from src.model_inference.validators import clamp_confidence

# Initialize module logger
logger = get_logger(__name__)


@dataclass
class NormalizationResult:
    """
    Output of the normalization stage.
    
    Attributes:
        normalized_amounts: Candidate set, descending
        normalization_confidence: Confidence (0-1)
        used_model: Whether backend amounts contributed
    """
    normalized_amounts: List[float] = field(default_factory=list)
    normalization_confidence: float = 0.0
    used_model: bool = False
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'normalized_amounts': list(self.normalized_amounts),
            'normalization_confidence': self.normalization_confidence
        }


class NormalizationProcessor:
    """
    Runs the normalization stage.
    
    The backend is optional. Without one, or when it fails or answers
    with something unusable, aggregation runs on local evidence only and
    the confidence drops to ``normalization.fallback_confidence``.
    
    Attributes:
        model_client: Object exposing ``get_json(prompt)``, or None
        cleaner: AmountCleaner instance
        aggregator: AmountAggregator instance
        
    Example:
        >>> processor = NormalizationProcessor(model_client=None)
        >>> result = processor.process(["745.00", "157.05"], "SUB TOTAL 745.00")
        >>> result.normalized_amounts
        [745.0, 157.05]
        >>> result.normalization_confidence
        0.6
    """
    
    def __init__(
        self,
        model_client: Optional[Any] = None,
        cleaner: Optional[AmountCleaner] = None,
        aggregator: Optional[AmountAggregator] = None
    ) -> None:
        """Initialize the stage with its collaborators."""
        self.model_client = model_client
        self.cleaner = cleaner or AmountCleaner()
        self.aggregator = aggregator or AmountAggregator(cleaner=self.cleaner)
        
        self.default_confidence = get_config("normalization.default_confidence", 0.8)
        self.fallback_confidence = get_config("normalization.fallback_confidence", 0.6)
        self.mandatory_min = get_config("normalization.mandatory_min_value", 10)
        
        logger.debug(
            f"NormalizationProcessor initialized "
            f"(backend={'yes' if model_client is not None else 'no'})"
        )
    
    def process(self, raw_tokens: Sequence[str], context: str) -> NormalizationResult:
        """
        Turn raw tokens into the candidate set.
        
        Args:
            raw_tokens: Tokens from the extraction stage.
            context: Canonicalized bill text.
            
        Returns:
            NormalizationResult.
            
        Raises:
            NoValidAmountsError: If no candidate survives aggregation.
        """
        cleaned = self.cleaner.clean_many(raw_tokens)
        important = important_raw_amounts(raw_tokens)
        
        model_amounts: List[Any] = []
        confidence = self.fallback_confidence
        used_model = False
        
        if self.model_client is None:
            logger.info("No text-generation backend, normalizing from local evidence")
        else:
            try:
                payload = self._ask_model(raw_tokens, context)
            except Exception as e:
                logger.warning(f"Backend normalization failed, using local evidence: {e!r}")
            else:
                model_amounts = payload['normalized_amounts']
                confidence = clamp_confidence(
                    payload.get('normalization_confidence'),
                    self.default_confidence
                )
                used_model = True
        
        candidates = self.aggregator.aggregate(cleaned, model_amounts, important)
        
        logger.info(
            f"Normalization complete: {len(candidates)} candidates "
            f"(confidence={confidence}, model={used_model})"
        )
        
        return NormalizationResult(
            normalized_amounts=candidates,
            normalization_confidence=confidence,
            used_model=used_model
        )
    
    def _ask_model(self, raw_tokens: Sequence[str], context: str) -> Dict[str, Any]:
        mandatory = [
            token for token, _ in decimal_token_values(raw_tokens, low=self.mandatory_min)
        ]
        prompt = build_normalization_prompt(raw_tokens, context, mandatory)
        
        payload = self.model_client.get_json(prompt)
        
        if not isinstance(payload, dict) or not isinstance(payload.get('normalized_amounts'), list):
            raise MalformedBackendResponseError(
                "Invalid response structure: 'normalized_amounts' must be a list"
            )
        
        return payload
