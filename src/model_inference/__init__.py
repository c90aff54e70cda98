"""
Model Inference Module for Bill Amount Detection.

This module classifies candidate amounts, using a text-generation
backend (Google Gemini) where available and keyword rules otherwise.

Features:
    - Gemini backend behind a TextGenerator interface
    - Bounded retries with linear backoff
    - Tolerant JSON recovery of model output
    - Billing term detection for evidence-grounded classification
    - Rule-based fallback classification

Author: ML Engineering Team
"""

from .classification_result import (
    AmountType,
    ClassificationMethod,
    ClassificationResult,
    ClassifiedAmount,
)
from .retry import RetryPolicy
from .json_recovery import ParseResult, parse_json
from .gemini_client import (
    TextGenerator,
    GeminiTextGenerator,
    ModelClient,
    create_model_client,
)
from .validators import ClassificationValidator, clamp_confidence
from .term_detector import TermDetector
from .fallback_classifier import FallbackClassifier, FallbackRule, find_amount_line
from .classifier import AmountClassifier

__all__ = [
    'AmountType',
    'ClassificationMethod',
    'ClassificationResult',
    'ClassifiedAmount',
    'RetryPolicy',
    'ParseResult',
    'parse_json',
    'TextGenerator',
    'GeminiTextGenerator',
    'ModelClient',
    'create_model_client',
    'ClassificationValidator',
    'clamp_confidence',
    'TermDetector',
    'FallbackClassifier',
    'FallbackRule',
    'find_amount_line',
    'AmountClassifier',
]
