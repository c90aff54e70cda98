"""
Post-Processing Module for Bill Amount Detection.

This module turns raw numeric tokens into the candidate amount set:
    - Amount cleaning with OCR digit repair
    - Aggregation of local and model-proposed amounts
    - Tolerance-based deduplication and band filtering

Author: ML Engineering Team
"""

from .normalizers import AmountCleaner
from .aggregator import AmountAggregator, important_raw_amounts
from .processor import NormalizationProcessor, NormalizationResult

__all__ = [
    'AmountCleaner',
    'AmountAggregator',
    'important_raw_amounts',
    'NormalizationProcessor',
    'NormalizationResult',
]
