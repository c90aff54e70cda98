"""
Output Handler Module for Bill Amount Detection.

This module provides functionality for:
    - Provenance lookup of classified amounts
    - Staged response building with status codes
    - JSON file output

Author: ML Engineering Team
"""

from .provenance import ProvenanceLocator
from .response import (
    DetectionOutcome,
    FinalAmount,
    build_failure,
    build_success,
    outcome_from_error,
)
from .handler import OutputHandler

__all__ = [
    'ProvenanceLocator',
    'DetectionOutcome',
    'FinalAmount',
    'build_failure',
    'build_success',
    'outcome_from_error',
    'OutputHandler',
]
