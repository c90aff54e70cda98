"""
Pipeline Module for Bill Amount Detection.

Wires the stages together behind AmountDetector.

Author: ML Engineering Team
"""

from .detector import AmountDetector

__all__ = ['AmountDetector']
