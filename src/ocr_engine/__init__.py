"""
OCR Engine Module for Bill Amount Detection.

This module turns bill images into linearized text and prepares that
text for amount extraction:
    - Text recognition through Tesseract
    - Currency symbol canonicalization
    - Numeric token extraction with currency hint and confidence

Author: ML Engineering Team
"""

from .engine import OCREngine
from .tesseract_backend import TesseractBackend
from .ocr_result import OCRResult
from .extraction_result import ExtractionResult
from .text_normalizer import normalize_currency_symbols
from .token_extractor import TokenExtractor

__all__ = [
    'OCREngine',
    'TesseractBackend',
    'OCRResult',
    'ExtractionResult',
    'normalize_currency_symbols',
    'TokenExtractor',
]
