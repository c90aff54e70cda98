"""
Bill Amount Detection System - Source Package.

This package contains all core modules for detecting, classifying and
citing monetary amounts on bills and invoices. Each module has a single
responsibility.

Modules:
    - input_handler: File validation and image preprocessing
    - ocr_engine: Text recognition and numeric token extraction
    - postprocessor: Amount cleaning, aggregation and deduplication
    - model_inference: Gemini backend and amount classification
    - output_handler: Provenance, response building and JSON output
    - pipeline: Stage orchestration

Architecture:
    Input → OCR → Token Extraction → Normalization → Classification
                                                          ↓
                                          Provenance → Response
"""

__version__ = "1.0.0"
__author__ = "ML Engineering Team"

__all__ = [
    'input_handler',
    'ocr_engine',
    'postprocessor',
    'model_inference',
    'output_handler',
    'pipeline',
    'utils'
]
