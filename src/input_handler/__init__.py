"""
Input Handler Module for Bill Amount Detection.

This module provides functionality for:
    - File validation (existence, type, emptiness)
    - Directory expansion for batch runs
    - Image preprocessing for text recognition

Supported Formats:
    - Images: JPG, JPEG, PNG, TIFF, BMP, WEBP

Author: ML Engineering Team
"""

from .handler import InputHandler
from .image_processor import ImageProcessor

__all__ = ['InputHandler', 'ImageProcessor']
