"""
Main OCR Engine Module.

This module provides the OCREngine class, the single entry point the
amount detection pipeline uses to turn a bill image into text.

Usage:
    from src.ocr_engine import OCREngine
    
    engine = OCREngine()
    result = engine.extract("processed-bill.png")
    print(result.text, result.confidence)

Author: ML Engineering Team
"""

from typing import Union, Optional
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from src.utils.logger import get_logger
from src.utils.exceptions import OCRProcessingError
from .ocr_result import OCRResult
from .tesseract_backend import TesseractBackend

# Initialize module logger
logger = get_logger(__name__)


class OCREngine:
    """
    OCR engine providing a unified interface for text extraction.
    
    The backend is any object exposing ``extract(image) -> OCRResult``;
    Tesseract is built by default.
    
    Attributes:
        backend_name: Name of the active OCR backend
        backend: The active OCR backend instance
        
    Example:
        >>> engine = OCREngine()
        >>> result = engine.extract(image)
        >>> if result.is_empty():
        ...     print("no text detected")
    """
    
    def __init__(self, backend: Optional[object] = None) -> None:
        """
        Initialize the OCR engine.
        
        Args:
            backend: Pre-built backend instance. If None, a TesseractBackend
                    is constructed.
        """
        if backend is not None:
            self.backend = backend
            self.backend_name = type(backend).__name__
        else:
            self.backend_name = "tesseract"
            self.backend = TesseractBackend()
        
        logger.info(f"OCR Engine initialized with backend: {self.backend_name}")
    
    def extract(self, image: Union[Image.Image, str, Path]) -> OCRResult:
        """
        Extract text from an image.
        
        Args:
            image: PIL Image or path to image file.
            
        Returns:
            OCRResult with text lines and a 0-1 confidence.
            
        Raises:
            OCRProcessingError: If the image cannot be loaded or recognized.
        """
        if isinstance(image, (str, Path)):
            image_path = str(image)
            logger.debug(f"Loading image from: {image_path}")
            try:
                with Image.open(image_path) as loaded:
                    loaded.load()
                    image = loaded.copy()
            except (OSError, UnidentifiedImageError) as e:
                raise OCRProcessingError(image_path, f"Failed to load image: {e}")
        
        if not isinstance(image, Image.Image):
            raise OCRProcessingError("unknown", "Invalid image input")
        
        logger.debug(f"Extracting text using {self.backend_name} backend")
        return self.backend.extract(image)
