"""
Tesseract OCR Backend.

This module provides text recognition using Tesseract (pytesseract).
Words are regrouped into the lines Tesseract reports so that the
downstream stages can cite whole bill lines as provenance.

Requirements:
    - Tesseract OCR installed on the system
    - pytesseract Python package

Author: ML Engineering Team
"""

import time
from typing import List, Dict, Tuple

import pytesseract
from PIL import Image

from config import get_config
from src.utils.logger import get_logger
from src.utils.exceptions import OCREngineNotAvailableError, OCRProcessingError
from .ocr_result import OCRResult

# Initialize module logger
logger = get_logger(__name__)


class TesseractBackend:
    """
    Tesseract OCR backend implementation.
    
    Attributes:
        language: Tesseract language code (e.g., "eng")
        psm: Page Segmentation Mode (1-13)
        oem: OCR Engine Mode (0-3)
        extra_config: Additional Tesseract configuration
        
    Example:
        >>> backend = TesseractBackend()
        >>> result = backend.extract(image)
        >>> print(result.text)
    """
    
    def __init__(self) -> None:
        """Initialize the Tesseract backend with configuration."""
        self.language = get_config("ocr.tesseract.lang", "eng")
        self.psm = get_config("ocr.tesseract.psm", 6)
        self.oem = get_config("ocr.tesseract.oem", 3)
        self.extra_config = get_config("ocr.tesseract.config", "")
        
        self.version = self._check_dependencies()
        
        logger.debug(
            f"TesseractBackend initialized (lang={self.language}, "
            f"psm={self.psm}, oem={self.oem})"
        )
    
    def _check_dependencies(self) -> str:
        """
        Check that the Tesseract binary is reachable.
        
        Returns:
            Tesseract version string.
        
        Raises:
            OCREngineNotAvailableError: If Tesseract is not installed.
        """
        try:
            version = str(pytesseract.get_tesseract_version())
        except pytesseract.TesseractNotFoundError as e:
            raise OCREngineNotAvailableError(
                f"Tesseract OCR (not installed or not in PATH): {e}"
            )
        logger.info(f"Tesseract version: {version}")
        return version
    
    def _build_config(self) -> str:
        """Build the Tesseract command-line configuration string."""
        config_parts = [
            f"--psm {self.psm}",
            f"--oem {self.oem}"
        ]
        
        if self.extra_config:
            config_parts.append(self.extra_config)
        
        return ' '.join(config_parts)
    
    def extract(self, image: Image.Image) -> OCRResult:
        """
        Recognize text in an image.
        
        Args:
            image: PIL Image to process.
            
        Returns:
            OCRResult with lines and overall confidence (0-1).
            
        Raises:
            OCRProcessingError: If OCR processing fails.
        """
        start_time = time.time()
        
        try:
            if image.mode not in ('RGB', 'L'):
                image = image.convert('RGB')
            
            config = self._build_config()
            logger.debug(f"Running Tesseract OCR (config: {config})")
            
            data = pytesseract.image_to_data(
                image,
                lang=self.language,
                config=config,
                output_type=pytesseract.Output.DICT
            )
        except pytesseract.TesseractError as e:
            logger.error(f"OCR processing failed: {e}")
            raise OCRProcessingError("image", str(e))
        
        lines, confidences = self._group_into_lines(data)
        confidence = sum(confidences) / len(confidences) / 100 if confidences else 0.0
        processing_time = time.time() - start_time
        
        result = OCRResult(
            lines=lines,
            confidence=round(confidence, 4),
            engine="tesseract",
            language=self.language,
            processing_time=processing_time,
            metadata={
                'psm': self.psm,
                'oem': self.oem,
                'tesseract_version': self.version
            }
        )
        
        logger.info(
            f"OCR completed: {result.line_count} lines, "
            f"confidence: {result.confidence:.2f} ({processing_time:.2f}s)"
        )
        
        return result
    
    def _group_into_lines(self, data: Dict[str, List]) -> Tuple[List[str], List[float]]:
        """
        Join Tesseract words into text lines.
        
        Args:
            data: Dictionary output from image_to_data.
            
        Returns:
            Tuple of (line texts in reading order, word confidences 0-100).
        """
        line_groups: Dict[Tuple[int, int, int], List[str]] = {}
        confidences = []
        
        for i, text in enumerate(data['text']):
            if not text or not text.strip():
                continue
            
            key = (data['block_num'][i], data['par_num'][i], data['line_num'][i])
            line_groups.setdefault(key, []).append(text.strip())
            
            conf = float(data['conf'][i])
            if conf >= 0:  # Tesseract returns -1 for non-word boxes
                confidences.append(conf)
        
        lines = [' '.join(line_groups[key]) for key in sorted(line_groups)]
        return lines, confidences
    