"""
OCR Result Data Class.

This module defines the data structure handed from the text recognition
backend to the amount detection pipeline: linearized text plus an overall
recognition confidence. Word positions are not carried.

Author: ML Engineering Team
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any


@dataclass
class OCRResult:
    """
    Text recognized from a single bill image.
    
    Attributes:
        lines: Recognized text lines, top to bottom
        confidence: Overall recognition confidence (0-1)
        engine: OCR engine name
        language: OCR language used
        processing_time: Time taken for OCR in seconds
        metadata: Additional metadata dictionary
        
    Example:
        >>> result = OCRResult(lines=["SUB TOTAL 745.00", "TOTAL 1902.05"], confidence=0.91)
        >>> print(result.text)
        SUB TOTAL 745.00
        TOTAL 1902.05
    """
    lines: List[str] = field(default_factory=list)
    confidence: float = 0.0
    engine: str = "unknown"
    language: str = "eng"
    processing_time: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)
    
    @classmethod
    def from_text(cls, text: str, confidence: float = 1.0, engine: str = "text") -> 'OCRResult':
        """
        Build a result from already-recognized text.
        
        Args:
            text: Plain text, one bill line per text line.
            confidence: Recognition confidence to report.
            engine: Name recorded as the producing engine.
            
        Returns:
            OCRResult wrapping the text.
        """
        return cls(lines=text.splitlines(), confidence=confidence, engine=engine)
    
    @property
    def text(self) -> str:
        """All lines joined with newlines."""
        return '\n'.join(self.lines)
    
    @property
    def line_count(self) -> int:
        """Get total number of lines."""
        return len(self.lines)
    
    def is_empty(self) -> bool:
        """Check whether any text was recognized."""
        return not self.text.strip()
    
    def __repr__(self) -> str:
        return (
            f"OCRResult(lines={self.line_count}, "
            f"confidence={self.confidence:.2f}, engine={self.engine})"
        )
