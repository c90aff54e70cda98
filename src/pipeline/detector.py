"""
Amount Detection Pipeline.

This module provides the AmountDetector class that runs one bill through
every stage and always returns a structured outcome:

    image -> preprocessing -> text recognition -> currency canonicalization
          -> token extraction -> normalization -> classification
          -> provenance -> staged response

Service handles (OCR engine, image processor, text-generation client)
are built by the caller and injected; the detector holds no global
clients.

Usage:
    from src.pipeline import AmountDetector
    
    detector = AmountDetector(model_client=create_model_client())
    outcome = detector.detect_from_image("bill.jpg")
    print(outcome.status_code, outcome.to_json())

Author: ML Engineering Team
"""

from pathlib import Path
from typing import Any, Optional, Union

from src.utils.logger import get_logger
from src.utils.exceptions import NoAmountsFoundError
from src.input_handler.image_processor import ImageProcessor
from src.ocr_engine.engine import OCREngine
from src.ocr_engine.text_normalizer import normalize_currency_symbols
from src.ocr_engine.token_extractor import TokenExtractor
from src.postprocessor.processor import NormalizationProcessor
from src.model_inference.classifier import AmountClassifier
from src.output_handler.provenance import ProvenanceLocator
from src.output_handler.response import (
    DetectionOutcome,
    FinalAmount,
    build_success,
    outcome_from_error,
)

# Initialize module logger
logger = get_logger(__name__)

OCR_NO_TEXT_REASON = "OCR failed to extract text"


class AmountDetector:
    """
    Runs the amount detection pipeline for one bill at a time.
    
    Attributes:
        ocr_engine: Object exposing ``extract(path) -> OCRResult``
        image_processor: Object exposing ``preprocess_for_ocr(path) -> path``
        model_client: Object exposing ``get_json(prompt)``, or None to run
                     on local evidence and keyword rules only
        
    Example:
        >>> detector = AmountDetector(model_client=None)
        >>> outcome = detector.detect_from_text("TOTAL $ 1902.05")
        >>> outcome.payload['step4_final_output']['amounts'][0]['type']
        'total'
    """
    
    def __init__(
        self,
        ocr_engine: Optional[Any] = None,
        image_processor: Optional[Any] = None,
        model_client: Optional[Any] = None,
        token_extractor: Optional[TokenExtractor] = None,
        normalizer: Optional[NormalizationProcessor] = None,
        classifier: Optional[AmountClassifier] = None,
        provenance: Optional[ProvenanceLocator] = None
    ) -> None:
        """
        Initialize the detector.
        
        Args:
            ocr_engine: Text recognition engine. Built on first image if None.
            image_processor: Image preprocessor. Defaults to ImageProcessor().
            model_client: Text-generation client shared by both model stages.
            token_extractor: Stage one override.
            normalizer: Stage two override.
            classifier: Stage three override.
            provenance: Provenance locator override.
        """
        self._ocr_engine = ocr_engine
        self.image_processor = image_processor or ImageProcessor()
        self.model_client = model_client
        
        self.token_extractor = token_extractor or TokenExtractor()
        self.normalizer = normalizer or NormalizationProcessor(model_client=model_client)
        self.classifier = classifier or AmountClassifier(model_client=model_client)
        self.provenance = provenance or ProvenanceLocator()
        
        logger.info(
            f"AmountDetector initialized "
            f"(backend={'yes' if model_client is not None else 'no'})"
        )
    
    @property
    def ocr_engine(self) -> Any:
        """Get or create the OCR engine."""
        if self._ocr_engine is None:
            self._ocr_engine = OCREngine()
        return self._ocr_engine
    
    def detect_from_image(self, image_path: Union[str, Path]) -> DetectionOutcome:
        """
        Detect amounts on a bill image.
        
        Args:
            image_path: Path to the bill image.
            
        Returns:
            DetectionOutcome (200, 400 or 500).
        """
        logger.info(f"Detecting amounts in image: {image_path}")
        
        try:
            processed_path = self.image_processor.preprocess_for_ocr(image_path)
            ocr_result = self.ocr_engine.extract(processed_path)
            
            if ocr_result.is_empty():
                raise NoAmountsFoundError(OCR_NO_TEXT_REASON)
            
            return self._run(ocr_result.text, ocr_result.confidence)
        
        except Exception as e:  # request boundary: every error becomes a payload
            return self._failure(e)
    
    def detect_from_text(
        self,
        text: str,
        ocr_confidence: Optional[float] = None
    ) -> DetectionOutcome:
        """
        Detect amounts in already-recognized bill text.
        
        Args:
            text: Recognized text.
            ocr_confidence: Recognizer confidence (0-1) to fold into the
                           extraction confidence, if known.
            
        Returns:
            DetectionOutcome (200, 400 or 500).
        """
        try:
            return self._run(text, ocr_confidence)
        except Exception as e:  # request boundary: every error becomes a payload
            return self._failure(e)
    
    def _run(self, text: str, ocr_confidence: Optional[float]) -> DetectionOutcome:
        # Stage 1: canonicalize and extract tokens
        processed_text = normalize_currency_symbols(text or "")
        extraction = self.token_extractor.extract(processed_text, raw_length=len(text or ""))
        
        if extraction.is_failure:
            raise NoAmountsFoundError(extraction.reason)
        
        extraction = extraction.with_ocr_confidence(ocr_confidence)
        logger.info(f"Step 1 - extraction: {extraction}")
        
        # Stage 2: normalization
        normalization = self.normalizer.process(extraction.raw_tokens, processed_text)
        logger.info(f"Step 2 - candidates: {normalization.normalized_amounts}")
        
        # Stage 3: classification
        classification = self.classifier.classify(
            normalization.normalized_amounts, processed_text
        )
        logger.info(f"Step 3 - classification: {classification}")
        
        # Stage 4: provenance
        final_amounts = [
            FinalAmount(
                type=amount.type,
                value=amount.value,
                source=self.provenance.locate(amount.type, amount.value, processed_text)
            )
            for amount in classification.amounts
        ]
        logger.info(f"Step 4 - final amounts: {len(final_amounts)}")
        
        return build_success(extraction, normalization, classification, final_amounts)
    
    @staticmethod
    def _failure(error: Exception) -> DetectionOutcome:
        if isinstance(error, NoAmountsFoundError):
            logger.info(f"No amounts found: {error.reason}")
        elif not hasattr(error, 'reason'):
            logger.exception("Unhandled error in amount detection")
        return outcome_from_error(error)
