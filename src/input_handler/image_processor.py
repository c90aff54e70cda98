"""
Image Processor Module.

This module prepares bill photos and scans for text recognition:
    - Orientation correction
    - Header crop (status bars, letterheads)
    - Greyscale conversion and enhancement
    - Binarization
    - Upscaling

Supports: JPG, JPEG, PNG, TIFF, BMP, WEBP

Author: ML Engineering Team
"""

from pathlib import Path
from typing import Union

from PIL import Image, ImageEnhance, ImageFilter, ImageOps, UnidentifiedImageError

from config import get_config
from src.utils.logger import get_logger
from src.utils.exceptions import CorruptedFileError

# Initialize module logger
logger = get_logger(__name__)


class ImageProcessor:
    """
    Preprocessor for bill images.
    
    Attributes:
        auto_orient: Whether to apply EXIF orientation
        crop_top_fraction: Fraction of the height removed from the top
        brightness: Brightness enhancement factor
        contrast: Contrast enhancement factor
        blur_radius: Gaussian blur radius applied after sharpening
        threshold: Binarization threshold (0-255)
        upscale_factor: Final resize factor
        processed_prefix: File name prefix of processed images
        
    Example:
        >>> processor = ImageProcessor()
        >>> processed_path = processor.preprocess_for_ocr("uploads/bill.jpg")
        >>> print(processed_path)
        uploads/processed-bill.jpg
    """
    
    def __init__(self) -> None:
        """Initialize the image processor with configuration."""
        self.auto_orient = get_config("input.image.auto_orient", True)
        self.crop_top_fraction = get_config("input.image.crop_top_fraction", 0.15)
        self.brightness = get_config("input.image.brightness", 1.1)
        self.contrast = get_config("input.image.contrast", 1.2)
        self.blur_radius = get_config("input.image.blur_radius", 0.5)
        self.threshold = get_config("input.image.threshold", 128)
        self.upscale_factor = get_config("input.image.upscale_factor", 1.5)
        self.processed_prefix = get_config("input.image.processed_prefix", "processed-")
        
        logger.debug(
            f"ImageProcessor initialized (crop_top={self.crop_top_fraction}, "
            f"threshold={self.threshold}, upscale={self.upscale_factor})"
        )
    
    def preprocess_for_ocr(self, filepath: Union[str, Path]) -> Path:
        """
        Preprocess an image file and write the result next to it.
        
        Args:
            filepath: Path to the image file.
            
        Returns:
            Path of the processed image (``processed-<name>``).
            
        Raises:
            CorruptedFileError: If the image cannot be read or written.
        """
        filepath = Path(filepath)
        output_path = filepath.with_name(f"{self.processed_prefix}{filepath.name}")
        logger.info(f"Preprocessing image: {filepath.name}")
        
        try:
            with Image.open(filepath) as image:
                processed = self.preprocess(image)
            processed.save(output_path)
        except (OSError, UnidentifiedImageError, ValueError) as e:
            logger.error(f"Failed to preprocess image {filepath}: {e}")
            raise CorruptedFileError(str(filepath), f"Image preprocessing failed: {e}")
        
        logger.info(
            f"Preprocessed image: {processed.width}x{processed.height} -> {output_path.name}"
        )
        return output_path
    
    def preprocess(self, image: Image.Image) -> Image.Image:
        """
        Apply the preprocessing steps to an in-memory image.
        
        Processing steps:
            1. Fix orientation from EXIF
            2. Crop the top of the image
            3. Convert to greyscale
            4. Lift brightness and contrast
            5. Sharpen, then blur lightly
            6. Stretch contrast to the full range
            7. Binarize at the threshold
            8. Upscale with LANCZOS
        
        Args:
            image: Input PIL Image.
            
        Returns:
            Processed greyscale image.
        """
        if self.auto_orient:
            image = ImageOps.exif_transpose(image)
        
        image = self._crop_top(image)
        image = image.convert('L')
        
        image = ImageEnhance.Brightness(image).enhance(self.brightness)
        image = ImageEnhance.Contrast(image).enhance(self.contrast)
        
        image = image.filter(ImageFilter.SHARPEN)
        if self.blur_radius:
            image = image.filter(ImageFilter.GaussianBlur(self.blur_radius))
        
        image = ImageOps.autocontrast(image)
        
        threshold = self.threshold
        image = image.point(lambda x: 255 if x > threshold else 0, 'L')
        
        return self._upscale(image)
    
    def _crop_top(self, image: Image.Image) -> Image.Image:
        """Remove ``crop_top_fraction`` of the height from the top."""
        width, height = image.size
        top = int(height * self.crop_top_fraction)
        if top <= 0 or top >= height:
            return image
        return image.crop((0, top, width, height))
    
    def _upscale(self, image: Image.Image) -> Image.Image:
        """Resize by ``upscale_factor`` keeping the aspect ratio."""
        if self.upscale_factor == 1:
            return image
        width, height = image.size
        new_size = (
            max(1, int(width * self.upscale_factor)),
            max(1, int(height * self.upscale_factor))
        )
        logger.debug(f"Upscaling image from {width}x{height} to {new_size[0]}x{new_size[1]}")
        return image.resize(new_size, Image.LANCZOS)
