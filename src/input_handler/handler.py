"""
Main Input Handler Module.

This module provides the InputHandler class that validates bill files
before they enter the pipeline and expands directories into file lists.

Usage:
    from src.input_handler import InputHandler
    
    handler = InputHandler()
    path = handler.validate_file("bill.jpg")
    
    # Every supported image in a directory
    paths = handler.collect_files("./bills/")

Classes:
    InputHandler: Main class for file input handling
"""

from pathlib import Path
from typing import List, Optional, Union

from config import get_config
from src.utils.logger import get_logger
from src.utils.helpers import get_file_extension
from src.utils.exceptions import (
    InputError,
    UnsupportedFileTypeError,
    FileNotFoundError,
    CorruptedFileError
)


# Initialize module logger
logger = get_logger(__name__)


class InputHandler:
    """
    Input validation for bill images and text files.
    
    Attributes:
        supported_extensions: Set of accepted image extensions
        processed_prefix: Prefix marking images already preprocessed
        
    Example:
        >>> handler = InputHandler()
        >>> handler.validate_file("bill.gif")
        Traceback (most recent call last):
        ...
        UnsupportedFileTypeError: Unsupported file type: .gif ...
    """
    
    IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.tiff', '.tif', '.bmp', '.webp'}
    
    def __init__(self, supported_extensions: Optional[List[str]] = None) -> None:
        """
        Initialize the InputHandler.
        
        Args:
            supported_extensions: Override config for accepted extensions.
        """
        extensions = supported_extensions or get_config(
            "input.supported_extensions", sorted(self.IMAGE_EXTENSIONS)
        )
        self.supported_extensions = {ext.lower() for ext in extensions}
        self.processed_prefix = get_config("input.image.processed_prefix", "processed-")
        
        logger.debug(f"InputHandler initialized with extensions: {sorted(self.supported_extensions)}")
    
    def validate_file(self, filepath: Union[str, Path]) -> Path:
        """
        Validate that a file exists, is non-empty and has a supported type.
        
        Args:
            filepath: Path to the file to validate.
            
        Returns:
            Path object pointing to the validated file.
            
        Raises:
            FileNotFoundError: If file doesn't exist.
            UnsupportedFileTypeError: If file type is not supported.
            CorruptedFileError: If the file is empty.
        """
        path = Path(filepath)
        
        if not path.exists():
            raise FileNotFoundError(str(filepath))
        
        if not path.is_file():
            raise InputError(f"Path is not a file: {filepath}")
        
        extension = get_file_extension(filepath)
        if extension not in self.supported_extensions:
            raise UnsupportedFileTypeError(
                extension,
                sorted(self.supported_extensions)
            )
        
        if path.stat().st_size == 0:
            raise CorruptedFileError(str(filepath), "File is empty")
        
        logger.debug(f"File validated: {filepath}")
        return path
    
    def collect_files(self, path: Union[str, Path]) -> List[Path]:
        """
        Expand a file or directory into the image files to process.
        
        Images written by preprocessing (``processed-*``) are skipped.
        
        Args:
            path: An image file or a directory of images.
            
        Returns:
            Sorted list of file paths.
            
        Raises:
            FileNotFoundError: If the path doesn't exist.
        """
        path = Path(path)
        
        if not path.exists():
            raise FileNotFoundError(str(path))
        
        if path.is_file():
            return [path]
        
        files = sorted(
            p for p in path.iterdir()
            if p.is_file()
            and get_file_extension(p) in self.supported_extensions
            and not p.name.startswith(self.processed_prefix)
        )
        logger.info(f"Found {len(files)} image(s) in {path}")
        return files
    
    def read_text(self, filepath: Union[str, Path]) -> str:
        """
        Read an already-recognized bill text file.
        
        Args:
            filepath: Path to a UTF-8 text file.
            
        Returns:
            File contents.
            
        Raises:
            FileNotFoundError: If file doesn't exist.
        """
        path = Path(filepath)
        if not path.is_file():
            raise FileNotFoundError(str(filepath))
        return path.read_text(encoding='utf-8')
