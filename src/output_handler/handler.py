"""
Main Output Handler Module.

This module provides the OutputHandler class that writes detection
outcomes to JSON files.

Author: ML Engineering Team
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from config import get_config
from src.utils.helpers import ensure_directory, generate_timestamp
from src.utils.logger import get_logger
from .response import DetectionOutcome

# Initialize module logger
logger = get_logger(__name__)


class OutputHandler:
    """
    Writes detection outcomes to disk.
    
    Each file holds a list of records, one per processed document:
    ``{"source": ..., "status_code": ..., "response": {...}}``.
    
    Attributes:
        output_dir: Directory for generated files
        indent: JSON indentation
        filename_prefix: Prefix of generated file names
        
    Example:
        >>> handler = OutputHandler()
        >>> path = handler.save([("bill.png", outcome)])
        >>> print(f"Saved to: {path}")
    """
    
    def __init__(
        self,
        output_dir: Optional[Union[str, Path]] = None,
        indent: Optional[int] = None
    ) -> None:
        """
        Initialize the output handler.
        
        Args:
            output_dir: Override config for the output directory.
            indent: Override config for JSON indentation.
        """
        self.output_dir = Path(output_dir or get_config("paths.output_dir", "output"))
        self.indent = indent if indent is not None else get_config("output.json.indent", 2)
        self.filename_prefix = get_config("output.json.filename_prefix", "amounts")
        
        logger.debug(f"OutputHandler initialized (dir={self.output_dir})")
    
    @staticmethod
    def to_records(
        outcomes: Sequence[Tuple[str, DetectionOutcome]]
    ) -> List[Dict[str, Any]]:
        """Convert (source, outcome) pairs to serializable records."""
        return [
            {
                'source': source,
                'status_code': outcome.status_code,
                'response': outcome.payload
            }
            for source, outcome in outcomes
        ]
    
    def save(
        self,
        outcomes: Sequence[Tuple[str, DetectionOutcome]],
        filepath: Optional[Union[str, Path]] = None
    ) -> Path:
        """
        Write outcomes to a JSON file.
        
        Args:
            outcomes: (source name, outcome) pairs.
            filepath: Target file. Defaults to a timestamped file in
                     ``output_dir``.
            
        Returns:
            Path of the written file.
        """
        if filepath is None:
            filepath = self.output_dir / f"{self.filename_prefix}_{generate_timestamp()}.json"
        filepath = Path(filepath)
        ensure_directory(filepath.parent)
        
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(self.to_records(outcomes), f, indent=self.indent, ensure_ascii=False)
        
        logger.info(f"Wrote {len(outcomes)} outcome(s) to: {filepath}")
        return filepath
