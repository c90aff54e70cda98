#!/usr/bin/env python3
"""
Bill Amount Detection System - Main Entry Point.

This is the main entry point for the amount detection system. It
provides both a command-line interface and programmatic access to the
detection pipeline.

Usage:
    Command Line:
        python main.py --input bill.jpg
        python main.py --input ./bills/ --output results.json
        python main.py --text bill.txt --no-llm
    
    Python:
        from main import run_detection
        outcomes = run_detection(input_path="bill.jpg")

Author: ML Engineering Team
Version: 1.0.0
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

# Import project modules
from config import ConfigurationManager
from src.utils.logger import ROOT_LOGGER_NAME, setup_logger_from_config, get_logger
from src.utils.exceptions import AmountDetectionError
from src.output_handler import DetectionOutcome


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.
    
    Args:
        argv: Argument list; defaults to ``sys.argv[1:]``.
    
    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Bill Amount Detection System",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Process single bill image:
        python main.py --input bill.jpg
    
    Process directory and save results:
        python main.py --input ./bills/ --output results.json
    
    Already-recognized text, rule-based classification only:
        python main.py --text bill.txt --no-llm
        """
    )
    
    # Input/Output arguments
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--input", "-i",
        type=str,
        help="Bill image file or directory of images"
    )
    source.add_argument(
        "--text", "-t",
        type=str,
        help="Plain-text file with recognized bill text (skips OCR)"
    )
    
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Write outcomes to this JSON file"
    )
    
    # Processing options
    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to custom configuration file"
    )
    
    parser.add_argument(
        "--no-llm",
        action="store_true",
        help="Do not call the text-generation backend"
    )
    
    # Logging options
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    
    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Initialize the system with configuration and logging.
    
    Args:
        args: Parsed command-line arguments.
        
    Returns:
        Initialized configuration manager.
    """
    ConfigurationManager.reset()
    config = ConfigurationManager(args.config)
    
    logger = setup_logger_from_config()
    
    if args.debug:
        logging.getLogger(ROOT_LOGGER_NAME).setLevel(logging.DEBUG)
    
    logger.info("=" * 60)
    logger.info("BILL AMOUNT DETECTION SYSTEM")
    logger.info("=" * 60)
    logger.info(f"Version: {config.get('project.version', '1.0.0')}")
    logger.info(f"Input: {args.input or args.text}")
    
    return config


def run_detection(
    input_path: Optional[str] = None,
    text_path: Optional[str] = None,
    output_path: Optional[str] = None,
    use_llm: bool = True
) -> List[Tuple[str, DetectionOutcome]]:
    """
    Run the amount detection pipeline.
    
    This is the main programmatic entry point. Exactly one of
    ``input_path`` and ``text_path`` is expected.
    
    Args:
        input_path: Bill image or directory of images.
        text_path: Plain-text file with recognized bill text.
        output_path: Optional JSON file for the outcomes.
        use_llm: Whether to build the text-generation client.
        
    Returns:
        List of (source name, DetectionOutcome) pairs.
        
    Example:
        >>> outcomes = run_detection(text_path="bill.txt", use_llm=False)
        >>> for source, outcome in outcomes:
        ...     print(source, outcome.status_code)
    """
    logger = get_logger(__name__)
    
    # Import pipeline components
    from src.input_handler import InputHandler
    from src.model_inference import create_model_client
    from src.output_handler import OutputHandler, outcome_from_error
    from src.pipeline import AmountDetector
    
    logger.info("Initializing pipeline components...")
    input_handler = InputHandler()
    model_client = create_model_client() if use_llm else None
    detector = AmountDetector(model_client=model_client)
    
    outcomes = []
    
    if text_path:
        text = input_handler.read_text(text_path)
        outcomes.append((str(text_path), detector.detect_from_text(text)))
    else:
        for file_path in input_handler.collect_files(input_path):
            logger.info(f"Processing: {file_path.name}")
            try:
                input_handler.validate_file(file_path)
            except AmountDetectionError as e:
                logger.error(f"Skipping {file_path.name}: {e}")
                outcomes.append((str(file_path), outcome_from_error(e)))
                continue
            outcomes.append((str(file_path), detector.detect_from_image(file_path)))
    
    if output_path and outcomes:
        OutputHandler().save(outcomes, output_path)
    
    return outcomes


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function - entry point for command-line execution.
    
    Returns:
        Exit code (0 when every outcome is 200, non-zero otherwise).
    """
    try:
        args = parse_arguments(argv)
        initialize_system(args)
        logger = get_logger(__name__)
        
        outcomes = run_detection(
            input_path=args.input,
            text_path=args.text,
            output_path=args.output,
            use_llm=not args.no_llm
        )
        
        if not outcomes:
            logger.error("No files to process")
            return 1
        
        for source, outcome in outcomes:
            print(f"# {source} [{outcome.status_code}]")
            print(outcome.to_json())
        
        succeeded = sum(1 for _, outcome in outcomes if outcome.ok)
        logger.info("=" * 60)
        logger.info(f"Detection complete. {succeeded}/{len(outcomes)} succeeded.")
        logger.info("=" * 60)
        
        return 0 if succeeded == len(outcomes) else 2
        
    except (AmountDetectionError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
        
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
