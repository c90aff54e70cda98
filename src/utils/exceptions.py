"""
Custom Exceptions Module.

This module defines all custom exceptions used throughout the amount
detection pipeline. Using specific exceptions allows each stage to
absorb the failures it has a fallback for and propagate the rest.

Exception Hierarchy:
    AmountDetectionError (base)
    ├── InputError
    │   ├── UnsupportedFileTypeError
    │   ├── FileNotFoundError
    │   └── CorruptedFileError
    ├── OCRError
    │   ├── OCREngineNotAvailableError
    │   └── OCRProcessingError
    ├── NoAmountsFoundError
    ├── InvalidAmountError
    ├── NoValidAmountsError
    ├── BackendError
    │   ├── EmptyResponseError
    │   ├── SafetyBlockedError
    │   ├── TokenLimitExceededError
    │   ├── MalformedBackendResponseError
    │   └── BackendUnavailableError
    └── ConfigurationError
"""


class AmountDetectionError(Exception):
    """
    Base exception for all amount detection errors.
    
    All custom exceptions in this system inherit from this class,
    allowing for easy catching of all system-specific errors.
    
    Attributes:
        message: Human-readable error message.
        details: Optional dictionary with additional error details.
    """
    
    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.
        
        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)
    
    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# INPUT ERRORS
# =============================================================================

class InputError(AmountDetectionError):
    """Base exception for input handling errors."""
    pass


class UnsupportedFileTypeError(InputError):
    """
    Raised when an unsupported file type is provided.
    
    Example:
        >>> raise UnsupportedFileTypeError(".doc", [".png", ".jpg"])
    """
    
    def __init__(self, file_type: str, supported_types: list):
        message = f"Unsupported file type: '{file_type}'"
        details = {"file_type": file_type, "supported_types": supported_types}
        super().__init__(message, details)


class FileNotFoundError(InputError):
    """Raised when input file cannot be found."""
    
    def __init__(self, filepath: str):
        message = f"File not found: {filepath}"
        details = {"filepath": filepath}
        super().__init__(message, details)


class CorruptedFileError(InputError):
    """Raised when a file appears to be corrupted or unreadable."""
    
    def __init__(self, filepath: str, reason: str = None):
        message = f"Corrupted or unreadable file: {filepath}"
        details = {"filepath": filepath, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# OCR ERRORS
# =============================================================================

class OCRError(AmountDetectionError):
    """Base exception for OCR-related errors."""
    pass


class OCREngineNotAvailableError(OCRError):
    """Raised when the configured OCR engine is not available."""
    
    def __init__(self, engine_name: str):
        message = f"OCR engine not available: {engine_name}"
        details = {"engine": engine_name}
        super().__init__(message, details)


class OCRProcessingError(OCRError):
    """Raised when OCR processing fails."""
    
    def __init__(self, filepath: str, reason: str = None):
        message = f"OCR processing failed for: {filepath}"
        details = {"filepath": filepath, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# PIPELINE ERRORS
# =============================================================================

class NoAmountsFoundError(AmountDetectionError):
    """
    Raised when the document genuinely lacks recognizable amounts.
    
    This is a terminal outcome, not a bug. The reason is surfaced
    to the caller verbatim.
    
    Example:
        >>> raise NoAmountsFoundError("document too noisy")
    """
    
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class InvalidAmountError(AmountDetectionError):
    """Raised when a single token cannot be cleaned into an amount."""
    
    def __init__(self, raw: str, reason: str = None):
        message = f"Invalid amount after cleaning: {raw!r}"
        details = {"raw": raw, "reason": reason}
        super().__init__(message, details)


class NoValidAmountsError(AmountDetectionError):
    """Raised when aggregation leaves an empty candidate set."""
    
    def __init__(self, reason: str = "No valid amounts found"):
        self.reason = reason
        super().__init__(reason)


# =============================================================================
# TEXT-GENERATION BACKEND ERRORS
# =============================================================================

class BackendError(AmountDetectionError):
    """Base exception for text-generation backend errors."""
    pass


class EmptyResponseError(BackendError):
    """Raised when the backend returns no usable text."""
    
    def __init__(self, reason: str = "Empty response from text-generation backend"):
        super().__init__(reason)


class SafetyBlockedError(BackendError):
    """Raised when the response was blocked by safety filters."""
    
    def __init__(self, ratings: list = None):
        message = "Content blocked by safety filters"
        details = {"safety_ratings": ratings} if ratings else None
        super().__init__(message, details)


class TokenLimitExceededError(BackendError):
    """Raised when the response was cut off at the output token limit."""
    
    def __init__(self, max_tokens: int = None):
        message = "Response exceeded token limit"
        details = {"max_output_tokens": max_tokens} if max_tokens else None
        super().__init__(message, details)


class MalformedBackendResponseError(BackendError):
    """Raised when a response cannot be recovered into the expected JSON."""
    
    def __init__(self, reason: str, raw_text: str = None):
        message = f"Invalid JSON response: {reason}"
        details = {"raw_text": raw_text[:200]} if raw_text else None
        super().__init__(message, details)


class BackendUnavailableError(BackendError):
    """
    Raised when the text-generation call exhausted its retries.
    
    Attributes:
        attempts: Number of attempts made.
        last_error: The error raised by the final attempt.
    """
    
    def __init__(self, attempts: int, last_error: Exception = None):
        self.attempts = attempts
        self.last_error = last_error
        message = (
            f"Text-generation backend failed after {attempts} attempts. "
            f"Last error: {last_error}"
        )
        super().__init__(message)


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================

class ConfigurationError(AmountDetectionError):
    """Raised when a configuration value is missing or unusable."""
    
    def __init__(self, key: str, reason: str = None):
        message = f"Invalid configuration for '{key}'"
        details = {"key": key, "reason": reason}
        super().__init__(message, details)


# Export all exceptions
__all__ = [
    'AmountDetectionError',
    'InputError',
    'UnsupportedFileTypeError',
    'FileNotFoundError',
    'CorruptedFileError',
    'OCRError',
    'OCREngineNotAvailableError',
    'OCRProcessingError',
    'NoAmountsFoundError',
    'InvalidAmountError',
    'NoValidAmountsError',
    'BackendError',
    'EmptyResponseError',
    'SafetyBlockedError',
    'TokenLimitExceededError',
    'MalformedBackendResponseError',
    'BackendUnavailableError',
    'ConfigurationError',
]
