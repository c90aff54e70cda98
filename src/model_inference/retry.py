"""
Bounded retry policy for text-generation calls.

The policy is kept apart from the call it guards so it can be exercised
with a fake clock: pass any ``sleep`` callable.
"""

import time
from dataclasses import dataclass, field
from typing import Callable, Tuple, Type, TypeVar

from config import get_config
from src.utils.logger import get_logger
from src.utils.exceptions import BackendError, BackendUnavailableError

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class RetryPolicy:
    """
    Retry a call up to ``max_attempts`` times with linear backoff.
    
    The delay before attempt ``n + 1`` is ``base_delay * n`` seconds.
    
    Attributes:
        max_attempts: Total attempts, including the first one
        base_delay: Backoff unit in seconds
        retry_on: Exception types that trigger another attempt
        sleep: Callable used to wait between attempts
        
    Example:
        >>> policy = RetryPolicy(max_attempts=3, base_delay=1.0)
        >>> [policy.delay_for(n) for n in (1, 2)]
        [1.0, 2.0]
    """
    max_attempts: int = 3
    base_delay: float = 1.0
    retry_on: Tuple[Type[Exception], ...] = (BackendError,)
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)
    
    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
    
    @classmethod
    def from_config(cls, **overrides) -> 'RetryPolicy':
        """Build a policy from the ``llm.retry`` configuration section."""
        params = {
            'max_attempts': get_config("llm.retry.max_attempts", 3),
            'base_delay': get_config("llm.retry.base_delay", 1.0),
        }
        params.update(overrides)
        return cls(**params)
    
    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after the given failed attempt (1-based)."""
        return self.base_delay * attempt
    
    def call(self, func: Callable[[], T]) -> T:
        """
        Run ``func`` until it succeeds or attempts run out.
        
        Args:
            func: Zero-argument callable.
            
        Returns:
            Whatever ``func`` returns.
            
        Raises:
            BackendUnavailableError: After the final failed attempt, carrying
                                    the attempt count and the last error.
        """
        last_error = None
        
        for attempt in range(1, self.max_attempts + 1):
            try:
                return func()
            except self.retry_on as e:
                last_error = e
                logger.warning(f"Attempt {attempt}/{self.max_attempts} failed: {e}")
                
                if attempt < self.max_attempts:
                    self.sleep(self.delay_for(attempt))
        
        raise BackendUnavailableError(self.max_attempts, last_error)
