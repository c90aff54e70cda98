"""
Text-Generation Backend Module.

This module wraps Google Gemini (``google-genai``) behind a small
``TextGenerator`` interface and adds ``ModelClient``, which turns a prompt
into a validated JSON object with bounded retries and tolerant parsing.

Usage:
    from src.model_inference import create_model_client
    
    client = create_model_client()
    if client is not None:
        payload = client.get_json(prompt)

Author: ML Engineering Team
"""

import abc
import os
from typing import Any, Dict, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from config import get_config
from src.utils.logger import get_logger
from src.utils.exceptions import (
    BackendError,
    ConfigurationError,
    EmptyResponseError,
    MalformedBackendResponseError,
    SafetyBlockedError,
    TokenLimitExceededError,
)
from .json_recovery import parse_json
from .retry import RetryPolicy

# Initialize module logger
logger = get_logger(__name__)

HARM_CATEGORIES = [
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
]


def _reason_name(reason: Any) -> Optional[str]:
    """Finish/block reasons arrive as SDK enums or plain strings."""
    if reason is None:
        return None
    return getattr(reason, "name", None) or str(reason)


class TextGenerator(abc.ABC):
    """Contract every text-generation backend implements."""
    
    name: str = "base"
    
    @abc.abstractmethod
    def generate(self, prompt: str) -> str:
        """
        Send a prompt and return the response text.
        
        Raises:
            BackendError: For empty, blocked, truncated or failed responses.
        """


class GeminiTextGenerator(TextGenerator):
    """
    Gemini backend using the ``google-genai`` SDK.
    
    Attributes:
        model_name: Gemini model identifier
        client: ``genai.Client`` (or a stand-in exposing ``models.generate_content``)
        
    Example:
        >>> generator = GeminiTextGenerator(api_key="...")
        >>> text = generator.generate('Return {"ok": true}')
    """
    
    name = "gemini"
    
    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None,
        client: Optional[Any] = None
    ) -> None:
        """
        Initialize the Gemini backend.
        
        Args:
            api_key: Gemini API key. Required unless ``client`` is given.
            model_name: Model to call. Defaults to ``llm.model``.
            client: Pre-built SDK client.
            
        Raises:
            ConfigurationError: If neither a client nor an API key is given.
        """
        self.model_name = model_name or get_config("llm.model", "gemini-2.5-flash")
        self.max_output_tokens = get_config("llm.max_output_tokens", 8192)
        
        if client is None:
            if not api_key:
                raise ConfigurationError("llm.api_key_env", "No Gemini API key provided")
            timeout_ms = int(get_config("llm.timeout_seconds", 30) * 1000)
            client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=timeout_ms)
            )
        self.client = client
        
        threshold = get_config("llm.safety_threshold", "BLOCK_ONLY_HIGH")
        self.generation_config = types.GenerateContentConfig(
            temperature=get_config("llm.temperature", 0.1),
            top_p=get_config("llm.top_p", 0.1),
            top_k=get_config("llm.top_k", 16),
            max_output_tokens=self.max_output_tokens,
            safety_settings=[
                types.SafetySetting(
                    category=types.HarmCategory(category),
                    threshold=types.HarmBlockThreshold(threshold)
                )
                for category in HARM_CATEGORIES
            ]
        )
        
        logger.info(f"Gemini backend initialized (model={self.model_name})")
    
    def generate(self, prompt: str) -> str:
        """
        Generate a response for one prompt.
        
        Args:
            prompt: Full prompt text.
            
        Returns:
            Non-empty response text.
            
        Raises:
            EmptyResponseError: No response or no text.
            SafetyBlockedError: Blocked by safety filters.
            TokenLimitExceededError: Cut off at the output token limit.
            BackendError: The API call itself failed.
        """
        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=self.generation_config
            )
        except genai_errors.APIError as e:
            raise BackendError(f"Gemini API error: {e}")
        except httpx.TransportError as e:
            # Timeouts and connection failures
            raise BackendError(f"Gemini transport error: {e!r}")
        
        if response is None:
            raise EmptyResponseError("Empty response from Gemini API")
        
        feedback = getattr(response, "prompt_feedback", None)
        if feedback is not None and getattr(feedback, "block_reason", None):
            raise SafetyBlockedError([_reason_name(feedback.block_reason)])
        
        candidates = getattr(response, "candidates", None) or []
        finish_reason = _reason_name(candidates[0].finish_reason) if candidates else None
        
        if finish_reason == "SAFETY":
            ratings = getattr(candidates[0], "safety_ratings", None) or []
            logger.error(f"Gemini safety block: {ratings}")
            raise SafetyBlockedError([str(rating) for rating in ratings])
        
        text = getattr(response, "text", None)
        if not text:
            if finish_reason == "MAX_TOKENS":
                raise TokenLimitExceededError(self.max_output_tokens)
            raise EmptyResponseError("Empty response text from Gemini API")
        
        return text


class ModelClient:
    """
    Prompt-to-JSON client with retries.
    
    Each attempt runs generation and tolerant parsing together; a
    malformed response is retried the same way as a failed call.
    
    Attributes:
        generator: TextGenerator backend
        retry_policy: RetryPolicy applied to every call
        
    Example:
        >>> client = ModelClient(GeminiTextGenerator(api_key="..."))
        >>> payload = client.get_json(prompt)
        >>> payload["normalized_amounts"]
    """
    
    def __init__(
        self,
        generator: TextGenerator,
        retry_policy: Optional[RetryPolicy] = None
    ) -> None:
        self.generator = generator
        self.retry_policy = retry_policy or RetryPolicy.from_config()
    
    def get_json(self, prompt: str) -> Dict[str, Any]:
        """
        Ask the backend for a JSON object.
        
        Args:
            prompt: Full prompt text.
            
        Returns:
            Decoded JSON object.
            
        Raises:
            BackendUnavailableError: After all attempts failed.
        """
        return self.retry_policy.call(lambda: self._attempt(prompt))
    
    def _attempt(self, prompt: str) -> Dict[str, Any]:
        text = self.generator.generate(prompt)
        
        result = parse_json(text)
        if not result.ok:
            raise MalformedBackendResponseError(result.error, text)
        if not isinstance(result.payload, dict):
            raise MalformedBackendResponseError("expected a JSON object", text)
        
        return result.payload


def create_model_client(api_key: Optional[str] = None) -> Optional[ModelClient]:
    """
    Build the configured model client.
    
    Args:
        api_key: Explicit key; otherwise read from the environment variable
                named by ``llm.api_key_env``.
        
    Returns:
        ModelClient, or None when the backend is disabled or no key is set.
    """
    if not get_config("llm.enabled", True):
        logger.info("Text-generation backend disabled by configuration")
        return None
    
    provider = get_config("llm.provider", "gemini")
    if provider != "gemini":
        raise ConfigurationError("llm.provider", f"Unsupported provider: {provider}")
    
    env_var = get_config("llm.api_key_env", "GEMINI_API_KEY")
    api_key = api_key or os.environ.get(env_var)
    if not api_key:
        logger.warning(f"{env_var} is not set; using rule-based classification only")
        return None
    
    return ModelClient(GeminiTextGenerator(api_key=api_key))
