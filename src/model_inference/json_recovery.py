"""
Tolerant JSON recovery for text-generation output.

Models asked for JSON often wrap it in code fences, add prose around it,
leave keys unquoted, use single quotes or keep trailing commas. Each of
those repairs is a separate transform; ``parse_json`` applies them in
order and tries to decode after every step, so the lightest repair that
works wins.

Example:
    >>> result = parse_json("```json\\n{amounts: [1, 2,],}\\n```")
    >>> result.ok, result.payload
    (True, {'amounts': [1, 2]})
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from src.utils.logger import get_logger

logger = get_logger(__name__)

_CODE_FENCE = re.compile(r"```(?:json|JSON)?[ \t]*\n?|\n?```")
_ZERO_WIDTH = re.compile(r"[\u200B-\u200D\uFEFF]")
_UNQUOTED_KEY = re.compile(r"([{,]\s*)([A-Za-z_]\w*)(\s*:)")
_SINGLE_QUOTED = re.compile(r"'([^'\"\\]*)'")
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")


@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of a tolerant parse.
    
    Attributes:
        ok: Whether a JSON value was recovered
        payload: The decoded value when ok
        error: Decoder message of the last failed attempt when not ok
        transforms_applied: Names of the transforms that ran before success
    """
    ok: bool
    payload: Any = None
    error: Optional[str] = None
    transforms_applied: Tuple[str, ...] = ()


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences such as ```json ... ```."""
    return _CODE_FENCE.sub("", text).strip()


def strip_zero_width(text: str) -> str:
    """Remove zero-width spaces, joiners and byte order marks."""
    return _ZERO_WIDTH.sub("", text)


def extract_json_object(text: str) -> str:
    """
    Isolate the outermost JSON object from surrounding prose.
    
    Braces inside string literals are ignored. When the object is never
    closed, everything from the first ``{`` to the last ``}`` is kept.
    """
    start = text.find("{")
    if start < 0:
        return text
    
    depth = 0
    in_string = False
    escape = False
    
    for i in range(start, len(text)):
        ch = text[i]
        
        if escape:
            escape = False
            continue
        if ch == "\\":
            escape = in_string
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    
    end = text.rfind("}")
    return text[start:end + 1] if end > start else text[start:]


def quote_unquoted_keys(text: str) -> str:
    """Quote bare object keys: ``{amounts: []}`` becomes ``{"amounts": []}``."""
    return _UNQUOTED_KEY.sub(r'\1"\2"\3', text)


def single_to_double_quotes(text: str) -> str:
    """Turn single-quoted strings into double-quoted ones."""
    return _SINGLE_QUOTED.sub(r'"\1"', text)


def remove_trailing_commas(text: str) -> str:
    """Drop commas directly before a closing bracket or brace."""
    return _TRAILING_COMMA.sub(r"\1", text)


# Applied cumulatively, in order
TRANSFORMS: List[Tuple[str, Callable[[str], str]]] = [
    ("strip_code_fences", strip_code_fences),
    ("strip_zero_width", strip_zero_width),
    ("extract_json_object", extract_json_object),
    ("quote_unquoted_keys", quote_unquoted_keys),
    ("single_to_double_quotes", single_to_double_quotes),
    ("remove_trailing_commas", remove_trailing_commas),
]


def _try_decode(text: str) -> Tuple[bool, Any, Optional[str]]:
    try:
        return True, json.loads(text), None
    except ValueError as e:
        return False, None, str(e)


def parse_json(text: Optional[str]) -> ParseResult:
    """
    Recover a JSON value from model output.
    
    Args:
        text: Raw response text.
        
    Returns:
        ParseResult; never raises.
    """
    if text is None or not text.strip():
        return ParseResult(ok=False, error="Empty response")
    
    current = text.strip()
    ok, payload, error = _try_decode(current)
    if ok:
        return ParseResult(ok=True, payload=payload)
    
    applied: List[str] = []
    for name, transform in TRANSFORMS:
        transformed = transform(current)
        if transformed == current:
            continue
        current = transformed
        applied.append(name)
        
        if not current.strip():
            return ParseResult(ok=False, error="Empty response after cleanup",
                               transforms_applied=tuple(applied))
        
        ok, payload, error = _try_decode(current)
        if ok:
            logger.debug(f"Recovered JSON after: {', '.join(applied)}")
            return ParseResult(ok=True, payload=payload, transforms_applied=tuple(applied))
    
    logger.debug(f"JSON recovery failed: {error}")
    return ParseResult(ok=False, error=error, transforms_applied=tuple(applied))
