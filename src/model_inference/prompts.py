"""
Prompt templates for the text-generation backend.

Both prompts ask for a single JSON object and embed the bill text as
context. Values are serialized with ``json.dumps`` so numbers and tokens
reach the model exactly as the pipeline sees them.
"""

import json
from typing import Dict, List, Sequence

from .classification_result import MODEL_AMOUNT_TYPES

NORMALIZATION_PROMPT = """Return the response in this exact JSON format:
{{
  "normalized_amounts": [numbers only],
  "normalization_confidence": number between 0.0 and 1.0
}}

Extract ALL valid currency amounts. Be comprehensive and include every monetary value:

Raw Tokens: {raw_tokens}
Context: "{context}"

MANDATORY INCLUSIONS from raw tokens:
{mandatory}

Include every amount that could be a charge, tax, subtotal, total, payment or balance.

EXCLUDE ONLY: Phone numbers, dates, invoice numbers, version numbers (1.1).

Example:
{{"normalized_amounts":[1902.05,1745.00,1000.00,745.00,157.05],"normalization_confidence":0.95}}"""


CLASSIFICATION_PROMPT = """You are analyzing the OCR text of a bill or invoice. CRITICAL: Only classify amounts based on terms actually found in the text.

STRICT RULES:
1. Only use amount types where you can find the exact word or clear synonym in the OCR text
2. Look for "TAX" followed by amount -> classify as "tax"
3. Look for "SUB TOTAL" -> classify as "subtotal"
4. Look for "TOTAL" (final) -> classify as "total"
5. Look for "Amount DUE" or "DUE" -> classify as "due"
6. Look for service line items like "Full Check Up $745.00" -> classify as "other_charges"
7. Percentages (like "9%") are tax rates, not amounts to classify

Terms detected in text: {terms}

Amounts to classify: {amounts}
OCR Text: "{text}"

Return ONLY this JSON format:
{{
  "amounts": [
    {{
      "type": one of {types},
      "value": number
    }}
  ],
  "confidence": number between 0.0 and 1.0
}}

Classify ALL relevant amounts you can find evidence for in the text."""


def build_normalization_prompt(
    raw_tokens: Sequence[str],
    context: str,
    mandatory_tokens: Sequence[str]
) -> str:
    """
    Prompt asking the model to list every monetary amount.
    
    Args:
        raw_tokens: Tokens from the extraction stage.
        context: Canonicalized bill text.
        mandatory_tokens: Decimal tokens the model must not drop.
    """
    mandatory = "\n".join(f"- {token}" for token in mandatory_tokens) or "- (none)"
    return NORMALIZATION_PROMPT.format(
        raw_tokens=json.dumps(list(raw_tokens)),
        context=context,
        mandatory=mandatory
    )


def build_classification_prompt(
    amounts: Sequence[float],
    terms: Dict[str, bool],
    text: str
) -> str:
    """Prompt asking the model to type each candidate amount."""
    types: List[str] = [amount_type.value for amount_type in MODEL_AMOUNT_TYPES]
    return CLASSIFICATION_PROMPT.format(
        terms=json.dumps(terms),
        amounts=json.dumps(list(amounts)),
        text=text,
        types=json.dumps(types)
    )
