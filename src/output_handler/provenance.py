"""
Provenance Location Module.

Finds the line of bill text that best supports a classified amount, so
every reported value can be checked against the source document.

Author: ML Engineering Team
"""

from typing import Dict, List, Tuple, Union

from src.utils.helpers import amount_variants, format_amount, mentions_amount
from src.utils.logger import get_logger
from src.model_inference.classification_result import AmountType

# Initialize module logger
logger = get_logger(__name__)

TYPE_KEYWORDS: Dict[AmountType, Tuple[str, ...]] = {
    AmountType.TOTAL: ("total", "bill", "gross", "amount", "payable"),
    AmountType.SUBTOTAL: ("sub total", "subtotal"),
    AmountType.TAX: ("tax", "gst", "vat"),
    AmountType.DUE: ("due", "balance", "pending"),
    AmountType.PAID: ("paid", "payment", "received"),
    AmountType.BALANCE: ("balance", "due", "outstanding"),
    AmountType.DISCOUNT: ("discount", "off", "savings"),
    AmountType.MRP: ("mrp", "maximum retail"),
    AmountType.CHARGES: ("charge", "fee"),
    AmountType.OTHER_CHARGES: (
        "charge", "fee", "service", "consultation", "registration",
        "room", "check up", "procedure", "examination"
    ),
}

CURRENCY_PREFIXES = ("", "₹", "₹ ", "Rs", "Rs.", "$", "$ ")


def amount_formats(value: float) -> List[str]:
    """
    Literal spellings of an amount, symbol-prefixed ones included.
    
    Example:
        >>> amount_formats(745.0)[:3]
        ['745.00', '₹745.00', '₹ 745.00']
    """
    return [
        f"{prefix}{variant}"
        for variant in amount_variants(value)
        for prefix in CURRENCY_PREFIXES
    ]


class ProvenanceLocator:
    """
    Locates the source line for a (type, value) pair.
    
    Pass one wants a line with both a keyword of the type and the
    amount; pass two settles for the amount alone. When neither finds a
    line, a synthetic ``"<type>: <value>"`` citation is returned, so the
    locator never fails.
    
    Example:
        >>> locator = ProvenanceLocator()
        >>> locator.locate(AmountType.DUE, 1745.0, "Paid 1745.00\\nAmount DUE 1745.00")
        'Amount DUE 1745.00'
        >>> locator.locate(AmountType.TAX, 12.5, "")
        'tax: 12.5'
    """
    
    def locate(self, amount_type: Union[AmountType, str], value: float, text: str) -> str:
        """
        Find the best supporting line.
        
        Args:
            amount_type: Category of the amount.
            value: Amount value.
            text: Bill text.
            
        Returns:
            The stripped source line, or the synthetic citation.
        """
        type_name = getattr(amount_type, "value", str(amount_type))
        parsed = AmountType.parse(type_name)
        keywords = TYPE_KEYWORDS[parsed] if parsed else (type_name.lower(),)
        formats = amount_formats(value)
        lines = (text or "").splitlines()
        
        for line in lines:
            lowered = line.lower()
            if any(k in lowered for k in keywords) and self._prints(line, formats):
                return line.strip()
        
        for line in lines:
            if self._prints(line, formats):
                return line.strip()
        
        logger.debug(f"No source line for {type_name} {value}, using synthetic citation")
        return f"{type_name}: {format_amount(value)}"
    
    @staticmethod
    def _prints(line: str, formats: List[str]) -> bool:
        return any(mentions_amount(line, literal) for literal in formats)
