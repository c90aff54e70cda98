"""
Amount Aggregation and Deduplication.

Three overlapping sources of candidate amounts are merged here: locally
cleaned tokens, amounts proposed by the text-generation backend, and
decimal-bearing raw tokens kept as a guard against the model dropping
them. The merged set is range filtered, deduplicated with a relative
tolerance, restricted to the configured value bands and capped.

Author: ML Engineering Team
"""

import re
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from config import get_config
from src.utils.logger import get_logger
from src.utils.exceptions import NoValidAmountsError
from .normalizers import AmountCleaner

# Initialize module logger
logger = get_logger(__name__)

_DECIMAL_TOKEN = re.compile(r"^\d+\.\d+$")


def decimal_token_values(
    raw_tokens: Iterable[str],
    low: float = 10.0,
    high: Optional[float] = None
) -> List[Tuple[str, float]]:
    """
    Select decimal-bearing tokens within a value range.
    
    Args:
        raw_tokens: Tokens from the extraction stage.
        low: Inclusive lower bound.
        high: Inclusive upper bound, or None for no bound.
        
    Returns:
        List of (token, value) pairs in input order.
    """
    selected = []
    for token in raw_tokens:
        if not _DECIMAL_TOKEN.match(token):
            continue
        value = float(token)
        if value >= low and (high is None or value <= high):
            selected.append((token, value))
    return selected


def important_raw_amounts(
    raw_tokens: Iterable[str],
    value_range: Optional[Sequence[float]] = None
) -> List[float]:
    """
    Decimal-bearing raw tokens that must survive even if the model drops them.
    
    Args:
        raw_tokens: Tokens from the extraction stage.
        value_range: Inclusive [low, high]; defaults to
                    ``aggregation.important_raw_range``.
        
    Returns:
        Values in input order.
        
    Example:
        >>> important_raw_amounts(["745.00", "1902.05", "9%", "15"])
        [745.0]
    """
    low, high = value_range or get_config("aggregation.important_raw_range", [10, 1000])
    return [value for _, value in decimal_token_values(raw_tokens, low, high)]


class AmountAggregator:
    """
    Merges candidate amounts into a bounded, deduplicated set.
    
    Steps, in order: set union, range filter, descending sort, greedy
    tolerance dedup, band filter, cap.
    
    Attributes:
        min_amount: Smallest value kept
        max_amount: Largest value kept
        tolerance: Relative difference below which two values are duplicates
        bands: Inclusive [low, high] ranges a value must fall in
        max_candidates: Upper bound on the result size
        
    Example:
        >>> aggregator = AmountAggregator()
        >>> aggregator.aggregate([745.0, 745.5, 157.05])
        [745.5, 157.05]
    """
    
    def __init__(
        self,
        cleaner: Optional[AmountCleaner] = None,
        min_amount: Optional[float] = None,
        max_amount: Optional[float] = None,
        tolerance: Optional[float] = None,
        bands: Optional[Sequence[Sequence[float]]] = None,
        max_candidates: Optional[int] = None
    ) -> None:
        """Initialize the aggregator with configuration."""
        self.cleaner = cleaner or AmountCleaner()
        self.min_amount = (
            min_amount if min_amount is not None
            else get_config("aggregation.min_amount", 0.01)
        )
        self.max_amount = (
            max_amount if max_amount is not None
            else get_config("aggregation.max_amount", 100000)
        )
        self.tolerance = (
            tolerance if tolerance is not None
            else get_config("aggregation.tolerance", 0.01)
        )
        self.bands = [
            (float(low), float(high))
            for low, high in (
                bands if bands is not None
                else get_config("aggregation.bands", [[0, 1], [1, 50], [50, 10000]])
            )
        ]
        self.max_candidates = (
            max_candidates if max_candidates is not None
            else get_config("aggregation.max_candidates", 8)
        )
        
        logger.debug(
            f"AmountAggregator initialized (range=[{self.min_amount}, {self.max_amount}], "
            f"tolerance={self.tolerance}, bands={self.bands}, cap={self.max_candidates})"
        )
    
    def aggregate(
        self,
        cleaned: Iterable[float],
        model_amounts: Iterable[Union[str, int, float]] = (),
        important: Iterable[float] = ()
    ) -> List[float]:
        """
        Merge the three candidate sources.
        
        Args:
            cleaned: Locally cleaned token values.
            model_amounts: Raw values proposed by the model; each is cleaned
                          and invalid ones are dropped.
            important: Values that bypass the model.
            
        Returns:
            Descending candidate list, at most ``max_candidates`` long.
            
        Raises:
            NoValidAmountsError: If nothing survives the filters.
        """
        union = set(cleaned)
        union.update(self.cleaner.clean_many(model_amounts))
        union.update(important)
        
        in_range = [v for v in union if self.min_amount <= v <= self.max_amount]
        ordered = sorted(in_range, reverse=True)
        unique = self.deduplicate(ordered)
        banded = [v for v in unique if self.in_bands(v)]
        candidates = banded[:self.max_candidates]
        
        logger.info(
            f"Aggregated {len(union)} amounts -> {len(in_range)} in range -> "
            f"{len(unique)} unique -> {len(candidates)} candidates"
        )
        
        if not candidates:
            raise NoValidAmountsError()
        
        return candidates
    
    def deduplicate(self, ordered: Sequence[float]) -> List[float]:
        """
        Greedy tolerance dedup over descending values.
        
        A value is dropped when some kept value differs from it by less
        than ``tolerance`` of the larger of the two.
        """
        kept: List[float] = []
        for value in ordered:
            if any(self._is_near(existing, value) for existing in kept):
                logger.debug(f"Dropped near-duplicate amount: {value}")
                continue
            kept.append(value)
        return kept
    
    def _is_near(self, a: float, b: float) -> bool:
        larger = max(a, b)
        if larger == 0:
            return True
        return abs(a - b) / larger < self.tolerance
    
    def in_bands(self, value: float) -> bool:
        """Check whether a value lies in one of the configured bands."""
        return any(low <= value <= high for low, high in self.bands)
