"""
Keyword-overlap relevance scoring.

Relevance is the number of an item's keywords that also appear in a reference
keyword set. It is a plain intersection count (no weighting), so ties are common;
ranking breaks them by input order.
"""

from dataclasses import dataclass
from typing import AbstractSet, Callable, Generic, Iterable, List, Optional, TypeVar

from lettersmith.contexts.targeting.keywords import extract_keywords

T = TypeVar("T")


@dataclass(frozen=True)
class ScoredItem(Generic[T]):
    """
    An item paired with its relevance to a reference text.

    Attributes:
        item: Arbitrary payload (experience entry, achievement string, ...)
        relevance: Keyword-overlap count, never negative
    """

    item: T
    relevance: int

    def __post_init__(self):
        if self.relevance < 0:
            raise ValueError(f"relevance must be >= 0, got {self.relevance}")


def score(item_text: str, reference_keywords: AbstractSet[str]) -> int:
    """
    Count how many keywords of item_text appear in reference_keywords.

    Example:
        >>> score("Scaled Kubernetes clusters", extract_keywords("Kubernetes engineer"))
        1
    """
    return len(extract_keywords(item_text) & reference_keywords)


def rank(
    items: Iterable[T],
    reference_keywords: AbstractSet[str],
    text_of: Callable[[T], str] = str,
    limit: Optional[int] = None,
) -> List[ScoredItem[T]]:
    """
    Score items and order them by relevance, highest first.

    The sort is stable: items with equal relevance keep their input order.

    Args:
        items: Items to rank
        reference_keywords: Keyword set to score against
        text_of: Maps an item to the text that gets scored (default: str)
        limit: Keep at most this many items (default: all)

    Returns:
        List of ScoredItem, truncated to limit
    """
    scored = [ScoredItem(item, score(text_of(item), reference_keywords)) for item in items]
    ranked = sorted(scored, key=lambda scored_item: scored_item.relevance, reverse=True)
    return ranked if limit is None else ranked[:limit]
