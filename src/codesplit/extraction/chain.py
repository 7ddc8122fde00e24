"""
Ordered fallback chains for tolerant parsing.

Each extractor is a list of strategies tried in order. A strategy returns
its result when it recognizes the input and None otherwise; the chain ends
with a fallback that always produces a result.
"""

from collections.abc import Callable, Sequence
from typing import Optional, TypeVar

T = TypeVar("T")

Strategy = Callable[[str], Optional[T]]


def first_match(strategies: Sequence[Strategy[T]], fallback: Callable[[str], T], text: str) -> T:
    """Return the result of the first matching strategy, else the fallback's."""
    for strategy in strategies:
        result = strategy(text)
        if result is not None:
            return result
    return fallback(text)
