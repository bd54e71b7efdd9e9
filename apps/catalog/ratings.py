"""
Rating aggregation for products.
"""
from typing import Iterable, Tuple


def rating_summary(ratings: Iterable[int]) -> Tuple[float, int]:
    """Return ``(average, count)``; the average of no ratings is 0."""
    values = list(ratings)
    if not values:
        return 0.0, 0
    return sum(values) / len(values), len(values)
