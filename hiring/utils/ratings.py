"""
Interview rating scale helpers.

The scale is inverted: lower is better.
    1-2  passed
    3    for consideration
    4-5  failed
"""

import math
from typing import Optional

MIN_RATING = 1
MAX_RATING = 5
PASSING_RATING_MAX = 2
CONSIDERATION_RATING = 3
FAILING_RATING_MIN = 4


def is_rated(rating: Optional[int]) -> bool:
    return rating is not None


def is_passing(rating: Optional[int]) -> bool:
    return rating is not None and rating <= PASSING_RATING_MAX


def is_consideration(rating: Optional[int]) -> bool:
    return rating == CONSIDERATION_RATING


def is_failing(rating: Optional[int]) -> bool:
    return rating is not None and rating >= FAILING_RATING_MIN


def is_valid_rating(value) -> bool:
    """True for integers on the 1-5 scale (bools are rejected)."""
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and MIN_RATING <= value <= MAX_RATING
    )


def clamp_rating(value: int) -> int:
    return max(MIN_RATING, min(MAX_RATING, value))


def round2(value: float) -> float:
    """
    Round to 2 decimals with halves rounded up.

    Matches the frontend's Math.round(x * 100) / 100, so 0.125 -> 0.13 and
    -0.125 -> -0.12.
    """
    return math.floor(value * 100 + 0.5) / 100


def percentage(part: int, whole: int) -> float:
    """part/whole as a rounded percentage, 0 when whole is 0."""
    if whole <= 0:
        return 0.0
    return round2(part / whole * 100)
