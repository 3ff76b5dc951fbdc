import pytest

from hiring.utils.ratings import (
    clamp_rating,
    is_consideration,
    is_failing,
    is_passing,
    is_rated,
    is_valid_rating,
    percentage,
    round2,
)

pytestmark = pytest.mark.unit


def test_rating_scale_buckets():
    assert [r for r in range(1, 6) if is_passing(r)] == [1, 2]
    assert [r for r in range(1, 6) if is_consideration(r)] == [3]
    assert [r for r in range(1, 6) if is_failing(r)] == [4, 5]

    # Unrated candidates belong to no bucket
    assert not is_rated(None)
    assert not is_passing(None)
    assert not is_failing(None)
    assert not is_consideration(None)


def test_clamp_rating():
    assert clamp_rating(9) == 5
    assert clamp_rating(0) == 1
    assert clamp_rating(-3) == 1
    assert clamp_rating(3) == 3


@pytest.mark.parametrize("value", [0, 6, 2.5, "3", True, None])
def test_invalid_ratings_rejected(value):
    assert not is_valid_rating(value)


def test_round2_rounds_halves_up():
    assert round2(0.125) == 0.13
    assert round2(-0.125) == -0.12
    assert round2(66.666666) == 66.67
    assert round2(0.5) == 0.5


def test_percentage_guards_zero_denominator():
    assert percentage(3, 0) == 0.0
    assert percentage(1, 3) == 33.33
    assert percentage(2, 3) == 66.67
    assert percentage(1, 2) == 50.0
