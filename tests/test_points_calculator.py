"""
Tests for the tiered points discount and the points-per-value rate.
"""
import pytest
from hypothesis import given, strategies as st

from apps.points.services import PointsCalculator


class TestPointsDiscountTiers:

    @pytest.mark.parametrize('points, expected_cents', [
        (0, 0),
        (999, 0),
        (1000, 500),
        (1999, 500),
        (2000, 1000),
        (2999, 1000),
        (3000, 2000),
        (3999, 2000),
        (4000, 3500),
        (4999, 3500),
        (5000, 5000),
        (25000, 5000),
    ])
    def test_tier_boundaries(self, points, expected_cents):
        assert PointsCalculator.points_discount_cents(points) == expected_cents

    @given(st.integers(min_value=0, max_value=100000), st.integers(min_value=0, max_value=100000))
    def test_discount_is_monotonic(self, a, b):
        low, high = sorted((a, b))
        assert PointsCalculator.points_discount_cents(low) <= PointsCalculator.points_discount_cents(high)

    def test_minimum_redeemable_points(self):
        assert PointsCalculator.minimum_redeemable_points() == 1000


class TestPointsForValue:

    @pytest.mark.parametrize('cents, expected', [
        (0, 0),
        (-500, 0),
        (28, 0),
        (29, 1),
        (1000, 35),
        (1143, 40),
        (2286, 80),
        (3429, 120),
    ])
    def test_floor_of_rate(self, cents, expected):
        assert PointsCalculator.points_for_value(cents) == expected

    def test_rate_follows_settings(self, settings):
        settings.BONUS_POINTS_PER_EURO = 1
        assert PointsCalculator.points_for_value(1999) == 19

    @given(st.integers(min_value=0, max_value=10 ** 7), st.integers(min_value=0, max_value=10 ** 7))
    def test_split_never_exceeds_whole(self, a, b):
        whole = PointsCalculator.points_for_value(a + b)
        assert PointsCalculator.points_for_value(a) + PointsCalculator.points_for_value(b) <= whole
