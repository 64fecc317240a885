"""
Points calculator for the redemption discount and the earn/deduct rate.
"""
from decimal import Decimal

from django.conf import settings

from apps.common.money import floor_div


class PointsCalculator:
    """Calculate points values. Only this class converts between points and cents."""

    # (minimum points, discount in cents), highest tier first
    POINTS_DISCOUNT_TIERS = (
        (5000, 5000),
        (4000, 3500),
        (3000, 2000),
        (2000, 1000),
        (1000, 500),
    )

    @classmethod
    def points_discount_cents(cls, points):
        """Discount granted for redeeming ``points``. A step function, not linear."""
        for minimum, discount_cents in cls.POINTS_DISCOUNT_TIERS:
            if points >= minimum:
                return discount_cents
        return 0

    @classmethod
    def minimum_redeemable_points(cls):
        return cls.POINTS_DISCOUNT_TIERS[-1][0]

    @staticmethod
    def points_per_euro():
        return Decimal(str(getattr(settings, 'BONUS_POINTS_PER_EURO', '3.5')))

    @classmethod
    def points_for_value(cls, value_cents):
        """
        Points tied to a gross value in cents.

        Used for earning on placement, for freezing on a return request and
        for deducting on completion, so the three always agree.
        """
        if value_cents <= 0:
            return 0
        return floor_div(Decimal(value_cents) * cls.points_per_euro(), 100)
