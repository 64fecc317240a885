"""
Points models module.

All models are exported from this module to maintain backward compatibility.
"""
from .timer import LoyaltyPointTimer
from .transaction import PointsTransaction

__all__ = [
    'LoyaltyPointTimer',
    'PointsTransaction',
]
