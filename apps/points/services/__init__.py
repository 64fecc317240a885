"""
Points services module.

All services are exported from this module to maintain backward compatibility.
"""
from .points_calculator import PointsCalculator
from .grant_state import Credited, GrantState, NoGrant, Pending, resolve_grant_state
from .adjustment_service import LoyaltyAdjustmentService

__all__ = [
    'PointsCalculator',
    'Credited',
    'GrantState',
    'NoGrant',
    'Pending',
    'resolve_grant_state',
    'LoyaltyAdjustmentService',
]
