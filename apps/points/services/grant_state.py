"""
Lifecycle of an order's points grant.

``resolve_grant_state`` is the only place that interprets the timer row and
the order's credited flag; callers branch on the returned variant.
"""
from dataclasses import dataclass
from typing import Optional, Union

from ..models import LoyaltyPointTimer


@dataclass(frozen=True)
class NoGrant:
    reason: str = ''


@dataclass(frozen=True)
class Pending:
    amount: int
    frozen: int
    timer: LoyaltyPointTimer


@dataclass(frozen=True)
class Credited:
    amount: int
    timer: Optional[LoyaltyPointTimer]


GrantState = Union[NoGrant, Pending, Credited]


def resolve_grant_state(order, timer: Optional[LoyaltyPointTimer]) -> GrantState:
    if timer is None:
        if order.bonus_points_credited:
            # Credited before timers were tracked per order
            return Credited(amount=order.bonus_points_earned, timer=None)
        return NoGrant(reason='no timer')

    if timer.state == LoyaltyPointTimer.STATE_CREDITED or order.bonus_points_credited:
        return Credited(amount=timer.points_awarded, timer=timer)

    if timer.state == LoyaltyPointTimer.STATE_VOID:
        return NoGrant(reason='grant void')

    return Pending(amount=timer.points_awarded, frozen=timer.frozen_points, timer=timer)
