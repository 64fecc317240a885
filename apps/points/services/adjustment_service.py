"""
Loyalty point adjustment service.

Single entry point for every mutation of a points grant (LoyaltyPointTimer)
and of a user's live balance. A return either reduces the grant while it
is still pending, or debits the balance once the grant has been paid out,
never both.
"""
import logging
from datetime import timedelta
from typing import Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from apps.common.concurrency import versioned_update
from apps.common.exceptions import ConcurrentUpdateError, InconsistentStateError, ValidationError
from apps.orders.models import Order
from ..models import LoyaltyPointTimer, PointsTransaction
from .grant_state import Credited, NoGrant, Pending, resolve_grant_state
from .points_calculator import PointsCalculator

logger = logging.getLogger(__name__)


class LoyaltyAdjustmentService:
    """Service for points grants and balance changes"""

    @staticmethod
    def _lock_timer(order) -> Optional[LoyaltyPointTimer]:
        return LoyaltyPointTimer.objects.select_for_update().filter(order_id=order.pk).first()

    @staticmethod
    def _lock_user(user_id, order):
        User = get_user_model()
        try:
            if user_id is None:
                raise User.DoesNotExist
            return User.objects.select_for_update().get(pk=user_id)
        except User.DoesNotExist:
            raise InconsistentStateError(
                f"Points of order {order.order_number} belong to a missing user",
                order=order.order_number,
                user_id=user_id,
            )

    @staticmethod
    def _change_balance(user, amount, transaction_type, description, reference_id):
        """Apply a signed amount to the live balance and record it"""
        user.bonus_points += amount
        versioned_update(user, 'bonus_points')
        PointsTransaction.objects.create(
            user=user,
            transaction_type=transaction_type,
            amount=amount,
            balance_after=user.bonus_points,
            description=description,
            reference_id=reference_id,
        )
        return user.bonus_points

    @staticmethod
    def schedule_grant(order):
        """Create the pending timer for the points earned on ``order``"""
        if order.bonus_points_earned <= 0 or order.user_id is None:
            return None

        delay = getattr(settings, 'BONUS_POINTS_CREDIT_DELAY_DAYS', 14)
        scheduled_at = timezone.now() + timedelta(days=delay)
        timer = LoyaltyPointTimer.objects.create(
            order=order,
            user_id=order.user_id,
            points_awarded=order.bonus_points_earned,
            scheduled_at=scheduled_at,
        )
        order.bonus_points_scheduled_at = scheduled_at
        versioned_update(order, 'bonus_points_scheduled_at')

        logger.info(f"Scheduled {timer.points_awarded} points for order {order.order_number} at {scheduled_at}")
        return timer

    @staticmethod
    def redeem_points(order, points):
        """Debit the points redeemed on ``order`` from its user's balance"""
        user = LoyaltyAdjustmentService._lock_user(order.user_id, order)
        if user.bonus_points < points:
            raise ValidationError(
                "Insufficient bonus points",
                available=user.bonus_points,
                requested=points,
            )
        discount_cents = PointsCalculator.points_discount_cents(points)
        return LoyaltyAdjustmentService._change_balance(
            user,
            -points,
            PointsTransaction.TYPE_REDEMPTION,
            f"Redeemed for {discount_cents} cents discount",
            f"order:{order.order_number}",
        )

    @staticmethod
    def freeze_for_return(order, return_request, value_cents):
        """
        Withhold the points tied to ``value_cents`` from a pending grant
        until ``return_request`` is completed or rejected.
        """
        timer = LoyaltyAdjustmentService._lock_timer(order)
        state = resolve_grant_state(order, timer)
        if not isinstance(state, Pending):
            return 0

        frozen = min(PointsCalculator.points_for_value(value_cents), timer.points_awarded)
        if frozen <= 0:
            return 0

        timer.points_awarded -= frozen
        timer.frozen_points += frozen
        timer.frozen_by = list(timer.frozen_by or []) + [return_request.pk]
        versioned_update(timer, 'points_awarded', 'frozen_points', 'frozen_by')

        return_request.frozen_points = frozen
        return_request.save(update_fields=['frozen_points', 'updated_at'])

        logger.info(f"Froze {frozen} points of order {order.order_number} for return {return_request.pk}")
        return frozen

    @staticmethod
    def _settle_frozen(order, timer, state, return_request, keep):
        """
        Take ``keep`` points out of the amount frozen for ``return_request``
        and release the rest. Returns the number of points kept.
        """
        if timer is None or return_request.pk not in (timer.frozen_by or []):
            return 0

        frozen = min(return_request.frozen_points, timer.frozen_points)
        kept = min(keep, frozen)
        released = frozen - kept

        timer.frozen_points -= frozen
        timer.frozen_by = [pk for pk in timer.frozen_by if pk != return_request.pk]

        if released and isinstance(state, Pending):
            timer.points_awarded += released
        elif released:
            # The grant was paid out while these points were withheld
            user = LoyaltyAdjustmentService._lock_user(order.user_id, order)
            LoyaltyAdjustmentService._change_balance(
                user,
                released,
                PointsTransaction.TYPE_RETURN_RELEASE,
                f"Released points withheld for return {return_request.pk}",
                f"return:{return_request.pk}",
            )

        if kept and isinstance(state, Credited):
            # Withheld points were never paid, only the order's figure drops
            order.bonus_points_earned = max(0, order.bonus_points_earned - kept)

        logger.info(
            f"Settled frozen points of return {return_request.pk}: kept={kept} released={released}"
        )
        return kept

    @staticmethod
    def _void_if_empty(order, timer):
        if timer.points_awarded == 0 and timer.frozen_points == 0:
            timer.state = LoyaltyPointTimer.STATE_VOID
            timer.scheduled_at = None
            order.bonus_points_scheduled_at = None
            logger.info(f"Points grant of order {order.order_number} voided")

    @staticmethod
    def _save(order, timer):
        if timer is not None:
            versioned_update(timer, 'points_awarded', 'frozen_points', 'frozen_by', 'state', 'scheduled_at')
        versioned_update(
            order,
            'bonus_points_earned', 'bonus_points_scheduled_at',
            'bonus_points_deducted', 'bonus_points_deducted_at',
        )

    @staticmethod
    def apply_return_point_deduction(order, return_request, returned_value_cents):
        """
        Take back the points tied to the accepted value of a completed return.

        ``order`` must be locked by the caller. Calling it again for the same
        return is a no-op.
        """
        if return_request.points_settled_at is not None:
            logger.info(f"Points of return {return_request.pk} already settled")
            return return_request.points_deducted

        points_to_deduct = PointsCalculator.points_for_value(returned_value_cents)
        timer = LoyaltyAdjustmentService._lock_timer(order)
        state = resolve_grant_state(order, timer)

        holds_frozen = timer is not None and return_request.pk in (timer.frozen_by or [])
        deducted = LoyaltyAdjustmentService._settle_frozen(order, timer, state, return_request, points_to_deduct)
        remaining = points_to_deduct - deducted

        if isinstance(state, Pending):
            new_pending = max(0, timer.points_awarded - remaining)
            deducted += timer.points_awarded - new_pending
            timer.points_awarded = new_pending
            LoyaltyAdjustmentService._void_if_empty(order, timer)
            order.bonus_points_earned = timer.points_awarded + timer.frozen_points
        elif isinstance(state, Credited):
            if remaining > 0:
                user = LoyaltyAdjustmentService._lock_user(order.user_id, order)
                actual = min(remaining, max(0, user.bonus_points))
                if actual:
                    LoyaltyAdjustmentService._change_balance(
                        user,
                        -actual,
                        PointsTransaction.TYPE_RETURN_DEDUCTION,
                        f"Deducted for return {return_request.pk} of order {order.order_number}",
                        f"return:{return_request.pk}",
                    )
                order.bonus_points_deducted += actual
                order.bonus_points_deducted_at = timezone.now()
                deducted += actual
        elif isinstance(state, NoGrant) and remaining > 0:
            logger.warning(
                f"No points grant for order {order.order_number} ({state.reason}), "
                f"skipping deduction of {remaining} points for return {return_request.pk}"
            )

        LoyaltyAdjustmentService._save(order, timer if holds_frozen or isinstance(state, Pending) else None)

        return_request.points_deducted = deducted
        return_request.points_settled_at = timezone.now()
        return_request.save(update_fields=['points_deducted', 'points_settled_at', 'updated_at'])

        logger.info(
            f"Return {return_request.pk}: deducted {deducted} of {points_to_deduct} points "
            f"from order {order.order_number}"
        )
        return deducted

    @staticmethod
    def release_for_return(order, return_request):
        """Give back everything frozen for a rejected return"""
        if return_request.points_settled_at is not None:
            return 0

        timer = LoyaltyAdjustmentService._lock_timer(order)
        state = resolve_grant_state(order, timer)
        released = 0
        if timer is not None and return_request.pk in (timer.frozen_by or []):
            released = min(return_request.frozen_points, timer.frozen_points)
            LoyaltyAdjustmentService._settle_frozen(order, timer, state, return_request, 0)
            LoyaltyAdjustmentService._save(order, timer)

        return_request.points_deducted = 0
        return_request.points_settled_at = timezone.now()
        return_request.save(update_fields=['points_deducted', 'points_settled_at', 'updated_at'])
        return released

    @staticmethod
    @transaction.atomic
    def credit_grant(timer_id, now=None):
        """Pay a due pending grant into the user's balance"""
        now = now or timezone.now()
        order = Order.objects.select_for_update().get(point_timer__pk=timer_id)
        timer = LoyaltyAdjustmentService._lock_timer(order)

        if not timer.is_pending or timer.scheduled_at is None or timer.scheduled_at > now:
            return None

        try:
            user = LoyaltyAdjustmentService._lock_user(timer.user_id, order)
        except InconsistentStateError:
            logger.error(f"Cannot credit points of order {order.order_number}: user {timer.user_id} missing")
            return None

        if timer.points_awarded > 0:
            LoyaltyAdjustmentService._change_balance(
                user,
                timer.points_awarded,
                PointsTransaction.TYPE_CREDIT,
                f"Points for order {order.order_number}",
                f"order:{order.order_number}",
            )

        timer.state = LoyaltyPointTimer.STATE_CREDITED
        timer.credited_at = now
        versioned_update(timer, 'state', 'credited_at')

        order.bonus_points_credited = True
        order.bonus_points_credited_at = now
        versioned_update(order, 'bonus_points_credited', 'bonus_points_credited_at')

        logger.info(f"Credited {timer.points_awarded} points of order {order.order_number} to user {user.pk}")
        return timer.points_awarded

    @staticmethod
    def credit_due_grants(now=None):
        """Credit every pending grant scheduled at or before ``now``"""
        now = now or timezone.now()
        due = LoyaltyPointTimer.objects.filter(
            state=LoyaltyPointTimer.STATE_PENDING,
            scheduled_at__lte=now,
        ).values_list('pk', flat=True)

        credited = 0
        total_points = 0
        for timer_id in list(due):
            try:
                points = LoyaltyAdjustmentService.credit_grant(timer_id, now)
            except ConcurrentUpdateError as e:
                logger.warning(f"Skipping timer {timer_id}, modified concurrently: {e}")
                continue
            if points is not None:
                credited += 1
                total_points += points

        return {'credited': credited, 'points': total_points}
