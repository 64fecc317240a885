"""
Tests for the loyalty point adjustment service: pending vs credited grants,
freezing and idempotence.
"""
import pytest
from django.db import transaction
from django.db.models import F

from apps.common.concurrency import versioned_update
from apps.common.exceptions import ConcurrentUpdateError, InconsistentStateError, ValidationError
from apps.orders.models import Order
from apps.points.models import LoyaltyPointTimer, PointsTransaction
from apps.points.services import (
    Credited, LoyaltyAdjustmentService, NoGrant, Pending, resolve_grant_state,
)
from apps.returns.models import ReturnRequest
from tests.factories import UserFactory, create_order

LINES = [('lamp', 1143, 1), ('vase', 2286, 1)]


def make_return(order):
    return ReturnRequest.objects.create(order=order, user=order.user)


@pytest.mark.django_db
class TestPendingGrant:

    def test_deduction_lowers_pending_timer(self):
        order = create_order(lines=LINES)
        assert order.bonus_points_earned == 120

        deducted = LoyaltyAdjustmentService.apply_return_point_deduction(order, make_return(order), 1143)

        timer = LoyaltyPointTimer.objects.get(order=order)
        order.refresh_from_db()
        assert deducted == 40
        assert timer.points_awarded == 80
        assert timer.state == LoyaltyPointTimer.STATE_PENDING
        assert order.bonus_points_earned == 80
        assert order.user.bonus_points == 0
        assert not PointsTransaction.objects.exists()

    def test_grant_becomes_void_at_zero(self):
        order = create_order(lines=LINES)

        LoyaltyAdjustmentService.apply_return_point_deduction(order, make_return(order), 3429)

        timer = LoyaltyPointTimer.objects.get(order=order)
        order.refresh_from_db()
        assert timer.state == LoyaltyPointTimer.STATE_VOID
        assert timer.points_awarded == 0
        assert timer.scheduled_at is None
        assert order.bonus_points_scheduled_at is None
        assert order.bonus_points_earned == 0
        assert isinstance(resolve_grant_state(order, timer), NoGrant)

    def test_deduction_is_idempotent(self):
        order = create_order(lines=LINES)
        return_request = make_return(order)

        LoyaltyAdjustmentService.apply_return_point_deduction(order, return_request, 1143)
        again = LoyaltyAdjustmentService.apply_return_point_deduction(order, return_request, 1143)

        assert again == 40
        assert LoyaltyPointTimer.objects.get(order=order).points_awarded == 80


@pytest.mark.django_db
class TestCreditedGrant:

    def test_deduction_debits_live_balance(self):
        user = UserFactory(bonus_points=500)
        order = create_order(user=user, lines=LINES, credited=True)
        timer_before = LoyaltyPointTimer.objects.get(order=order)

        LoyaltyAdjustmentService.apply_return_point_deduction(order, make_return(order), 1143)

        user.refresh_from_db()
        order.refresh_from_db()
        timer = LoyaltyPointTimer.objects.get(order=order)
        assert user.bonus_points == 460
        assert order.bonus_points_deducted == 40
        assert order.bonus_points_deducted_at is not None
        assert (timer.points_awarded, timer.state, timer.version) == (
            timer_before.points_awarded, timer_before.state, timer_before.version
        )
        transaction = PointsTransaction.objects.get(user=user)
        assert transaction.amount == -40
        assert transaction.balance_after == 460
        assert transaction.transaction_type == PointsTransaction.TYPE_RETURN_DEDUCTION

    def test_balance_never_goes_negative(self):
        user = UserFactory(bonus_points=15)
        order = create_order(user=user, lines=LINES, credited=True)

        deducted = LoyaltyAdjustmentService.apply_return_point_deduction(order, make_return(order), 1143)

        user.refresh_from_db()
        order.refresh_from_db()
        assert deducted == 15
        assert user.bonus_points == 0
        assert order.bonus_points_deducted == 15

    def test_missing_user_is_fatal(self):
        order = create_order(lines=LINES, credited=True)
        order.user.delete()
        order.refresh_from_db()

        with pytest.raises(InconsistentStateError):
            LoyaltyAdjustmentService.apply_return_point_deduction(order, make_return(order), 1143)


@pytest.mark.django_db
class TestNoGrant:

    def test_missing_timer_is_skipped(self, caplog):
        order = create_order(lines=LINES, with_timer=False)
        return_request = make_return(order)

        deducted = LoyaltyAdjustmentService.apply_return_point_deduction(order, return_request, 1143)

        return_request.refresh_from_db()
        assert deducted == 0
        assert return_request.points_settled_at is not None
        assert 'No points grant' in caplog.text


@pytest.mark.django_db
class TestFreezeAndRelease:

    def test_freeze_moves_points_out_of_pending(self):
        order = create_order(lines=LINES)
        return_request = make_return(order)

        frozen = LoyaltyAdjustmentService.freeze_for_return(order, return_request, 1143)

        timer = LoyaltyPointTimer.objects.get(order=order)
        assert frozen == 40
        assert (timer.points_awarded, timer.frozen_points) == (80, 40)
        assert timer.frozen_by == [return_request.pk]
        assert return_request.frozen_points == 40

    def test_completion_settles_frozen_points(self):
        order = create_order(lines=LINES)
        return_request = make_return(order)
        LoyaltyAdjustmentService.freeze_for_return(order, return_request, 3429)

        # Only the cheaper line was accepted in the end
        deducted = LoyaltyAdjustmentService.apply_return_point_deduction(order, return_request, 1143)

        timer = LoyaltyPointTimer.objects.get(order=order)
        order.refresh_from_db()
        assert deducted == 40
        assert (timer.points_awarded, timer.frozen_points, timer.frozen_by) == (80, 0, [])
        assert order.bonus_points_earned == 80

    def test_rejection_releases_into_pending_grant(self):
        order = create_order(lines=LINES)
        return_request = make_return(order)
        LoyaltyAdjustmentService.freeze_for_return(order, return_request, 1143)

        released = LoyaltyAdjustmentService.release_for_return(order, return_request)

        timer = LoyaltyPointTimer.objects.get(order=order)
        assert released == 40
        assert (timer.points_awarded, timer.frozen_points) == (120, 0)

    def test_release_after_payout_credits_user_once(self):
        user = UserFactory(bonus_points=0)
        order = create_order(user=user, lines=LINES)
        return_request = make_return(order)
        LoyaltyAdjustmentService.freeze_for_return(order, return_request, 1143)

        timer = LoyaltyPointTimer.objects.get(order=order)
        LoyaltyAdjustmentService.credit_grant(timer.pk, now=timer.scheduled_at)
        user.refresh_from_db()
        assert user.bonus_points == 80

        order.refresh_from_db()
        LoyaltyAdjustmentService.release_for_return(order, return_request)
        user.refresh_from_db()
        assert user.bonus_points == 120

        order.refresh_from_db()
        assert LoyaltyAdjustmentService.release_for_return(order, return_request) == 0
        user.refresh_from_db()
        assert user.bonus_points == 120

    def test_nothing_frozen_once_credited(self):
        order = create_order(lines=LINES, credited=True)
        assert LoyaltyAdjustmentService.freeze_for_return(order, make_return(order), 1143) == 0


@pytest.mark.django_db
class TestGrantState:

    def test_resolve_variants(self):
        pending_order = create_order(lines=LINES)
        credited_order = create_order(lines=LINES, credited=True)
        legacy_order = create_order(lines=LINES, credited=True, with_timer=False)

        assert isinstance(resolve_grant_state(pending_order, pending_order.point_timer), Pending)
        assert isinstance(resolve_grant_state(credited_order, credited_order.point_timer), Credited)
        legacy = resolve_grant_state(legacy_order, None)
        assert isinstance(legacy, Credited)
        assert legacy.amount == 120


@pytest.mark.django_db
class TestRedemption:

    def test_redeem_debits_balance(self):
        user = UserFactory(bonus_points=1500)
        order = create_order(user=user)

        balance = LoyaltyAdjustmentService.redeem_points(order, 1000)

        assert balance == 500
        assert PointsTransaction.objects.get(user=user).transaction_type == PointsTransaction.TYPE_REDEMPTION

    def test_redeem_more_than_balance_fails(self):
        user = UserFactory(bonus_points=999)
        order = create_order(user=user)
        with pytest.raises(ValidationError):
            LoyaltyAdjustmentService.redeem_points(order, 1000)


@pytest.mark.django_db
class TestVersionedWrites:

    def test_stale_order_is_refused(self):
        order = create_order(lines=LINES)
        stale = Order.objects.get(pk=order.pk)
        versioned_update(order, 'status')

        stale.status = Order.STATUS_RETURN_REQUESTED
        with pytest.raises(ConcurrentUpdateError):
            versioned_update(stale, 'status')

        order.refresh_from_db()
        assert order.version == 1
        assert order.status == Order.STATUS_DELIVERED

    def test_stale_timer_is_refused(self):
        order = create_order(lines=LINES)
        stale = LoyaltyPointTimer.objects.get(order=order)
        LoyaltyPointTimer.objects.filter(pk=stale.pk).update(version=F('version') + 1)

        stale.points_awarded = 0
        with pytest.raises(ConcurrentUpdateError):
            versioned_update(stale, 'points_awarded')

        assert LoyaltyPointTimer.objects.get(pk=stale.pk).points_awarded == 120

    def test_successful_write_bumps_version(self):
        order = create_order(lines=LINES)
        timer = order.point_timer

        versioned_update(timer, 'points_awarded')
        versioned_update(timer, 'points_awarded')

        assert timer.version == 2
        assert LoyaltyPointTimer.objects.get(pk=timer.pk).version == 2

    def test_deduction_through_stale_order_rolls_back(self):
        order = create_order(lines=LINES)
        Order.objects.filter(pk=order.pk).update(version=F('version') + 1)

        with pytest.raises(ConcurrentUpdateError), transaction.atomic():
            LoyaltyAdjustmentService.apply_return_point_deduction(order, make_return(order), 1143)

        timer = LoyaltyPointTimer.objects.get(order=order)
        assert timer.points_awarded == 120
        assert timer.version == 0
