"""
Tests for filing returns and return availability.
"""
from datetime import timedelta

import pytest
from django.core import mail
from django.utils import timezone

from apps.common.exceptions import NotFoundError, ValidationError
from apps.orders.models import Order
from apps.points.models import LoyaltyPointTimer
from apps.returns.models import ReturnRequest
from apps.returns.services import ReturnCompletionService, ReturnService
from tests.factories import UserFactory, create_order


@pytest.mark.django_db
class TestCreateReturn:

    def test_creates_pending_return_with_snapshot(self, customer, two_line_order):
        return_request = ReturnService.create_return(
            customer, two_line_order.order_number, [{'lineNo': 1, 'quantity': 1}], 'Too small'
        )

        assert return_request.status == ReturnRequest.STATUS_PENDING
        item = return_request.items.get()
        assert (item.line_no, item.product_slug, item.unit_price_cents) == (1, 'shirt', 1000)
        assert item.requested_quantity == item.quantity == 1
        assert item.accepted is False
        two_line_order.refresh_from_db()
        assert two_line_order.status == Order.STATUS_RETURN_REQUESTED

    def test_freezes_points_for_requested_value(self, customer, two_line_order):
        return_request = ReturnService.create_return(
            customer, two_line_order.order_number, [{'lineNo': 2, 'quantity': 1}]
        )

        timer = LoyaltyPointTimer.objects.get(order=two_line_order)
        assert return_request.frozen_points == 105
        assert timer.frozen_points == 105
        assert timer.points_awarded == 175 - 105

    def test_sends_received_email(self, customer, two_line_order):
        ReturnService.create_return(customer, two_line_order.order_number, [{'lineNo': 1, 'quantity': 2}])

        assert len(mail.outbox) == 1
        assert two_line_order.order_number in mail.outbox[0].subject
        assert mail.outbox[0].to == [customer.email]

    def test_email_failure_does_not_fail_the_return(self, customer, two_line_order, settings):
        settings.EMAIL_BACKEND = 'tests.test_return_service.BrokenBackend'
        return_request = ReturnService.create_return(
            customer, two_line_order.order_number, [{'lineNo': 1, 'quantity': 1}]
        )
        assert ReturnRequest.objects.filter(pk=return_request.pk).exists()

    def test_quantity_is_clamped_to_what_is_left(self, customer, two_line_order):
        ReturnService.create_return(customer, two_line_order.order_number, [{'lineNo': 1, 'quantity': 1}])

        second = ReturnService.create_return(
            customer, two_line_order.order_number, [{'lineNo': 1, 'quantity': 5}, {'lineNo': 2, 'quantity': 1}]
        )

        quantities = {item.line_no: item.quantity for item in second.items.all()}
        assert quantities == {1: 1, 2: 1}

    def test_fully_requested_order_cannot_be_returned_again(self, customer, two_line_order):
        ReturnService.create_return(
            customer, two_line_order.order_number, [{'lineNo': 1, 'quantity': 2}, {'lineNo': 2, 'quantity': 1}]
        )
        with pytest.raises(ValidationError):
            ReturnService.create_return(customer, two_line_order.order_number, [{'lineNo': 1, 'quantity': 1}])

    def test_unknown_line(self, customer, two_line_order):
        with pytest.raises(ValidationError):
            ReturnService.create_return(customer, two_line_order.order_number, [{'lineNo': 9, 'quantity': 1}])

    def test_other_users_order_is_not_found(self, two_line_order):
        with pytest.raises(NotFoundError):
            ReturnService.create_return(UserFactory(), two_line_order.order_number, [{'lineNo': 1, 'quantity': 1}])

    def test_undelivered_order_cannot_be_returned(self, customer):
        order = create_order(user=customer, status=Order.STATUS_SHIPPED, delivered_at=None)
        with pytest.raises(ValidationError):
            ReturnService.create_return(customer, order.order_number, [{'lineNo': 1, 'quantity': 1}])

    def test_return_window_expired(self, customer):
        order = create_order(user=customer, delivered_at=timezone.now() - timedelta(days=31))
        with pytest.raises(ValidationError):
            ReturnService.create_return(customer, order.order_number, [{'lineNo': 1, 'quantity': 1}])
        assert not ReturnRequest.objects.exists()


@pytest.mark.django_db
class TestAvailability:

    def test_counts_completed_and_open_returns(self, customer, two_line_order):
        first = ReturnService.create_return(customer, two_line_order.order_number, [{'lineNo': 1, 'quantity': 1}])
        ReturnCompletionService.process_update(first.pk, items=[{'lineNo': 1, 'accepted': True}], status='completed')
        ReturnService.create_return(customer, two_line_order.order_number, [{'lineNo': 2, 'quantity': 1}])

        lines = {line['lineNo']: line for line in ReturnService.get_availability(two_line_order)}

        assert lines[1]['returnedQuantity'] == 1
        assert lines[1]['availableQuantity'] == 1
        assert lines[2]['requestedQuantity'] == 1
        assert lines[2]['isAvailable'] is False

    def test_rejected_returns_free_the_quantity(self, customer, two_line_order):
        return_request = ReturnService.create_return(
            customer, two_line_order.order_number, [{'lineNo': 2, 'quantity': 1}]
        )
        ReturnCompletionService.process_update(return_request.pk, status='rejected')

        lines = {line['lineNo']: line for line in ReturnService.get_availability(two_line_order)}
        assert lines[2]['availableQuantity'] == 1


class BrokenBackend:
    def __init__(self, *args, **kwargs):
        pass

    def send_messages(self, messages):
        raise ConnectionError("SMTP down")
