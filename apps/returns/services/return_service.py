"""
Return request service: filing returns and reading their state.
"""
import logging
from datetime import timedelta
from typing import Dict, List

from django.conf import settings
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from apps.common.concurrency import versioned_update
from apps.common.exceptions import NotFoundError, ValidationError
from apps.orders.models import Order
from apps.orders.services import OrderLedger
from apps.points.services import LoyaltyAdjustmentService
from ..models import ReturnItem, ReturnRequest
from .notification_service import ReturnNotificationService
from .proration_service import ProrationCalculator, ReturnedLine

logger = logging.getLogger(__name__)


class ReturnService:
    """Service class for customer facing return logic"""

    @staticmethod
    def _quantities_by_line(queryset) -> Dict[int, int]:
        rows = queryset.values('line_no').annotate(total=Sum('quantity'))
        return {row['line_no']: row['total'] or 0 for row in rows}

    @staticmethod
    def completed_quantities(order, exclude_return_id=None) -> Dict[int, int]:
        """Accepted quantity per line over the order's completed returns"""
        queryset = ReturnItem.objects.filter(
            return_request__order=order,
            return_request__status=ReturnRequest.STATUS_COMPLETED,
            accepted=True,
        )
        if exclude_return_id is not None:
            queryset = queryset.exclude(return_request_id=exclude_return_id)
        return ReturnService._quantities_by_line(queryset)

    @staticmethod
    def open_quantities(order, exclude_return_id=None) -> Dict[int, int]:
        """Quantity per line held by pending or processing returns"""
        queryset = ReturnItem.objects.filter(
            return_request__order=order,
            return_request__status__in=ReturnRequest.OPEN_STATUSES,
        )
        if exclude_return_id is not None:
            queryset = queryset.exclude(return_request_id=exclude_return_id)
        return ReturnService._quantities_by_line(queryset)

    @staticmethod
    def prior_returned_lines(order, exclude_return_id=None) -> List[ReturnedLine]:
        completed = ReturnService.completed_quantities(order, exclude_return_id)
        return [ReturnedLine(line_no=line_no, quantity=quantity) for line_no, quantity in completed.items()]

    @staticmethod
    def get_availability(order) -> List[Dict]:
        """Per order line: how many units can still be returned"""
        completed = ReturnService.completed_quantities(order)
        requested = ReturnService.open_quantities(order)

        availability = []
        for item in order.items.order_by('line_no'):
            returned = completed.get(item.line_no, 0)
            pending = requested.get(item.line_no, 0)
            available = max(0, item.quantity - returned - pending)
            availability.append({
                'lineNo': item.line_no,
                'productId': item.product_slug,
                'name': item.name,
                'unitPriceCents': item.unit_price_cents,
                'selectedOptions': item.selected_options or {},
                'originalQuantity': item.quantity,
                'returnedQuantity': returned,
                'requestedQuantity': pending,
                'availableQuantity': available,
                'isAvailable': available > 0,
            })
        return availability

    @staticmethod
    def get_user_order(user, order_number) -> Order:
        order = Order.objects.filter(order_number=order_number, user=user).first()
        if order is None:
            raise NotFoundError("Order not found", order=order_number)
        return order

    @staticmethod
    def check_return_window(order):
        if order.status not in Order.RETURNABLE_STATUSES:
            raise ValidationError(
                f"Returns are not possible for orders in status {order.status}",
                order=order.order_number,
            )
        delivered_at = order.delivered_at or order.created_at
        days = getattr(settings, 'RETURN_WINDOW_DAYS', 30)
        if timezone.now() > delivered_at + timedelta(days=days):
            raise ValidationError(
                f"The return window of {days} days has expired",
                order=order.order_number,
            )

    @staticmethod
    def _normalize_items(items) -> Dict[int, int]:
        requested = {}
        for entry in items or []:
            try:
                line_no = int(entry['lineNo'])
                quantity = int(entry.get('quantity', 0))
            except (KeyError, TypeError, ValueError):
                raise ValidationError("Each item needs a lineNo and a quantity")
            if quantity <= 0:
                continue
            requested[line_no] = requested.get(line_no, 0) + quantity
        return requested

    @staticmethod
    def create_return(user, order_number, items, notes='') -> ReturnRequest:
        """
        File a return for some lines of a delivered order.

        Requested quantities are clamped to what is still returnable; lines
        with nothing left are dropped.
        """
        with transaction.atomic():
            order = Order.objects.select_for_update().filter(order_number=order_number, user=user).first()
            if order is None:
                raise NotFoundError("Order not found", order=order_number)

            ReturnService.check_return_window(order)

            requested = ReturnService._normalize_items(items)
            availability = {line['lineNo']: line for line in ReturnService.get_availability(order)}
            unknown = [line_no for line_no in requested if line_no not in availability]
            if unknown:
                raise ValidationError("Unknown order line", order=order_number, lines=unknown)

            selected = {}
            for line_no, quantity in requested.items():
                quantity = min(quantity, availability[line_no]['availableQuantity'])
                if quantity > 0:
                    selected[line_no] = quantity
            if not selected:
                raise ValidationError("No returnable items selected", order=order_number)

            return_request = ReturnRequest.objects.create(
                order=order,
                user=user,
                notes=notes or '',
            )
            order_items = {item.line_no: item for item in order.items.filter(line_no__in=list(selected))}
            value_cents = 0
            for line_no, quantity in sorted(selected.items()):
                order_item = order_items[line_no]
                ReturnItem.objects.create(
                    return_request=return_request,
                    order_item=order_item,
                    line_no=line_no,
                    product_slug=order_item.product_slug,
                    name=order_item.name,
                    unit_price_cents=order_item.unit_price_cents,
                    selected_options=order_item.selected_options or {},
                    requested_quantity=quantity,
                    quantity=quantity,
                )
                value_cents += order_item.unit_price_cents * quantity

            LoyaltyAdjustmentService.freeze_for_return(order, return_request, value_cents)

            if order.status != Order.STATUS_RETURN_REQUESTED:
                order.status = Order.STATUS_RETURN_REQUESTED
                versioned_update(order, 'status')

        logger.info(f"Return {return_request.pk} filed for order {order_number}: {selected}")
        ReturnNotificationService.send_return_received(return_request)
        return return_request

    @staticmethod
    def list_for_user(user):
        return (
            ReturnRequest.objects.filter(user=user)
            .select_related('order')
            .prefetch_related('items')
        )

    @staticmethod
    def list_for_admin(status=None, user_id=None):
        """All returns, newest first, optionally narrowed to one status or one customer"""
        queryset = ReturnRequest.objects.select_related('order', 'user').prefetch_related('items')
        if status:
            if status not in dict(ReturnRequest.STATUS_CHOICES):
                raise ValidationError(f"Invalid status {status}", status=status)
            queryset = queryset.filter(status=status)
        if user_id is not None:
            queryset = queryset.filter(user_id=user_id)
        return queryset.order_by('-created_at', '-pk')

    @staticmethod
    def get_return(return_id) -> ReturnRequest:
        return_request = (
            ReturnRequest.objects.select_related('order', 'user')
            .prefetch_related('items')
            .filter(pk=return_id)
            .first()
        )
        if return_request is None:
            raise NotFoundError("Return not found", return_id=return_id)
        return return_request

    @staticmethod
    def preview_refund(return_request: ReturnRequest):
        """Refund the current item decisions would produce, without saving anything"""
        order = return_request.order
        returned = [
            ReturnedLine(line_no=item.line_no, quantity=item.quantity)
            for item in return_request.items.all()
            if item.accepted
        ]
        return ProrationCalculator.compute_return_refund(
            OrderLedger.from_order(order),
            returned,
            ReturnService.prior_returned_lines(order, exclude_return_id=return_request.pk),
        )
