"""
Return completion.

Applies an admin's decision to a return. Completing a return restocks the
accepted lines, computes the prorated refund, settles the loyalty points
and moves the order to ``return_completed`` in one transaction. Emails and
the credit note are produced only after that transaction has committed.
"""
import logging
from typing import Dict, List

from django.db import transaction
from django.utils import timezone

from apps.common.concurrency import versioned_update
from apps.common.exceptions import CollaboratorFailure, NotFoundError, ValidationError
from apps.orders.models import Order
from apps.orders.services import OrderLedger
from apps.points.services import LoyaltyAdjustmentService
from apps.products.services import StockService
from ..models import ReturnRequest
from .credit_note_service import CreditNoteService
from .notification_service import ReturnNotificationService
from .proration_service import ProrationCalculator, ReturnedLine
from .return_service import ReturnService

logger = logging.getLogger(__name__)


class ReturnCompletionService:
    """Service class for admin decisions on returns"""

    UPDATABLE_STATUSES = (
        ReturnRequest.STATUS_PROCESSING,
        ReturnRequest.STATUS_COMPLETED,
        ReturnRequest.STATUS_REJECTED,
    )

    @staticmethod
    def _lock(return_id):
        order_id = ReturnRequest.objects.filter(pk=return_id).values_list('order_id', flat=True).first()
        if order_id is None:
            raise NotFoundError("Return not found", return_id=return_id)
        # Order first: completions of the same order run one after another
        order = Order.objects.select_for_update().get(pk=order_id)
        return_request = ReturnRequest.objects.select_for_update().get(pk=return_id)
        return order, return_request

    @staticmethod
    def _match_item(items, decision):
        line_no = decision.get('lineNo')
        if line_no is not None:
            for item in items:
                if item.line_no == int(line_no):
                    return item
            raise ValidationError("Return has no such line", line_no=line_no)

        product_id = decision.get('productId')
        candidates = [item for item in items if item.product_slug == product_id]
        if len(candidates) != 1:
            raise ValidationError(
                "Item must be identified by lineNo" if candidates else "Return has no such product",
                product=product_id,
            )
        return candidates[0]

    @staticmethod
    def apply_item_decisions(return_request, decisions: List[Dict]):
        """Store accepted flags and quantities. Quantities never exceed what was requested."""
        items = list(return_request.items.all())
        for decision in decisions:
            item = ReturnCompletionService._match_item(items, decision)
            if 'accepted' in decision:
                item.accepted = bool(decision['accepted'])
            if decision.get('quantity') is not None:
                item.quantity = min(max(0, int(decision['quantity'])), item.requested_quantity)
            item.save(update_fields=['accepted', 'quantity'])
        return items

    @staticmethod
    def _apply_refund_record(return_request, refund):
        if not refund:
            return
        if refund.get('method') is not None:
            return_request.refund_method = refund['method']
        if refund.get('reference') is not None:
            return_request.refund_reference = refund['reference']
        if refund.get('amountCents') is not None:
            return_request.refund_amount_cents = int(refund['amountCents'])

    @staticmethod
    def _check_over_return(order, return_request, accepted):
        returned = ReturnService.completed_quantities(order, exclude_return_id=return_request.pk)
        for item in accepted:
            already = returned.get(item.line_no, 0)
            if already + item.quantity > item.order_item.quantity:
                raise ValidationError(
                    f"Line {item.line_no} would be returned more often than it was ordered",
                    line_no=item.line_no,
                    ordered=item.order_item.quantity,
                    returned=already,
                    requested=item.quantity,
                )

    @staticmethod
    def _restock(return_request, accepted):
        if return_request.restocked_at is not None:
            return
        for item in accepted:
            try:
                StockService.restock(item.product_slug, item.quantity, item.selected_options)
            except CollaboratorFailure:
                raise
            except Exception as e:
                raise CollaboratorFailure(
                    f"Restock of {item.product_slug} failed: {e}",
                    return_id=return_request.pk,
                    product=item.product_slug,
                ) from e
        return_request.restocked_at = timezone.now()

    @staticmethod
    def _complete(order, return_request):
        items = list(return_request.items.select_related('order_item'))
        accepted = [item for item in items if item.accepted and item.quantity > 0]

        ReturnCompletionService._check_over_return(order, return_request, accepted)
        ReturnCompletionService._restock(return_request, accepted)

        ledger = OrderLedger.from_order(order)
        computation = ProrationCalculator.compute_return_refund(
            ledger,
            [ReturnedLine(line_no=item.line_no, quantity=item.quantity) for item in accepted],
            ReturnService.prior_returned_lines(order, exclude_return_id=return_request.pk),
        )

        LoyaltyAdjustmentService.apply_return_point_deduction(
            order, return_request, computation.returned_value_cents
        )

        for item in items:
            line = computation.line(item.line_no) if item in accepted else None
            item.effective_unit_cents = line.effective_unit_cents if line else None
            item.refund_cents = line.refund_cents if line else 0
            item.save(update_fields=['effective_unit_cents', 'refund_cents'])

        return_request.items_refund_cents = computation.items_refund_cents
        return_request.shipping_refund_cents = computation.shipping_refund_cents
        return_request.is_full_return = computation.is_full_return
        # An amount entered by staff, now or while processing, wins over the calculated total
        if return_request.refund_amount_cents is None:
            return_request.refund_amount_cents = computation.total_refund_cents
        return_request.status = ReturnRequest.STATUS_COMPLETED
        return_request.completed_at = timezone.now()

        order.status = Order.STATUS_RETURN_COMPLETED
        versioned_update(order, 'status')

        logger.info(
            f"Return {return_request.pk} of order {order.order_number} completed: "
            f"items={computation.items_refund_cents} shipping={computation.shipping_refund_cents} "
            f"full={computation.is_full_return} points={return_request.points_deducted}"
        )
        return CreditNoteService.build(ledger, computation, return_request.pk)

    @staticmethod
    def _reject(order, return_request):
        LoyaltyAdjustmentService.release_for_return(order, return_request)
        return_request.status = ReturnRequest.STATUS_REJECTED

        still_open = order.return_requests.filter(
            status__in=ReturnRequest.OPEN_STATUSES
        ).exclude(pk=return_request.pk).exists()
        if not still_open and order.status == Order.STATUS_RETURN_REQUESTED:
            has_completed = order.return_requests.filter(status=ReturnRequest.STATUS_COMPLETED).exists()
            order.status = Order.STATUS_RETURN_COMPLETED if has_completed else Order.STATUS_DELIVERED
            versioned_update(order, 'status')

        logger.info(f"Return {return_request.pk} of order {order.order_number} rejected")

    @staticmethod
    def process_update(return_id, items=None, status=None, notes=None, refund=None) -> ReturnRequest:
        """
        Apply item decisions and an optional status transition to a return.

        A completed or rejected return only accepts bookkeeping changes
        (notes, refund method/reference); repeating its final status is a no-op.
        """
        if status is not None and status not in ReturnCompletionService.UPDATABLE_STATUSES:
            raise ValidationError(f"Invalid status {status}", status=status)

        credit_note = None
        with transaction.atomic():
            order, return_request = ReturnCompletionService._lock(return_id)
            previous_status = return_request.status

            if previous_status in ReturnRequest.TERMINAL_STATUSES:
                if items or status not in (None, previous_status):
                    raise ValidationError(
                        f"Return is already {previous_status}",
                        return_id=return_id,
                    )
                if notes is not None:
                    return_request.notes = notes
                if refund:
                    refund = {key: value for key, value in refund.items() if key != 'amountCents'}
                ReturnCompletionService._apply_refund_record(return_request, refund)
                return_request.save()
                return return_request

            if items:
                ReturnCompletionService.apply_item_decisions(return_request, items)
            if notes is not None:
                return_request.notes = notes
            ReturnCompletionService._apply_refund_record(return_request, refund)

            if status == ReturnRequest.STATUS_COMPLETED:
                credit_note = ReturnCompletionService._complete(order, return_request)
            elif status == ReturnRequest.STATUS_REJECTED:
                ReturnCompletionService._reject(order, return_request)
            elif status == ReturnRequest.STATUS_PROCESSING:
                return_request.status = ReturnRequest.STATUS_PROCESSING

            return_request.save()

        if return_request.status == ReturnRequest.STATUS_COMPLETED:
            CreditNoteService.render(return_request, credit_note)
            ReturnNotificationService.send_return_completed(return_request)
        elif return_request.status == ReturnRequest.STATUS_REJECTED:
            ReturnNotificationService.send_return_rejected(return_request)

        return return_request
