"""
Credit note data for completed returns.

Only the data is produced here. Rendering is delegated to the callable named
by ``settings.CREDIT_NOTE_RENDERER``; its failures never undo a completion
because the data can be rebuilt from the persisted return.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from django.conf import settings
from django.utils.module_loading import import_string

from apps.common.exceptions import NotFoundError
from ..models import ReturnRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreditNoteLine:
    line_no: int
    name: str
    quantity: int
    effective_unit_cents: int
    line_total_cents: int
    selected_options: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CreditNoteData:
    order_number: str
    return_request_id: int
    lines: Tuple[CreditNoteLine, ...]
    items_total_cents: int
    shipping_refund_cents: int

    @property
    def total_cents(self) -> int:
        return self.items_total_cents + self.shipping_refund_cents

    def as_dict(self):
        return {
            'orderNumber': self.order_number,
            'returnId': self.return_request_id,
            'lines': [
                {
                    'lineNo': line.line_no,
                    'name': line.name,
                    'quantity': line.quantity,
                    'effectiveUnitCents': line.effective_unit_cents,
                    'lineTotalCents': line.line_total_cents,
                    'selectedOptions': line.selected_options,
                }
                for line in self.lines
            ],
            'itemsTotalCents': self.items_total_cents,
            'shippingRefundCents': self.shipping_refund_cents,
            'totalCents': self.total_cents,
        }


class CreditNoteService:
    """Builds credit note data and hands it to the renderer"""

    @staticmethod
    def build(ledger, computation, return_request_id) -> CreditNoteData:
        """Credit note from a fresh refund computation"""
        lines = tuple(
            CreditNoteLine(
                line_no=line.line_no,
                name=line.name,
                quantity=line.quantity,
                effective_unit_cents=line.effective_unit_cents,
                line_total_cents=line.refund_cents,
                selected_options=dict(line.selected_options),
            )
            for line in computation.lines
        )
        return CreditNoteData(
            order_number=ledger.order_number,
            return_request_id=return_request_id,
            lines=lines,
            items_total_cents=computation.items_refund_cents,
            shipping_refund_cents=computation.shipping_refund_cents,
        )

    @staticmethod
    def build_for_return(return_request: ReturnRequest) -> CreditNoteData:
        """Credit note rebuilt from the results stored on a completed return"""
        if return_request.status != ReturnRequest.STATUS_COMPLETED:
            raise NotFoundError(
                "Credit notes exist for completed returns only",
                return_id=return_request.pk,
                status=return_request.status,
            )

        lines = tuple(
            CreditNoteLine(
                line_no=item.line_no,
                name=item.name,
                quantity=item.quantity,
                effective_unit_cents=item.effective_unit_cents or 0,
                line_total_cents=item.refund_cents or 0,
                selected_options=dict(item.selected_options or {}),
            )
            for item in return_request.items.all()
            if item.accepted and item.quantity > 0
        )
        return CreditNoteData(
            order_number=return_request.order.order_number,
            return_request_id=return_request.pk,
            lines=lines,
            items_total_cents=return_request.items_refund_cents or 0,
            shipping_refund_cents=return_request.shipping_refund_cents or 0,
        )

    @staticmethod
    def get_renderer():
        path = getattr(settings, 'CREDIT_NOTE_RENDERER', '')
        if not path:
            return None
        return import_string(path)

    @staticmethod
    def render(return_request: ReturnRequest, data: CreditNoteData) -> Optional[object]:
        """Pass ``data`` to the configured renderer. Failures are logged, not raised."""
        try:
            renderer = CreditNoteService.get_renderer()
            if renderer is None:
                logger.debug(f"No credit note renderer configured, skipping return {return_request.pk}")
                return None
            return renderer(data.as_dict())
        except Exception as e:
            logger.error(
                f"Credit note generation failed for order {return_request.order_id} "
                f"return {return_request.pk}: {e}",
                exc_info=True,
            )
            return None
