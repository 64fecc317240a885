"""
Refund proration for returned order lines.

Order-level amounts (discount code, points redemption) are never stored per
line. A returned line gets the share of them that matches its share of the
order subtotal, rounded per line and then per unit, so the refund for every
unit is the same no matter how a line is split over several returns.
"""
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Dict, Iterable, Tuple

from apps.common.exceptions import InconsistentStateError
from apps.common.money import round_half_up
from apps.orders.services import OrderLedger


@dataclass(frozen=True)
class ReturnedLine:
    """Quantity of one original order line taken back"""
    line_no: int
    quantity: int


@dataclass(frozen=True)
class LineRefund:
    line_no: int
    product_slug: str
    name: str
    quantity: int
    unit_price_cents: int
    effective_unit_cents: int
    refund_cents: int
    prorated_discount_cents: int = 0
    prorated_points_cents: int = 0
    selected_options: Dict[str, str] = field(default_factory=dict)

    @property
    def gross_cents(self) -> int:
        """Value of the returned units before any order-level deduction"""
        return self.unit_price_cents * self.quantity


@dataclass(frozen=True)
class RefundComputation:
    lines: Tuple[LineRefund, ...]
    items_refund_cents: int
    shipping_refund_cents: int
    is_full_return: bool

    @property
    def total_refund_cents(self) -> int:
        return self.items_refund_cents + self.shipping_refund_cents

    @property
    def returned_value_cents(self) -> int:
        return sum(line.gross_cents for line in self.lines)

    @property
    def returned_quantity(self) -> int:
        return sum(line.quantity for line in self.lines)

    def line(self, line_no):
        for line in self.lines:
            if line.line_no == line_no:
                return line
        return None


class ProrationCalculator:
    """Pure refund computation, no database access"""

    @staticmethod
    def line_share(line_total_cents: int, subtotal_cents: int) -> Fraction:
        if subtotal_cents <= 0:
            return Fraction(0)
        share = Fraction(line_total_cents, subtotal_cents)
        return min(max(share, Fraction(0)), Fraction(1))

    @staticmethod
    def _check_quantity(ledger: OrderLedger, returned: ReturnedLine):
        if returned.quantity < 0:
            raise InconsistentStateError(
                "Returned quantity must not be negative",
                order=ledger.order_number,
                line_no=returned.line_no,
                quantity=returned.quantity,
            )

    @classmethod
    def prorate_line(cls, ledger: OrderLedger, returned: ReturnedLine) -> LineRefund:
        original = ledger.line(returned.line_no)
        if returned.quantity > original.quantity:
            raise InconsistentStateError(
                "Returned quantity exceeds the ordered quantity",
                order=ledger.order_number,
                line_no=returned.line_no,
                ordered=original.quantity,
                returned=returned.quantity,
            )

        share = cls.line_share(original.line_total_cents, ledger.subtotal_cents)
        prorated_discount = round_half_up(ledger.discount_cents * share.numerator, share.denominator)
        prorated_points = round_half_up(ledger.points_discount_cents * share.numerator, share.denominator)

        per_unit_deduction = 0
        if original.quantity > 0:
            per_unit_deduction = (
                round_half_up(prorated_discount, original.quantity)
                + round_half_up(prorated_points, original.quantity)
            )
        effective_unit_cents = max(0, original.unit_price_cents - per_unit_deduction)

        return LineRefund(
            line_no=original.line_no,
            product_slug=original.product_slug,
            name=original.name,
            quantity=returned.quantity,
            unit_price_cents=original.unit_price_cents,
            effective_unit_cents=effective_unit_cents,
            refund_cents=effective_unit_cents * returned.quantity,
            prorated_discount_cents=prorated_discount,
            prorated_points_cents=prorated_points,
            selected_options=dict(original.selected_options),
        )

    @classmethod
    def compute_return_refund(cls, ledger: OrderLedger, returned_lines: Iterable[ReturnedLine],
                              prior_returned_lines: Iterable[ReturnedLine] = ()) -> RefundComputation:
        """
        Refund for ``returned_lines`` of the order in ``ledger``.

        ``prior_returned_lines`` are the accepted lines of the order's earlier
        completed returns; they only decide whether this return completes the
        order and therefore refunds shipping.
        """
        returned_lines = list(returned_lines)
        for returned in returned_lines:
            cls._check_quantity(ledger, returned)

        lines = tuple(
            cls.prorate_line(ledger, returned)
            for returned in returned_lines
            if returned.quantity > 0
        )
        items_refund_cents = sum(line.refund_cents for line in lines)

        returned_now = sum(line.quantity for line in lines)
        returned_before = sum(max(0, prior.quantity) for prior in prior_returned_lines)
        is_full_return = returned_now > 0 and returned_now + returned_before >= ledger.total_quantity

        shipping_refund_cents = 0
        if is_full_return:
            shipping_refund_cents = ledger.shipping_cost_cents or 0

        return RefundComputation(
            lines=lines,
            items_refund_cents=items_refund_cents,
            shipping_refund_cents=shipping_refund_cents,
            is_full_return=is_full_return,
        )
