"""
Read-only view of a placed order.

The proration and credit-note code works on these frozen snapshots
instead of model instances, so it stays free of database access.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from apps.common.exceptions import InconsistentStateError


@dataclass(frozen=True)
class LedgerLine:
    line_no: int
    product_slug: str
    name: str
    unit_price_cents: int
    quantity: int
    selected_options: Dict[str, str] = field(default_factory=dict)

    @property
    def line_total_cents(self) -> int:
        return self.unit_price_cents * self.quantity


@dataclass(frozen=True)
class OrderLedger:
    order_id: Optional[int]
    order_number: str
    lines: Tuple[LedgerLine, ...]
    discount_cents: int = 0
    discount_code: str = ''
    bonus_points_redeemed: int = 0
    bonus_points_earned: int = 0
    bonus_points_credited: bool = False
    shipping_cost_cents: Optional[int] = None

    @classmethod
    def from_order(cls, order) -> 'OrderLedger':
        lines = tuple(
            LedgerLine(
                line_no=item.line_no,
                product_slug=item.product_slug,
                name=item.name,
                unit_price_cents=item.unit_price_cents,
                quantity=item.quantity,
                selected_options=dict(item.selected_options or {}),
            )
            for item in order.items.order_by('line_no')
        )
        return cls(
            order_id=order.pk,
            order_number=order.order_number,
            lines=lines,
            discount_cents=order.discount_cents,
            discount_code=order.discount_code,
            bonus_points_redeemed=order.bonus_points_redeemed,
            bonus_points_earned=order.bonus_points_earned,
            bonus_points_credited=order.bonus_points_credited,
            shipping_cost_cents=order.shipping_cost_cents,
        )

    @property
    def subtotal_cents(self) -> int:
        """Subtotal over the original lines, independent of any stored value"""
        return sum(line.line_total_cents for line in self.lines)

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def points_discount_cents(self) -> int:
        from apps.points.services.points_calculator import PointsCalculator
        return PointsCalculator.points_discount_cents(self.bonus_points_redeemed)

    def line(self, line_no: int) -> LedgerLine:
        for line in self.lines:
            if line.line_no == line_no:
                return line
        raise InconsistentStateError(
            f"Order {self.order_number} has no line {line_no}",
            order=self.order_number,
            line_no=line_no,
        )
