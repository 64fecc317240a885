"""
Core order service for order placement and delivery.
"""
import logging
import uuid
from typing import Dict, List, Optional

from django.db import transaction
from django.utils import timezone

from apps.common.concurrency import versioned_update
from apps.common.exceptions import NotFoundError, ValidationError
from apps.points.services import LoyaltyAdjustmentService, PointsCalculator
from ..models import Order, OrderItem

logger = logging.getLogger(__name__)


class OrderService:
    """Service class for core order business logic"""

    @staticmethod
    def generate_order_number() -> str:
        return f"ORD-{timezone.now():%Y%m%d}-{uuid.uuid4().hex[:6].upper()}"

    @staticmethod
    def validate_lines(lines: List[Dict]) -> None:
        if not lines:
            raise ValidationError("Order must contain at least one item")

        for line in lines:
            if not all(key in line for key in ['product_slug', 'name', 'unit_price_cents', 'quantity']):
                raise ValidationError("Each item must have product_slug, name, unit_price_cents and quantity")
            if int(line['quantity']) <= 0:
                raise ValidationError("Quantity must be greater than 0", product=line['product_slug'])
            if int(line['unit_price_cents']) < 0:
                raise ValidationError("Price must not be negative", product=line['product_slug'])

    @staticmethod
    @transaction.atomic
    def place_order(user, lines: List[Dict], shipping_cost_cents: Optional[int] = None,
                    discount_cents: int = 0, discount_code: str = '',
                    bonus_points_redeemed: int = 0) -> Order:
        """
        Create an order with numbered lines, redeem points and schedule the
        points grant.

        ``lines`` items: product_slug, name, unit_price_cents, quantity and
        optionally selected_options.
        """
        OrderService.validate_lines(lines)

        subtotal_cents = sum(int(line['unit_price_cents']) * int(line['quantity']) for line in lines)
        shipping = int(shipping_cost_cents) if shipping_cost_cents is not None else 0

        if discount_cents < 0 or discount_cents > subtotal_cents:
            raise ValidationError("Discount must be between 0 and the order subtotal")

        points_discount_cents = 0
        if bonus_points_redeemed:
            if user is None:
                raise ValidationError("Guest orders cannot redeem bonus points")
            points_discount_cents = PointsCalculator.points_discount_cents(bonus_points_redeemed)
            if points_discount_cents == 0:
                raise ValidationError(
                    f"At least {PointsCalculator.minimum_redeemable_points()} points must be redeemed",
                    points=bonus_points_redeemed,
                )
            # At least one cent has to be paid
            if points_discount_cents > subtotal_cents + shipping - discount_cents - 1:
                raise ValidationError("Points discount exceeds the order value", points=bonus_points_redeemed)

        total_cents = max(0, subtotal_cents + shipping - discount_cents - points_discount_cents)

        order = Order.objects.create(
            order_number=OrderService.generate_order_number(),
            user=user,
            status=Order.STATUS_PROCESSING,
            subtotal_cents=subtotal_cents,
            shipping_cost_cents=shipping_cost_cents,
            discount_cents=discount_cents,
            discount_code=discount_code or '',
            total_cents=total_cents,
            bonus_points_redeemed=bonus_points_redeemed,
            bonus_points_earned=PointsCalculator.points_for_value(subtotal_cents) if user else 0,
        )

        for line_no, line in enumerate(lines, start=1):
            OrderItem.objects.create(
                order=order,
                line_no=line_no,
                product_slug=line['product_slug'],
                name=line['name'],
                unit_price_cents=int(line['unit_price_cents']),
                quantity=int(line['quantity']),
                selected_options=line.get('selected_options') or {},
            )

        if bonus_points_redeemed:
            LoyaltyAdjustmentService.redeem_points(order, bonus_points_redeemed)

        if order.bonus_points_earned > 0:
            LoyaltyAdjustmentService.schedule_grant(order)

        logger.info(
            f"Order {order.order_number} placed: subtotal={subtotal_cents} total={total_cents} "
            f"points_earned={order.bonus_points_earned}"
        )
        return order

    @staticmethod
    @transaction.atomic
    def mark_delivered(order_number: str) -> Order:
        """Delivery starts the return window"""
        try:
            order = Order.objects.select_for_update().get(order_number=order_number)
        except Order.DoesNotExist:
            raise NotFoundError("Order not found", order=order_number)

        if order.status not in (Order.STATUS_PROCESSING, Order.STATUS_SHIPPED):
            raise ValidationError(
                f"Order cannot be delivered in status {order.status}",
                order=order_number,
            )

        order.status = Order.STATUS_DELIVERED
        order.delivered_at = timezone.now()
        return versioned_update(order, 'status', 'delivered_at')
