from django.db import models
from django.conf import settings


class Order(models.Model):
    """Placed order. Monetary fields are integer cents."""

    STATUS_PENDING = 'pending'
    STATUS_PROCESSING = 'processing'
    STATUS_SHIPPED = 'shipped'
    STATUS_DELIVERED = 'delivered'
    STATUS_CANCELLED = 'cancelled'
    STATUS_RETURN_REQUESTED = 'return_requested'
    STATUS_RETURN_COMPLETED = 'return_completed'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_PROCESSING, 'Processing'),
        (STATUS_SHIPPED, 'Shipped'),
        (STATUS_DELIVERED, 'Delivered'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_RETURN_REQUESTED, 'Return requested'),
        (STATUS_RETURN_COMPLETED, 'Return completed'),
    ]

    # Statuses from which a (further) return may be filed
    RETURNABLE_STATUSES = (STATUS_DELIVERED, STATUS_RETURN_REQUESTED, STATUS_RETURN_COMPLETED)

    order_number = models.CharField(max_length=50, unique=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders',
        help_text="Null for guest orders"
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)

    subtotal_cents = models.IntegerField(help_text="Sum of unit price x quantity over all lines")
    # Null means the order has no shipping line at all
    shipping_cost_cents = models.IntegerField(null=True, blank=True)
    discount_cents = models.IntegerField(default=0, help_text="Order-level discount")
    discount_code = models.CharField(max_length=50, blank=True, default='')
    total_cents = models.IntegerField(help_text="Amount charged")

    # Loyalty points
    bonus_points_redeemed = models.IntegerField(default=0)
    bonus_points_earned = models.IntegerField(default=0, help_text="Only ever lowered, by returns")
    bonus_points_credited = models.BooleanField(default=False)
    bonus_points_credited_at = models.DateTimeField(null=True, blank=True)
    bonus_points_scheduled_at = models.DateTimeField(null=True, blank=True)
    bonus_points_deducted = models.IntegerField(default=0, help_text="Taken back from the live balance by returns")
    bonus_points_deducted_at = models.DateTimeField(null=True, blank=True)

    delivered_at = models.DateTimeField(null=True, blank=True)
    version = models.PositiveIntegerField(default=0, help_text="Optimistic concurrency token")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='orders_status_idx'),
        ]

    def __str__(self):
        return f"Order {self.order_number}"

    @property
    def points_discount_cents(self):
        from apps.points.services.points_calculator import PointsCalculator
        return PointsCalculator.points_discount_cents(self.bonus_points_redeemed)

    @property
    def total_quantity(self):
        return sum(item.quantity for item in self.items.all())
