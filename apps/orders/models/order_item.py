from django.db import models


class OrderItem(models.Model):
    """Order line. ``line_no`` is assigned at placement and never changes."""

    order = models.ForeignKey('Order', on_delete=models.CASCADE, related_name='items')
    line_no = models.PositiveIntegerField(help_text="Stable ordinal of the line within its order")
    product_slug = models.CharField(max_length=200, help_text="Product reference")
    name = models.CharField(max_length=200)
    unit_price_cents = models.IntegerField()
    quantity = models.PositiveIntegerField()
    selected_options = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'order_items'
        ordering = ['line_no']
        unique_together = [('order', 'line_no')]
        indexes = [
            models.Index(fields=['product_slug'], name='order_items_product_idx'),
        ]

    def __str__(self):
        return f"OrderItem {self.order_id}#{self.line_no} - {self.product_slug}"

    @property
    def line_total_cents(self):
        return self.unit_price_cents * self.quantity
