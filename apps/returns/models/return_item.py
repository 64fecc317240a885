from django.db import models


class ReturnItem(models.Model):
    """A line of a return, tied to the original order line by ``line_no``"""

    return_request = models.ForeignKey('ReturnRequest', on_delete=models.CASCADE, related_name='items')
    order_item = models.ForeignKey('orders.OrderItem', on_delete=models.PROTECT, related_name='return_items')
    line_no = models.PositiveIntegerField()

    # Snapshot of the order line
    product_slug = models.CharField(max_length=200)
    name = models.CharField(max_length=200)
    unit_price_cents = models.IntegerField()
    selected_options = models.JSONField(default=dict, blank=True)

    requested_quantity = models.PositiveIntegerField(help_text="Quantity the customer asked to return")
    quantity = models.PositiveIntegerField(help_text="Quantity to take back, never above requested")
    accepted = models.BooleanField(default=False)

    # Written on completion
    effective_unit_cents = models.IntegerField(null=True, blank=True)
    refund_cents = models.IntegerField(null=True, blank=True)

    class Meta:
        db_table = 'return_items'
        ordering = ['line_no']
        unique_together = ['return_request', 'line_no']

    def __str__(self):
        return f"{self.name} x{self.quantity}"
