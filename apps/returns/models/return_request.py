from django.conf import settings
from django.db import models


class ReturnRequest(models.Model):
    """One return filed against an order. Monetary fields are integer cents."""

    STATUS_PENDING = 'pending'
    STATUS_PROCESSING = 'processing'
    STATUS_COMPLETED = 'completed'
    STATUS_REJECTED = 'rejected'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_PROCESSING, 'Processing'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_REJECTED, 'Rejected'),
    ]

    OPEN_STATUSES = (STATUS_PENDING, STATUS_PROCESSING)
    TERMINAL_STATUSES = (STATUS_COMPLETED, STATUS_REJECTED)

    REFUND_METHOD_CHOICES = [
        ('paypal', 'PayPal'),
        ('klarna', 'Klarna'),
        ('bank', 'Bank transfer'),
        ('other', 'Other'),
    ]

    order = models.ForeignKey('orders.Order', on_delete=models.PROTECT, related_name='return_requests')
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='return_requests'
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    notes = models.TextField(blank=True, default='')

    # Refund record, bookkeeping only
    refund_method = models.CharField(max_length=20, choices=REFUND_METHOD_CHOICES, blank=True, default='')
    refund_reference = models.CharField(max_length=200, blank=True, default='')
    refund_amount_cents = models.IntegerField(null=True, blank=True)

    # Written on completion
    items_refund_cents = models.IntegerField(null=True, blank=True)
    shipping_refund_cents = models.IntegerField(null=True, blank=True)
    is_full_return = models.BooleanField(default=False)
    completed_at = models.DateTimeField(null=True, blank=True)
    restocked_at = models.DateTimeField(null=True, blank=True)

    # Points
    frozen_points = models.IntegerField(default=0, help_text="Withheld from the pending grant on creation")
    points_deducted = models.IntegerField(default=0)
    points_settled_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'return_requests'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['order', 'status'], name='return_requests_order_idx'),
        ]

    def __str__(self):
        return f"Return {self.pk} of {self.order_id}"
