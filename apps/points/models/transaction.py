from django.conf import settings
from django.db import models


class PointsTransaction(models.Model):
    """Individual points transactions"""
    TYPE_REDEMPTION = 'redemption'
    TYPE_CREDIT = 'credit'
    TYPE_RETURN_DEDUCTION = 'return_deduction'
    TYPE_RETURN_RELEASE = 'return_release'

    TRANSACTION_TYPES = [
        (TYPE_REDEMPTION, 'Points Redeemed'),
        (TYPE_CREDIT, 'Order Points Credited'),
        (TYPE_RETURN_DEDUCTION, 'Deducted for Return'),
        (TYPE_RETURN_RELEASE, 'Released after Return'),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='points_transactions')
    transaction_type = models.CharField(max_length=20, choices=TRANSACTION_TYPES)
    amount = models.IntegerField()  # Positive for credits, negative for debits
    balance_after = models.IntegerField()  # User balance after this transaction
    description = models.CharField(max_length=200, blank=True)
    reference_id = models.CharField(max_length=100, blank=True, null=True)  # order:<number>, return:<id>
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'points_transactions'
        ordering = ['-created_at']
        verbose_name = 'Points Transaction'
        verbose_name_plural = 'Points Transactions'

    def __str__(self):
        return f"{self.user.username} - {self.amount} points ({self.get_transaction_type_display()})"
