from django.conf import settings
from django.db import models


class LoyaltyPointTimer(models.Model):
    """Delayed points grant of one order"""

    STATE_PENDING = 'pending'
    STATE_CREDITED = 'credited'
    STATE_VOID = 'void'

    STATE_CHOICES = [
        (STATE_PENDING, 'Pending'),
        (STATE_CREDITED, 'Credited'),
        (STATE_VOID, 'Void'),
    ]

    order = models.OneToOneField('orders.Order', on_delete=models.CASCADE, related_name='point_timer')
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='point_timers'
    )
    points_awarded = models.IntegerField(default=0, help_text="Points paid out when the timer fires")
    frozen_points = models.IntegerField(default=0, help_text="Withheld while a return is open")
    frozen_by = models.JSONField(default=list, blank=True, help_text="Ids of the returns holding frozen points")
    state = models.CharField(max_length=10, choices=STATE_CHOICES, default=STATE_PENDING)
    scheduled_at = models.DateTimeField(null=True, blank=True)
    credited_at = models.DateTimeField(null=True, blank=True)
    version = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'loyalty_point_timers'
        indexes = [
            models.Index(fields=['state', 'scheduled_at'], name='point_timers_due_idx'),
        ]

    def __str__(self):
        return f"Timer {self.order_id}: {self.points_awarded} points ({self.state})"

    @property
    def is_pending(self):
        return self.state == self.STATE_PENDING
