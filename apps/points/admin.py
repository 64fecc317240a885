from django.contrib import admin
from .models import LoyaltyPointTimer, PointsTransaction


@admin.register(LoyaltyPointTimer)
class LoyaltyPointTimerAdmin(admin.ModelAdmin):
    list_display = ['order', 'user', 'points_awarded', 'frozen_points', 'state', 'scheduled_at', 'credited_at']
    list_filter = ['state', 'scheduled_at']
    search_fields = ['order__order_number', 'user__username', 'user__email']
    readonly_fields = [
        'order', 'user', 'points_awarded', 'frozen_points', 'frozen_by', 'state',
        'scheduled_at', 'credited_at', 'version', 'created_at', 'updated_at'
    ]

    def has_add_permission(self, request):
        return False  # Timers are created when an order is placed


@admin.register(PointsTransaction)
class PointsTransactionAdmin(admin.ModelAdmin):
    list_display = ['user', 'transaction_type', 'amount', 'balance_after', 'description', 'created_at']
    list_filter = ['transaction_type', 'created_at']
    search_fields = ['user__username', 'description', 'reference_id']
    readonly_fields = ['created_at']

    def has_add_permission(self, request):
        return False  # Transactions are created programmatically

    def has_change_permission(self, request, obj=None):
        return False  # Transactions should not be modified
