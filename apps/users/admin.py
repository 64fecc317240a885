from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """User admin with the bonus points balance shown read-only"""
    list_display = ['username', 'email', 'bonus_points', 'is_staff', 'created_at']
    list_filter = ['is_staff', 'is_superuser', 'is_active', 'created_at']
    search_fields = ['username', 'email', 'phone']
    ordering = ['-created_at']

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Bonus Points', {
            'fields': ('bonus_points', 'version')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
    # Balance changes must go through LoyaltyAdjustmentService
    readonly_fields = ['bonus_points', 'version', 'created_at', 'updated_at']
