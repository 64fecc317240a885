from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Shop customer carrying the live (spendable) bonus points balance"""
    phone = models.CharField(max_length=20, null=True, blank=True)

    # Only the points adjustment service writes this field, through versioned_update()
    bonus_points = models.IntegerField(default=0, help_text="Spendable bonus points")
    version = models.PositiveIntegerField(default=0, help_text="Optimistic concurrency token")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'

    def __str__(self):
        return self.username or self.email or f"User {self.id}"

    @property
    def display_name(self):
        full_name = f"{self.first_name} {self.last_name}".strip()
        return full_name or self.username or 'Kunde'
