"""
Test settings for shop_server project.
"""

from decimal import Decimal

from .base import *

# Use SQLite for testing
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# Disable migrations for faster testing
class DisableMigrations:
    def __contains__(self, item):
        return True

    def __getitem__(self, item):
        return None

MIGRATION_MODULES = DisableMigrations()

# Use faster password hasher for testing
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

# Email backend for testing
EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

BONUS_POINTS_PER_EURO = Decimal('3.5')
BONUS_POINTS_CREDIT_DELAY_DAYS = 14
RETURN_WINDOW_DAYS = 30
CREDIT_NOTE_RENDERER = ''

# Let pytest's caplog see application records
LOGGING['loggers']['apps']['propagate'] = True
