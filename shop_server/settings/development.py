"""
Development settings for shop_server project.
"""

from .base import *

DEBUG = True

# SQLite unless a MySQL database is configured
if not config('MYSQL_HOST', default=''):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }

CORS_ALLOW_ALL_ORIGINS = True

EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

LOGGING['loggers']['apps']['level'] = 'DEBUG'
