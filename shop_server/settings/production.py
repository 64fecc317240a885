"""
Production settings for shop_server project.
"""

from .base import *

DEBUG = False

SECURE_HSTS_SECONDS = 31536000
SECURE_HSTS_INCLUDE_SUBDOMAINS = True

LOG_DIR = Path(config('LOG_DIR', default=str(BASE_DIR / 'logs')))

LOGGING['handlers'].update({
    'file': {
        'level': 'INFO',
        'class': 'logging.FileHandler',
        'filename': LOG_DIR / 'django.log',
        'formatter': 'verbose',
    },
    'error_file': {
        'level': 'ERROR',
        'class': 'logging.FileHandler',
        'filename': LOG_DIR / 'errors.log',
        'formatter': 'verbose',
    },
})
LOGGING['root']['handlers'] = ['console', 'file']
LOGGING['loggers']['django']['handlers'] = ['console', 'file']
LOGGING['loggers']['apps']['handlers'] = ['console', 'file', 'error_file']
