"""
Test Settings

Django settings for running tests.
"""

import os

from .base import *  # noqa: F401,F403

DEBUG = False
TESTING = True

# Use in-memory SQLite for faster tests; set TEST_DB_ENGINE=postgres to run
# the concurrency tests against a real server.
if os.environ.get('TEST_DB_ENGINE') == 'postgres':
    DATABASES['default']['NAME'] = os.environ.get('DB_NAME', 'booking_service_test')
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': ':memory:',
        }
    }

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]


# Disable migrations for faster tests
class DisableMigrations:
    def __contains__(self, item):
        return True

    def __getitem__(self, item):
        return None


MIGRATION_MODULES = DisableMigrations()

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    },
}

JWT_SECRET_KEY = 'test-secret-key-for-testing-only'
JWT_SETTINGS = {
    'ALGORITHM': 'HS256',
    'VERIFYING_KEY': JWT_SECRET_KEY,
    'ISSUER': None,
}

# Logging - minimal output during tests
LOGGING = {
    'version': 1,
    'disable_existing_loggers': True,
    'handlers': {
        'null': {
            'class': 'logging.NullHandler',
        },
    },
    'root': {
        'handlers': ['null'],
        'level': 'CRITICAL',
    },
}

CORS_ALLOW_ALL_ORIGINS = True
