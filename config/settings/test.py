"""
Settings for the pytest suite
"""
from .base import *  # noqa: F401,F403
from .base import REST_FRAMEWORK

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    'DEFAULT_THROTTLE_CLASSES': [],
}

JWT_SECRET = 'test-jwt-secret-with-enough-length-for-hs256'
ADMIN_SECRET = 'test-admin-secret'
LOGIN_MAX_FAILED_ATTEMPTS = 5
LOGIN_LOCKOUT_MINUTES = 15
ORDER_STATUS_REQUIRES_ADMIN = True
