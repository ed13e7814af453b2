from .settings import *

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

# Run Celery tasks inline, no broker
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

CARRIER_OFFER_URL = 'https://freight.test/offers/{token}/'
DEFAULT_FROM_EMAIL = 'dispatch@freight.test'

LOGGING['loggers']['freight']['level'] = 'WARNING'
LOGGING['loggers']['services']['level'] = 'WARNING'
