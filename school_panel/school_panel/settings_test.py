"""
Test settings — SQLite in-memory, eager Celery, быстрый хешер паролей.
"""
from .settings import *

DEBUG = False
SECRET_KEY = 'test-secret-key-school-panel'
ALLOWED_HOSTS = ['testserver', 'localhost']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

NOTICE_AI_ASYNC = False
AI_PROVIDER = 'deepseek'
DEEPSEEK_API_KEY = 'test-deepseek-key'

REST_FRAMEWORK['DEFAULT_THROTTLE_RATES'] = {'login': '1000/min'}

LOGGING['root']['level'] = 'CRITICAL'
for _logger in LOGGING['loggers'].values():
    _logger['level'] = 'CRITICAL'
