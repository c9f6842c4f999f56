"""
Development settings - локальная разработка
"""
from .settings import *

DEBUG = True
ALLOWED_HOSTS = ['*']

# Browsable API для отладки
REST_FRAMEWORK['DEFAULT_RENDERER_CLASSES'] = [
    'rest_framework.renderers.JSONRenderer',
    'rest_framework.renderers.BrowsableAPIRenderer',
]
REST_FRAMEWORK['DEFAULT_AUTHENTICATION_CLASSES'] = [
    'rest_framework_simplejwt.authentication.JWTAuthentication',
    'rest_framework.authentication.SessionAuthentication',
]

# AI-черновики синхронно, без воркера
NOTICE_AI_ASYNC = False
CELERY_TASK_ALWAYS_EAGER = True

LOGGING['loggers']['django']['level'] = 'INFO'
