"""
Sentry Integration для Django.

Включается только если задан SENTRY_DSN:
    SENTRY_DSN=https://xxx@xxx.ingest.sentry.io/xxx

init_sentry() вызывается в конце settings.py.
"""
import logging
import os

import sentry_sdk
from sentry_sdk.integrations.celery import CeleryIntegration
from sentry_sdk.integrations.django import DjangoIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

logger = logging.getLogger(__name__)

SENSITIVE_KEYS = ('password', 'token', 'access', 'refresh', 'login_code', 'api_key')


def init_sentry():
    """Инициализирует Sentry SDK. Возвращает True если DSN настроен."""
    sentry_dsn = os.environ.get('SENTRY_DSN', '')

    if not sentry_dsn:
        logger.info("Sentry: DSN not configured, skipping initialization")
        return False

    environment = os.environ.get('DJANGO_ENV', 'production')
    if os.environ.get('DEBUG', 'False').lower() in ('true', '1', 'yes'):
        environment = 'development'

    sentry_sdk.init(
        dsn=sentry_dsn,
        integrations=[
            DjangoIntegration(transaction_style='url'),
            CeleryIntegration(),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        environment=environment,
        release=os.environ.get('APP_VERSION', 'unknown'),
        traces_sample_rate=float(os.environ.get('SENTRY_TRACES_SAMPLE_RATE', '0.1')),
        send_default_pii=False,
        before_send=before_send_callback,
    )

    logger.info("Sentry: initialized for %s environment", environment)
    return True


def before_send_callback(event, hint):
    """Фильтрует шумные ошибки и маскирует чувствительные поля запроса."""
    if 'exc_info' in hint:
        exc_type = hint['exc_info'][0]
        if exc_type.__name__ in ('Http404', 'NotAuthenticated', 'PermissionDenied'):
            return None

    request_data = event.get('request')
    if isinstance(request_data, dict):
        data = request_data.get('data')
        if isinstance(data, dict):
            for key in SENSITIVE_KEYS:
                if key in data:
                    data[key] = '[FILTERED]'

        headers = request_data.get('headers')
        if isinstance(headers, dict) and 'Authorization' in headers:
            headers['Authorization'] = '[FILTERED]'

    return event


def capture_exception(exception, extra=None):
    """
    Отправляет exception в Sentry вручную.

    Без DSN SDK не инициализирован, вызов ничего не делает.
    """
    with sentry_sdk.new_scope() as scope:
        for key, value in (extra or {}).items():
            scope.set_extra(key, value)
        sentry_sdk.capture_exception(exception)
