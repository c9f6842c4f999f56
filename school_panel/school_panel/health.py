"""
Health check endpoints для мониторинга и оркестрации.
"""
import time

from django.conf import settings
from django.db import DatabaseError, connection
from django.http import JsonResponse


def _check_database():
    with connection.cursor() as cursor:
        cursor.execute('SELECT 1')
        cursor.fetchone()


def health_check(request):
    """
    Полная проверка: база данных и обязательные настройки.

    200 если всё работает, 500 если есть критические проблемы.
    """
    status = {
        'status': 'healthy',
        'timestamp': time.time(),
        'version': getattr(settings, 'VERSION', '1.0.0'),
        'checks': {},
    }

    try:
        _check_database()
        status['checks']['database'] = 'ok'
    except DatabaseError as e:
        status['status'] = 'unhealthy'
        status['checks']['database'] = f'error: {str(e)[:100]}'

    missing = [name for name in ('SECRET_KEY', 'AUTH_USER_MODEL', 'AI_PROVIDER') if not getattr(settings, name, None)]
    if missing:
        status['status'] = 'unhealthy'
        status['checks']['settings'] = f'missing: {", ".join(missing)}'
    else:
        status['checks']['settings'] = 'ok'

    # Воркер Celery нужен только для асинхронных AI-черновиков
    status['checks']['notice_ai'] = 'async' if getattr(settings, 'NOTICE_AI_ASYNC', False) else 'sync'

    http_status = 200 if status['status'] == 'healthy' else 500
    return JsonResponse(status, status=http_status)


def ready_check(request):
    """Readiness probe: приложение может обслуживать запросы."""
    try:
        _check_database()
        return JsonResponse({'ready': True})
    except DatabaseError:
        return JsonResponse({'ready': False}, status=503)


def live_check(request):
    """Liveness probe."""
    return JsonResponse({'alive': True, 'timestamp': time.time()})
