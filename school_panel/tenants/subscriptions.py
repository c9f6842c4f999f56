"""
Статус подписки школы.

Активность — чистая функция от текущего времени. На модели School она
не хранится, а пересчитывается при каждом обращении.
"""
from datetime import datetime
from typing import Optional

from django.utils import timezone


def is_subscription_active(expiry: Optional[datetime], now: datetime) -> bool:
    """Подписка активна строго до момента expiry (now == expiry → уже нет)."""
    if expiry is None:
        return False
    return now < expiry


def days_until(expiry: Optional[datetime], now: Optional[datetime] = None) -> int:
    """Сколько полных дней осталось до окончания (отрицательно — уже истекла)."""
    if expiry is None:
        return 0
    now = now or timezone.now()
    return (expiry - now).days
