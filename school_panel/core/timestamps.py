"""
Нормализация временных меток на границе системы.

В данные попадают метки в разных формах:
  - {'seconds': ..., 'nanoseconds': ...} — экспорт из документной БД
  - число (epoch seconds)
  - ISO-8601 строка
  - datetime (naive или aware) / date

Всё приводится один раз к aware datetime в UTC. Дальше по коду ходит
только datetime.
"""
from datetime import date, datetime, time as dt_time, timezone as dt_timezone
from collections.abc import Mapping

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime


class TimestampError(ValueError):
    """Значение нельзя интерпретировать как временную метку."""
    pass


def _from_mapping(value: Mapping) -> datetime:
    seconds = value.get('seconds', value.get('_seconds'))
    nanoseconds = value.get('nanoseconds', value.get('_nanoseconds', 0)) or 0
    if seconds is None:
        raise TimestampError(f'В метке нет поля seconds: {dict(value)!r}')
    try:
        ts = int(seconds) + int(nanoseconds) / 1_000_000_000
    except (TypeError, ValueError) as exc:
        raise TimestampError(f'Некорректная метка: {dict(value)!r}') from exc
    return datetime.fromtimestamp(ts, tz=dt_timezone.utc)


def _from_string(value: str) -> datetime:
    text = value.strip()
    parsed = parse_datetime(text)
    if parsed is None:
        parsed_date = parse_date(text)
        if parsed_date is None:
            raise TimestampError(f'Не удалось разобрать дату: {value!r}')
        parsed = datetime.combine(parsed_date, dt_time.min)
    return parsed


def normalize_timestamp(value) -> datetime:
    """Привести любую поддерживаемую метку к aware datetime (UTC)."""
    if value is None:
        raise TimestampError('Пустая временная метка')

    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        result = datetime.combine(value, dt_time.min)
    elif isinstance(value, Mapping):
        result = _from_mapping(value)
    elif isinstance(value, bool):
        raise TimestampError(f'Некорректная метка: {value!r}')
    elif isinstance(value, (int, float)):
        result = datetime.fromtimestamp(value, tz=dt_timezone.utc)
    elif isinstance(value, str):
        result = _from_string(value)
    else:
        raise TimestampError(f'Неподдерживаемый тип метки: {type(value).__name__}')

    if timezone.is_naive(result):
        result = timezone.make_aware(result, dt_timezone.utc)
    return result.astimezone(dt_timezone.utc)
