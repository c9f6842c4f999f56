"""
Лимиты мест школы (seat limits).

check_seat_limit — чистая проверка.
create_within_seat_limit — проверка + вставка одной атомарной операцией:
строка School блокируется select_for_update(), поэтому два админа,
одновременно добавляющие учеников, не проскочат лимит.
"""
import logging

from django.db import transaction
from rest_framework.exceptions import PermissionDenied

logger = logging.getLogger(__name__)

# resource → related_name на School
SEAT_RESOURCES = ('students', 'teachers')


class SeatLimitError(PermissionDenied):
    """Превышен лимит мест по подписке школы."""
    pass


def check_seat_limit(current_count: int, max_allowed: int) -> bool:
    """
    Можно ли добавить ещё одну запись.

    При current_count >= max_allowed — нельзя. Уже существующие записи
    сверх уменьшенного лимита не трогаем.
    """
    return current_count < max_allowed


def create_within_seat_limit(school, resource: str, create):
    """
    Атомарно проверить лимит и создать запись.

    Args:
        school: School instance
        resource: 'students' | 'teachers'
        create: callable(locked_school) -> созданный объект

    Raises:
        SeatLimitError если лимит исчерпан
    """
    if resource not in SEAT_RESOURCES:
        raise ValueError(f'Неизвестный ресурс лимита: {resource}')

    from .models import School

    with transaction.atomic():
        locked = School.objects.select_for_update().get(pk=school.pk)
        current_count = getattr(locked, resource).count()
        max_allowed = locked.seat_limit_for(resource)

        if not check_seat_limit(current_count, max_allowed):
            logger.warning(
                'Seat limit reached: school=%s resource=%s %s/%s',
                locked.code, resource, current_count, max_allowed,
            )
            raise SeatLimitError(
                f'Достигнут лимит "{resource}": {current_count}/{max_allowed}. '
                f'Расширьте подписку, чтобы добавить ещё.'
            )

        obj = create(locked)
        logger.info(
            'Seat reserved: school=%s resource=%s %s/%s',
            locked.code, resource, current_count + 1, max_allowed,
        )
        return obj
