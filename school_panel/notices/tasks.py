"""
Celery задачи для объявлений.

generate_notice_draft — AI-черновик текста сохранённого объявления.
"""
import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(
    name='notices.tasks.generate_notice_draft',
    soft_time_limit=90,
    time_limit=120,
)
def generate_notice_draft(notice_id: int):
    """Сгенерировать текст объявления и записать его в Notice."""
    from notices.gateway import apply_draft
    from notices.models import Notice

    try:
        notice = Notice.objects.get(id=notice_id)
    except Notice.DoesNotExist:
        logger.warning('Notice %s not found for AI draft', notice_id)
        return None

    return apply_draft(notice)
