"""
Notice Draft Gateway — куда отправить генерацию черновика.

- NOTICE_AI_ASYNC=1 → Celery task (notices.tasks.generate_notice_draft)
- NOTICE_AI_ASYNC=0 → синхронный вызов AI в текущем запросе
"""
import logging

from django.conf import settings

from .ai_service import generate_notice_content
from .models import Notice

logger = logging.getLogger(__name__)


def apply_draft(notice: Notice) -> dict:
    """Вызвать AI и сохранить результат в объявление."""
    result = generate_notice_content(
        title=notice.title,
        target_audience=notice.publish_to,
        class_details=notice.class_details,
    )
    if result['error']:
        notice.draft_status = Notice.DraftStatus.FAILED
        notice.draft_error = result['error']
        notice.save(update_fields=['draft_status', 'draft_error', 'updated_at'])
        logger.warning('Notice draft failed: notice=%s error=%s', notice.pk, result['error'])
    else:
        notice.content = result['content']
        notice.draft_status = Notice.DraftStatus.COMPLETED
        notice.draft_error = ''
        notice.save(update_fields=['content', 'draft_status', 'draft_error', 'updated_at'])
        logger.info('Notice drafted: notice=%s chars=%s', notice.pk, len(result['content']))
    return result


def submit_draft(notice: Notice) -> bool:
    """
    Запросить AI-черновик для объявления.

    Returns:
        True если задача поставлена в очередь, False если выполнено синхронно
    """
    if settings.NOTICE_AI_ASYNC:
        from .tasks import generate_notice_draft

        notice.draft_status = Notice.DraftStatus.PENDING
        notice.draft_error = ''
        notice.save(update_fields=['draft_status', 'draft_error', 'updated_at'])
        generate_notice_draft.delay(notice.pk)
        logger.info('Notice draft queued: notice=%s', notice.pk)
        return True

    apply_draft(notice)
    return False
