from django.conf import settings
from django.db import models
from django.db.models import Q


class Notice(models.Model):
    """
    Объявление школы.

    publish_to определяет адресатов: все, учителя, ученики или один класс
    (class_details). Ученики и учителя видят только опубликованные
    объявления, адресованные им.
    """

    class Audience(models.TextChoices):
        ALL = 'all', 'Все'
        TEACHER = 'teacher', 'Учителя'
        STUDENT = 'student', 'Ученики'
        CLASS = 'class', 'Класс'

    class DraftStatus(models.TextChoices):
        NONE = '', 'Нет'
        PENDING = 'pending', 'В очереди'
        COMPLETED = 'completed', 'Готово'
        FAILED = 'failed', 'Ошибка'

    school = models.ForeignKey(
        'tenants.School',
        on_delete=models.CASCADE,
        related_name='notices',
        verbose_name='Школа',
    )
    title = models.CharField(max_length=200, verbose_name='Заголовок')
    content = models.TextField(blank=True, default='', verbose_name='Текст')
    publish_to = models.CharField(
        max_length=20,
        choices=Audience.choices,
        default=Audience.ALL,
        verbose_name='Адресаты',
    )
    class_details = models.CharField(
        max_length=100,
        blank=True,
        default='',
        help_text='Класс, если publish_to=class (например, "Class 5")',
    )
    published = models.BooleanField(default=False, verbose_name='Опубликовано')

    # AI-черновик текста
    draft_status = models.CharField(
        max_length=20,
        choices=DraftStatus.choices,
        blank=True,
        default=DraftStatus.NONE,
    )
    draft_error = models.TextField(blank=True, default='')

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_notices',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Объявление'
        verbose_name_plural = 'Объявления'

    def __str__(self):
        return self.title

    @classmethod
    def audience_filter(cls, role, class_name=None):
        """Q-фильтр объявлений, адресованных роли (и классу пользователя)."""
        condition = Q(publish_to=cls.Audience.ALL) | Q(publish_to=role)
        if class_name:
            condition |= Q(publish_to=cls.Audience.CLASS, class_details=class_name)
        return condition
