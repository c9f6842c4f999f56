"""
Tenant models — ядро мультитенантной архитектуры.

Подход: shared-database, shared-schema с FK school на каждой модели верхнего уровня.
Tenant = школа.
"""

import uuid
from django.db import models
from django.utils import timezone

from .codes import SCHOOL_PREFIX, generate_unique_code
from .subscriptions import days_until, is_subscription_active


class School(models.Model):
    """
    Школа (tenant).
    Все данные ростера, результатов, платежей и объявлений привязаны к ней через FK.
    """

    class Status(models.TextChoices):
        ACTIVE = 'active', 'Активна'
        DISABLED = 'disabled', 'Отключена'

    # === Идентификация ===
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, help_text='Название школы')
    address = models.CharField(max_length=300, blank=True, default='', help_text='Адрес')
    code = models.CharField(
        max_length=20, unique=True, db_index=True, editable=False,
        help_text='Код школы для входа по коду (SCH-XXXXXX)',
    )
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.ACTIVE,
        help_text='Статус',
    )

    # === Подписка ===
    max_students = models.PositiveIntegerField(default=100, verbose_name='Макс. учеников')
    max_teachers = models.PositiveIntegerField(default=10, verbose_name='Макс. учителей')
    subscription_expires_at = models.DateTimeField(verbose_name='Подписка действует до')

    # === Даты ===
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        verbose_name = 'Школа'
        verbose_name_plural = 'Школы'

    def __str__(self):
        return f'{self.name} ({self.code})'

    def save(self, *args, **kwargs):
        if not self.code:
            self.code = generate_unique_code(
                SCHOOL_PREFIX,
                lambda code: School.objects.filter(code=code).exists(),
            )
        super().save(*args, **kwargs)

    @property
    def is_active(self):
        return self.status == self.Status.ACTIVE

    def subscription_active(self, now=None) -> bool:
        return is_subscription_active(self.subscription_expires_at, now or timezone.now())

    def days_until_expiry(self, now=None) -> int:
        return days_until(self.subscription_expires_at, now)

    def seat_limit_for(self, resource: str) -> int:
        """resource: 'students' | 'teachers'."""
        return getattr(self, f'max_{resource}')
