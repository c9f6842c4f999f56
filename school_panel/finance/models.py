"""
Finance models: оплаты учеников.

Payment — заявка ученика об оплате (сумма, способ, номер транзакции).
Жизненный цикл: pending → approved | rejected. Рассматривает только
администратор школы, повторное рассмотрение невозможно (finance.services).
"""
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

PAYMENT_METHODS = ['Stripe', 'PayPal', 'Bank Transfer', 'Cash']


class Payment(models.Model):

    class Status(models.TextChoices):
        PENDING = 'pending', _('Ожидает проверки')
        APPROVED = 'approved', _('Подтверждена')
        REJECTED = 'rejected', _('Отклонена')

    school = models.ForeignKey(
        'tenants.School',
        on_delete=models.CASCADE,
        related_name='payments',
        verbose_name=_('школа'),
    )
    student = models.ForeignKey(
        'roster.Student',
        on_delete=models.CASCADE,
        related_name='payments',
        verbose_name=_('ученик'),
    )
    student_name = models.CharField(_('имя ученика'), max_length=150)

    amount = models.DecimalField(
        _('сумма'),
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    method = models.CharField(
        _('способ оплаты'),
        max_length=20,
        choices=[(method, method) for method in PAYMENT_METHODS],
    )
    trx = models.CharField(
        _('номер транзакции'),
        max_length=100,
        help_text=_('ID транзакции платёжной системы, номер квитанции'),
    )
    status = models.CharField(
        _('статус'),
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )

    approved_at = models.DateTimeField(_('подтверждена'), null=True, blank=True)
    reviewed_at = models.DateTimeField(_('рассмотрена'), null=True, blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reviewed_payments',
        verbose_name=_('кто рассмотрел'),
    )

    created_at = models.DateTimeField(_('создана'), auto_now_add=True)
    updated_at = models.DateTimeField(_('обновлена'), auto_now=True)

    class Meta:
        verbose_name = _('оплата')
        verbose_name_plural = _('оплаты')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['school', 'status'], name='finance_pay_school_status_idx'),
            models.Index(fields=['student', '-created_at'], name='finance_pay_student_idx'),
        ]

    def __str__(self):
        return f'{self.student_name}: {self.amount} ({self.method}, {self.status})'

    @property
    def is_pending(self):
        return self.status == self.Status.PENDING
