"""
Payment business logic service.

Handles payment requests from students and their review by school admins.
Uses atomic transactions and row locks so a payment is reviewed exactly once.
"""
from decimal import Decimal
import logging

from django.db import transaction
from django.utils import timezone

from .models import Payment

logger = logging.getLogger(__name__)


class PaymentServiceError(Exception):
    """Base exception for payment service errors."""
    pass


class PaymentStateError(PaymentServiceError):
    """Raised when reviewing a payment that is no longer pending."""
    pass


class PaymentService:
    """
    Сервис оплат учеников.

    pending → approved (проставляется approved_at) | rejected.
    Других переходов нет.
    """

    @staticmethod
    def request_payment(student, amount: Decimal, method: str, trx: str) -> Payment:
        """
        Создать заявку об оплате от ученика.

        Args:
            student: roster.Student
            amount: Сумма (> 0, проверяется сериализатором)
            method: Способ оплаты (PAYMENT_METHODS)
            trx: Номер транзакции

        Returns:
            Payment в статусе pending
        """
        payment = Payment.objects.create(
            school=student.school,
            student=student,
            student_name=student.name,
            amount=amount,
            method=method,
            trx=trx,
            status=Payment.Status.PENDING,
        )
        logger.info(
            'Payment requested: school=%s student=%s amount=%s method=%s',
            student.school.code, student.pk, amount, method,
        )
        return payment

    @staticmethod
    @transaction.atomic
    def _review(payment: Payment, new_status: str, reviewed_by) -> Payment:
        # Блокируем строку, чтобы два админа не рассмотрели заявку одновременно
        payment = Payment.objects.select_for_update().get(pk=payment.pk)

        if payment.status != Payment.Status.PENDING:
            raise PaymentStateError(
                f'Оплата #{payment.pk} уже рассмотрена (статус: {payment.status})'
            )

        now = timezone.now()
        payment.status = new_status
        payment.reviewed_at = now
        payment.reviewed_by = reviewed_by
        update_fields = ['status', 'reviewed_at', 'reviewed_by', 'updated_at']
        if new_status == Payment.Status.APPROVED:
            payment.approved_at = now
            update_fields.append('approved_at')
        payment.save(update_fields=update_fields)

        logger.info(
            'Payment reviewed: payment=%s status=%s amount=%s by user=%s',
            payment.pk, new_status, payment.amount, getattr(reviewed_by, 'pk', None),
        )
        return payment

    @staticmethod
    def approve(payment: Payment, reviewed_by) -> Payment:
        """
        Подтвердить оплату.

        Raises:
            PaymentStateError: Оплата не в статусе pending
        """
        return PaymentService._review(payment, Payment.Status.APPROVED, reviewed_by)

    @staticmethod
    def reject(payment: Payment, reviewed_by) -> Payment:
        """
        Отклонить оплату.

        Raises:
            PaymentStateError: Оплата не в статусе pending
        """
        return PaymentService._review(payment, Payment.Status.REJECTED, reviewed_by)
