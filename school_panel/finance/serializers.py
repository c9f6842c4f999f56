"""
DRF serializers for payments API.
"""
from decimal import Decimal

from rest_framework import serializers

from .models import PAYMENT_METHODS, Payment


class PaymentSerializer(serializers.ModelSerializer):
    """Сериализатор оплаты (только чтение)."""

    status_display = serializers.CharField(source='get_status_display', read_only=True)
    reviewed_by_email = serializers.EmailField(source='reviewed_by.email', read_only=True, default=None)

    class Meta:
        model = Payment
        fields = [
            'id',
            'student',
            'student_name',
            'amount',
            'method',
            'trx',
            'status',
            'status_display',
            'created_at',
            'approved_at',
            'reviewed_at',
            'reviewed_by_email',
        ]
        read_only_fields = fields


class PaymentRequestSerializer(serializers.Serializer):
    """Заявка ученика об оплате."""

    amount = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0.01'),
        help_text='Сумма (положительная)',
    )
    method = serializers.ChoiceField(choices=PAYMENT_METHODS)
    trx = serializers.CharField(
        min_length=6,
        max_length=100,
        help_text='Номер транзакции',
    )
