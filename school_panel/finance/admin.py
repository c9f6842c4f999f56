"""
Django admin configuration for payments.
"""
from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Админка для оплат учеников."""

    list_display = ['id', 'student_name', 'school', 'amount', 'method', 'trx', 'status', 'created_at', 'approved_at']
    list_filter = ['status', 'method', 'school']
    search_fields = ['student_name', 'trx']
    readonly_fields = ['approved_at', 'reviewed_at', 'reviewed_by', 'created_at', 'updated_at']
