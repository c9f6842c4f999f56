# Generated manually
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('tenants', '0001_initial'),
        ('roster', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('student_name', models.CharField(max_length=150, verbose_name='имя ученика')),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))], verbose_name='сумма')),
                ('method', models.CharField(choices=[('Stripe', 'Stripe'), ('PayPal', 'PayPal'), ('Bank Transfer', 'Bank Transfer'), ('Cash', 'Cash')], max_length=20, verbose_name='способ оплаты')),
                ('trx', models.CharField(help_text='ID транзакции платёжной системы, номер квитанции', max_length=100, verbose_name='номер транзакции')),
                ('status', models.CharField(choices=[('pending', 'Ожидает проверки'), ('approved', 'Подтверждена'), ('rejected', 'Отклонена')], db_index=True, default='pending', max_length=20, verbose_name='статус')),
                ('approved_at', models.DateTimeField(blank=True, null=True, verbose_name='подтверждена')),
                ('reviewed_at', models.DateTimeField(blank=True, null=True, verbose_name='рассмотрена')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='создана')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='обновлена')),
                ('reviewed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reviewed_payments', to=settings.AUTH_USER_MODEL, verbose_name='кто рассмотрел')),
                ('school', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='tenants.school', verbose_name='школа')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='roster.student', verbose_name='ученик')),
            ],
            options={
                'verbose_name': 'оплата',
                'verbose_name_plural': 'оплаты',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['school', 'status'], name='finance_pay_school_status_idx'),
                    models.Index(fields=['student', '-created_at'], name='finance_pay_student_idx'),
                ],
            },
        ),
    ]
