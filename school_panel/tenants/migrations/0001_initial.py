# Generated manually
import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='School',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(help_text='Название школы', max_length=200)),
                ('address', models.CharField(blank=True, default='', help_text='Адрес', max_length=300)),
                ('code', models.CharField(db_index=True, editable=False, help_text='Код школы для входа по коду (SCH-XXXXXX)', max_length=20, unique=True)),
                ('status', models.CharField(choices=[('active', 'Активна'), ('disabled', 'Отключена')], default='active', help_text='Статус', max_length=20)),
                ('max_students', models.PositiveIntegerField(default=100, verbose_name='Макс. учеников')),
                ('max_teachers', models.PositiveIntegerField(default=10, verbose_name='Макс. учителей')),
                ('subscription_expires_at', models.DateTimeField(verbose_name='Подписка действует до')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Школа',
                'verbose_name_plural': 'Школы',
                'ordering': ['name'],
            },
        ),
    ]
