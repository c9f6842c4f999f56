# Generated manually
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

from roster.choices import CLASSES, SESSIONS, SHIFTS, as_choices


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('tenants', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Student',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=150, verbose_name='Имя')),
                ('shift', models.CharField(choices=as_choices(SHIFTS), max_length=20, verbose_name='Смена')),
                ('session', models.CharField(choices=as_choices(SESSIONS), max_length=4, verbose_name='Учебный год')),
                ('class_name', models.CharField(choices=as_choices(CLASSES), max_length=20, verbose_name='Класс')),
                ('roll', models.PositiveIntegerField(verbose_name='Номер в списке')),
                ('login_code', models.CharField(editable=False, max_length=20, unique=True, verbose_name='Код входа')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('school', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='students', to='tenants.school', verbose_name='Школа')),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='student_profile', to=settings.AUTH_USER_MODEL, verbose_name='Пользователь')),
            ],
            options={
                'verbose_name': 'Ученик',
                'verbose_name_plural': 'Ученики',
                'ordering': ['class_name', 'roll'],
                'indexes': [models.Index(fields=['school', 'class_name'], name='roster_stu_school_class_idx')],
            },
        ),
        migrations.CreateModel(
            name='Teacher',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=150, verbose_name='Имя')),
                ('assigned_class', models.CharField(choices=as_choices(CLASSES), max_length=20, verbose_name='Класс')),
                ('assigned_subjects', models.JSONField(default=list, verbose_name='Предметы')),
                ('login_code', models.CharField(editable=False, max_length=20, unique=True, verbose_name='Код входа')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('school', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='teachers', to='tenants.school', verbose_name='Школа')),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='teacher_profile', to=settings.AUTH_USER_MODEL, verbose_name='Пользователь')),
            ],
            options={
                'verbose_name': 'Учитель',
                'verbose_name_plural': 'Учителя',
                'ordering': ['name'],
            },
        ),
    ]
