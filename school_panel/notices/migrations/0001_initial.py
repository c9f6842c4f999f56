# Generated manually
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('tenants', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Notice',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200, verbose_name='Заголовок')),
                ('content', models.TextField(blank=True, default='', verbose_name='Текст')),
                ('publish_to', models.CharField(choices=[('all', 'Все'), ('teacher', 'Учителя'), ('student', 'Ученики'), ('class', 'Класс')], default='all', max_length=20, verbose_name='Адресаты')),
                ('class_details', models.CharField(blank=True, default='', help_text='Класс, если publish_to=class (например, "Class 5")', max_length=100)),
                ('published', models.BooleanField(default=False, verbose_name='Опубликовано')),
                ('draft_status', models.CharField(blank=True, choices=[('', 'Нет'), ('pending', 'В очереди'), ('completed', 'Готово'), ('failed', 'Ошибка')], default='', max_length=20)),
                ('draft_error', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_notices', to=settings.AUTH_USER_MODEL)),
                ('school', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notices', to='tenants.school', verbose_name='Школа')),
            ],
            options={
                'verbose_name': 'Объявление',
                'verbose_name_plural': 'Объявления',
                'ordering': ['-created_at'],
            },
        ),
    ]
