# Generated manually
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
            name='Result',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('student_name', models.CharField(help_text='Имя ученика на момент создания результата', max_length=150)),
                ('exam_name', models.CharField(max_length=200, verbose_name='Экзамен')),
                ('subjects', models.JSONField(default=list, help_text='Баллы по предметам: [{"name": "Math", "mark": 85}, ...]')),
                ('gpa', models.DecimalField(decimal_places=2, default=0, editable=False, help_text='GPA, вычисляется из subjects', max_digits=3)),
                ('published', models.BooleanField(default=False, help_text='Виден ли результат ученику')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_results', to=settings.AUTH_USER_MODEL)),
                ('school', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='results', to='tenants.school', verbose_name='Школа')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='results', to='roster.student', verbose_name='Ученик')),
            ],
            options={
                'verbose_name': 'Результат',
                'verbose_name_plural': 'Результаты',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['school', '-created_at'], name='exam_result_school_idx'),
                    models.Index(fields=['student', 'published'], name='exam_result_student_idx'),
                ],
            },
        ),
    ]
