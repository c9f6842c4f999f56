"""
Результаты экзаменов.

Result — результат ученика за экзамен:
  - subjects: [{name, mark}, ...] — баллы по предметам (0..100)
  - gpa: производное значение, пересчитывается из subjects при каждом save()
  - published: создаётся False; переключает только админ школы

Буквенные оценки по предметам не хранятся — считаются при выводе (exam.grading).
"""
from django.conf import settings
from django.db import models

from .grading import gpa_decimal


class Result(models.Model):
    school = models.ForeignKey(
        'tenants.School',
        on_delete=models.CASCADE,
        related_name='results',
        verbose_name='Школа',
    )
    student = models.ForeignKey(
        'roster.Student',
        on_delete=models.CASCADE,
        related_name='results',
        verbose_name='Ученик',
    )
    student_name = models.CharField(
        max_length=150,
        help_text='Имя ученика на момент создания результата',
    )
    exam_name = models.CharField(max_length=200, verbose_name='Экзамен')
    subjects = models.JSONField(
        default=list,
        help_text='Баллы по предметам: [{"name": "Math", "mark": 85}, ...]',
    )
    gpa = models.DecimalField(
        max_digits=3,
        decimal_places=2,
        default=0,
        editable=False,
        help_text='GPA, вычисляется из subjects',
    )
    published = models.BooleanField(
        default=False,
        help_text='Виден ли результат ученику',
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_results',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Результат'
        verbose_name_plural = 'Результаты'
        indexes = [
            models.Index(fields=['school', '-created_at'], name='exam_result_school_idx'),
            models.Index(fields=['student', 'published'], name='exam_result_student_idx'),
        ]

    def __str__(self):
        return f'{self.student_name} — {self.exam_name} (GPA {self.gpa})'

    def save(self, *args, **kwargs):
        self.gpa = gpa_decimal(self.subjects)
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'subjects' in update_fields:
            kwargs['update_fields'] = set(update_fields) | {'gpa'}
        super().save(*args, **kwargs)

    @property
    def passed(self):
        return self.gpa > 0
