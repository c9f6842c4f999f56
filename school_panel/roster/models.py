"""
Ростер школы: ученики и учителя.

Каждая запись связана с пользователем (вход по коду школы + login_code).
Количество записей ограничено подпиской школы (max_students / max_teachers),
создание идёт только через roster.services.
"""
from django.conf import settings
from django.db import models

from .choices import CLASSES, SESSIONS, SHIFTS, as_choices


class Student(models.Model):
    school = models.ForeignKey(
        'tenants.School', on_delete=models.CASCADE,
        related_name='students', verbose_name='Школа',
    )
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE,
        related_name='student_profile', verbose_name='Пользователь',
    )
    name = models.CharField(max_length=150, verbose_name='Имя')
    shift = models.CharField(max_length=20, choices=as_choices(SHIFTS), verbose_name='Смена')
    session = models.CharField(max_length=4, choices=as_choices(SESSIONS), verbose_name='Учебный год')
    class_name = models.CharField(max_length=20, choices=as_choices(CLASSES), verbose_name='Класс')
    roll = models.PositiveIntegerField(verbose_name='Номер в списке')
    login_code = models.CharField(max_length=20, unique=True, editable=False, verbose_name='Код входа')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['class_name', 'roll']
        verbose_name = 'Ученик'
        verbose_name_plural = 'Ученики'
        indexes = [
            models.Index(fields=['school', 'class_name'], name='roster_stu_school_class_idx'),
        ]

    def __str__(self):
        return f'{self.name} ({self.class_name}, #{self.roll})'


class Teacher(models.Model):
    school = models.ForeignKey(
        'tenants.School', on_delete=models.CASCADE,
        related_name='teachers', verbose_name='Школа',
    )
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE,
        related_name='teacher_profile', verbose_name='Пользователь',
    )
    name = models.CharField(max_length=150, verbose_name='Имя')
    assigned_class = models.CharField(max_length=20, choices=as_choices(CLASSES), verbose_name='Класс')
    assigned_subjects = models.JSONField(default=list, verbose_name='Предметы')
    login_code = models.CharField(max_length=20, unique=True, editable=False, verbose_name='Код входа')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        verbose_name = 'Учитель'
        verbose_name_plural = 'Учителя'

    def __str__(self):
        return f'{self.name} ({self.assigned_class})'
