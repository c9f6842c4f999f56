from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
from django.utils.translation import gettext_lazy as _


class CustomUserManager(BaseUserManager):
    """
    Менеджер для CustomUser.

    Идентификатор — email (master, admin) или login_code (teacher, student,
    вход по коду школы).
    """
    use_in_migrations = True

    def create_user(self, email=None, password=None, **extra_fields):
        if not email and not extra_fields.get('login_code'):
            raise ValueError(_('Нужен email или код входа'))
        if email:
            # Вход по email регистронезависимый: храним адрес целиком в нижнем регистре
            email = self.normalize_email(email).strip().lower()
        user = self.model(email=email or None, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        # Суперпользователь платформы: владелец (master)
        extra_fields.setdefault('role', CustomUser.ROLE_MASTER)

        if extra_fields.get('is_staff') is not True:
            raise ValueError(_('Superuser должен иметь is_staff=True'))
        if extra_fields.get('is_superuser') is not True:
            raise ValueError(_('Superuser должен иметь is_superuser=True'))

        return self.create_user(email, password, **extra_fields)


class CustomUser(AbstractUser):
    """
    Пользователь платформы.
    Вход по email (username отключен) или по коду школы + личному коду.
    """

    ROLE_MASTER = 'master'
    ROLE_ADMIN = 'admin'
    ROLE_TEACHER = 'teacher'
    ROLE_STUDENT = 'student'

    ROLE_CHOICES = (
        (ROLE_MASTER, 'Владелец платформы'),
        (ROLE_ADMIN, 'Администратор школы'),
        (ROLE_TEACHER, 'Учитель'),
        (ROLE_STUDENT, 'Ученик'),
    )

    username = None
    email = models.EmailField(_('email адрес'), unique=True, null=True, blank=True)

    role = models.CharField(
        _('роль'),
        max_length=20,
        choices=ROLE_CHOICES,
        default=ROLE_STUDENT,
    )

    school = models.ForeignKey(
        'tenants.School',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='users',
        verbose_name=_('школа'),
        help_text=_('Пусто только у владельца платформы'),
    )

    login_code = models.CharField(
        _('код входа'),
        max_length=20,
        unique=True,
        null=True,
        blank=True,
        help_text=_('STU-XXXXXX / TCH-XXXXXX для входа по коду'),
    )

    created_at = models.DateTimeField(_('создан'), auto_now_add=True)
    updated_at = models.DateTimeField(_('обновлён'), auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    objects = CustomUserManager()

    class Meta:
        verbose_name = _('пользователь')
        verbose_name_plural = _('пользователи')

    def __str__(self):
        return self.email or self.login_code or f'user#{self.pk}'

    @property
    def is_master(self):
        return self.role == self.ROLE_MASTER
