"""
Django System Checks для изоляции данных школ.

Эти проверки запускаются при:
  - python manage.py check
  - python manage.py runserver (каждый рестарт)
  - Деплое

Выдают WARNINGS если ViewSets не используют SchoolScopedViewSetMixin.
"""
import importlib

from django.apps import apps
from django.core.checks import Tags, Warning, register
from django.core.exceptions import FieldDoesNotExist

# ViewSets, которые намеренно работают поверх всех школ
EXEMPT_VIEWSETS = {
    'SchoolViewSet',   # Управление самими школами (master)
}

VIEW_MODULES = [
    'roster.views',
    'exam.views',
    'finance.views',
    'notices.views',
]

# Модели, у которых school может быть пустым
EXEMPT_MODELS = {
    'CustomUser',      # master не принадлежит школе
}


def find_unscoped_viewsets(view_modules=VIEW_MODULES):
    from rest_framework.viewsets import GenericViewSet

    from tenants.mixins import SchoolScopedViewSetMixin

    found = []
    for module_path in view_modules:
        try:
            module = importlib.import_module(module_path)
        except ImportError:
            continue

        for attr_name in dir(module):
            attr = getattr(module, attr_name)
            if (
                isinstance(attr, type)
                and issubclass(attr, GenericViewSet)
                and attr.__module__ == module.__name__
                and attr.__name__ not in EXEMPT_VIEWSETS
                and not issubclass(attr, SchoolScopedViewSetMixin)
            ):
                found.append((module_path, attr.__name__))
    return found


@register(Tags.security)
def check_viewsets_have_school_mixin(app_configs, **kwargs):
    """
    Проверяет что все ViewSets используют SchoolScopedViewSetMixin.
    """
    errors = []
    for module_path, name in find_unscoped_viewsets():
        errors.append(
            Warning(
                f'{name} ({module_path}) does not use SchoolScopedViewSetMixin.',
                hint=(
                    f'Add SchoolScopedViewSetMixin to {name} to scope its queryset '
                    f'to the requesting school. If this ViewSet intentionally '
                    f'operates across schools, add it to EXEMPT_VIEWSETS in '
                    f'tenants/checks.py.'
                ),
                id='tenants.W001',
            )
        )
    return errors


@register(Tags.models)
def check_school_fk_not_nullable(app_configs, **kwargs):
    """
    Предупреждает о моделях где school FK nullable — потенциальная утечка данных.
    """
    errors = []
    for model in apps.get_models():
        if model.__name__ in EXEMPT_MODELS:
            continue
        try:
            field = model._meta.get_field('school')
        except FieldDoesNotExist:
            continue
        if field.is_relation and field.null:
            errors.append(
                Warning(
                    f'{model.__name__}.school is nullable (null=True).',
                    hint='Records without school can leak across schools.',
                    id='tenants.W002',
                )
            )
    return errors
