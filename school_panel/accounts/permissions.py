"""
Role-Based Access Control (RBAC) permission classes.

Роль берётся из claim текущего запроса (JWT), а не из глобального
состояния:

    from accounts.permissions import IsSchoolAdmin, PathAccessPermission

    class MyView(APIView):
        permission_classes = [IsAuthenticated, PathAccessPermission, IsSchoolAdmin]

Доступные классы:
- IsMaster: только владелец платформы
- IsSchoolAdmin: только администратор школы
- IsTeacher: только учителя
- IsStudent: только ученики
- PathAccessPermission: таблица API_ACCESS_TABLE по пути запроса
- HasActiveSubscription: при истёкшей подписке школы — только чтение
"""
import logging

from rest_framework.permissions import SAFE_METHODS, BasePermission

from .access_policy import API_ACCESS_TABLE, resolve_access, resolve_rule
from .claims import get_request_claim

logger = logging.getLogger(__name__)


class HasRole(BasePermission):
    """Базовый класс: роль из claim должна входить в allowed_roles."""
    allowed_roles = ()
    message = 'Недостаточно прав'

    def has_permission(self, request, view):
        claim = get_request_claim(request)
        if claim is None:
            return False
        return claim.role in self.allowed_roles


class IsMaster(HasRole):
    """Доступ только для владельца платформы (role='master')"""
    allowed_roles = ('master',)
    message = 'Доступно только для владельца платформы'


class IsSchoolAdmin(HasRole):
    """Доступ только для администраторов школы (role='admin')"""
    allowed_roles = ('admin',)
    message = 'Доступно только для администраторов школы'


class IsTeacher(HasRole):
    """Доступ только для учителей (role='teacher')"""
    allowed_roles = ('teacher',)
    message = 'Доступно только для учителей'


class IsStudent(HasRole):
    """Доступ только для учеников (role='student')"""
    allowed_roles = ('student',)
    message = 'Доступно только для учеников'


class IsSchoolAdminOrReadOnly(BasePermission):
    """Админ школы — запись; остальные — только чтение."""
    message = 'Изменять может только администратор школы'

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        claim = get_request_claim(request)
        return claim is not None and claim.role == 'admin'


class PathAccessPermission(BasePermission):
    """
    Решение по таблице API_ACCESS_TABLE: самый длинный совпавший префикс,
    по умолчанию — запрет. Пересчитывается на каждом запросе.
    """
    message = 'Раздел недоступен для вашей роли'
    access_table = API_ACCESS_TABLE

    def has_permission(self, request, view):
        claim = get_request_claim(request)
        if claim is None:
            return False
        allowed = resolve_access(claim.role, request.path, self.access_table)
        if not allowed:
            rule = resolve_rule(request.path, self.access_table)
            logger.warning(
                'Access denied: role=%s path=%s rule=%s',
                claim.role, request.path, rule.prefix if rule else None,
            )
        return allowed


class HasActiveSubscription(BasePermission):
    """
    Истёкшая подписка школы переводит её пользователей в режим чтения.
    Владелец платформы не зависит от подписок.
    """
    message = 'Подписка школы истекла. Доступ только для чтения.'

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        claim = get_request_claim(request)
        if claim is None:
            return False
        if claim.is_master:
            return True
        return claim.subscription_active
