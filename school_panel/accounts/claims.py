"""
Role claims — роль и школа пользователя внутри сессии.

Claims кладутся в JWT при входе и считаются неизменными до повторного
входа (refresh копирует их как есть). Во views claim извлекается из
request явно и передаётся в политику доступа аргументом.
"""
from dataclasses import dataclass
from typing import Optional

from django.utils import timezone

ROLES = ('master', 'admin', 'teacher', 'student')
DEFAULT_ROLE = 'student'


@dataclass(frozen=True)
class RoleClaim:
    role: str
    school_id: Optional[str]
    subscription_active: bool

    @property
    def is_master(self) -> bool:
        return self.role == 'master'

    def as_dict(self) -> dict:
        return {
            'role': self.role,
            'school_id': self.school_id,
            'subscription_active': self.subscription_active,
        }


def claim_for_user(user, now=None) -> RoleClaim:
    """Посчитать claim по данным из БД (при выдаче токена)."""
    school = getattr(user, 'school', None)
    if school is None:
        # Владелец платформы не зависит от подписки какой-либо школы
        active = user.role == 'master'
        return RoleClaim(role=user.role or DEFAULT_ROLE, school_id=None, subscription_active=active)
    return RoleClaim(
        role=user.role or DEFAULT_ROLE,
        school_id=str(school.pk),
        subscription_active=school.subscription_active(now or timezone.now()),
    )


def claim_from_token(token) -> RoleClaim:
    """Прочитать claim из валидированного JWT."""
    role = token.get('role') or DEFAULT_ROLE
    if role not in ROLES:
        role = DEFAULT_ROLE
    return RoleClaim(
        role=role,
        school_id=token.get('school_id') or None,
        subscription_active=bool(token.get('subscription_active', False)),
    )


def get_request_claim(request) -> Optional[RoleClaim]:
    """
    Claim текущего запроса.

    JWT → берём из токена. Сессия / force_authenticate в тестах (нет токена)
    → считаем по пользователю.
    """
    user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated:
        return None
    token = getattr(request, 'auth', None)
    if token is not None and hasattr(token, 'get'):
        return claim_from_token(token)
    return claim_for_user(user)
