"""
Политика доступа по ролям.

Таблица правил: (префикс пути → разрешённые роли). Для пути выбирается
правило с самым длинным совпавшим префиксом; остальные правила не
учитываются (более конкретное правило перекрывает общее, а не
объединяется с ним). Нет совпадений — доступ запрещён.
"""
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence


@dataclass(frozen=True)
class AccessRule:
    prefix: str
    roles: frozenset

    def __init__(self, prefix: str, roles: Iterable[str]):
        object.__setattr__(self, 'prefix', prefix)
        object.__setattr__(self, 'roles', frozenset(roles))


ALL_ROLES = ('master', 'admin', 'teacher', 'student')

# Страницы дашборда (frontend)
DASHBOARD_ACCESS_TABLE = (
    AccessRule('/dashboard/schools', ['master']),
    AccessRule('/dashboard/subscriptions', ['master']),
    AccessRule('/dashboard/students', ['admin']),
    AccessRule('/dashboard/teachers', ['admin']),
    AccessRule('/dashboard/results', ['admin']),
    AccessRule('/dashboard/payments', ['admin']),
    AccessRule('/dashboard/notices', ['admin', 'teacher', 'student']),
    AccessRule('/dashboard/result-entry', ['teacher']),
    AccessRule('/dashboard/my-students', ['teacher']),
    AccessRule('/dashboard/my-result', ['student']),
    AccessRule('/dashboard/my-payments', ['student']),
    AccessRule('/dashboard', ALL_ROLES),
)


def _api_rules(dashboard_table):
    # /dashboard/students → /api/students, /dashboard → /api/dashboard
    rules = []
    for rule in dashboard_table:
        if rule.prefix == '/dashboard':
            rules.append(AccessRule('/api/dashboard', rule.roles))
        else:
            rules.append(AccessRule('/api' + rule.prefix[len('/dashboard'):], rule.roles))
    return rules


# API endpoints: те же правила, что и у страниц, плюс служебные
API_ACCESS_TABLE = tuple(_api_rules(DASHBOARD_ACCESS_TABLE)) + (
    AccessRule('/api/notices/generate', ['admin']),
    AccessRule('/api/me', ALL_ROLES),
    AccessRule('/api/access', ALL_ROLES),
)

# Пункты бокового меню (href, label)
NAVIGATION_ITEMS = (
    ('/dashboard', 'Dashboard'),
    ('/dashboard/schools', 'Schools'),
    ('/dashboard/subscriptions', 'Subscriptions'),
    ('/dashboard/students', 'Students'),
    ('/dashboard/teachers', 'Teachers'),
    ('/dashboard/results', 'Results'),
    ('/dashboard/payments', 'Payments'),
    ('/dashboard/notices', 'Notices'),
    ('/dashboard/my-students', 'My Students'),
    ('/dashboard/result-entry', 'Result Entry'),
    ('/dashboard/my-result', 'My Result'),
    ('/dashboard/my-payments', 'My Payments'),
)


def resolve_rule(resource_path: str, access_table: Sequence[AccessRule]) -> Optional[AccessRule]:
    """Самое конкретное правило для пути (или None)."""
    matches = [rule for rule in access_table if resource_path.startswith(rule.prefix)]
    if not matches:
        return None
    return max(matches, key=lambda rule: len(rule.prefix))


def resolve_access(role: Optional[str], resource_path: str,
                   access_table: Sequence[AccessRule] = DASHBOARD_ACCESS_TABLE) -> bool:
    """Разрешён ли роли доступ к пути."""
    if not role:
        return False
    rule = resolve_rule(resource_path, access_table)
    if rule is None:
        return False
    return role in rule.roles


def navigation_for(role: Optional[str]) -> list:
    """Пункты меню, доступные роли."""
    return [
        {'href': href, 'label': label}
        for href, label in NAVIGATION_ITEMS
        if resolve_access(role, href, DASHBOARD_ACCESS_TABLE)
    ]
