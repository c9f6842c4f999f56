"""
Генерация кодов школ и персональных кодов входа.

Формат: <PREFIX>-XXXXXX, где X — [A-Z0-9].
    SCH-… школа, STU-… ученик, TCH-… учитель
"""
from django.utils.crypto import get_random_string

CODE_ALPHABET = 'ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789'
CODE_LENGTH = 6

SCHOOL_PREFIX = 'SCH'
STUDENT_PREFIX = 'STU'
TEACHER_PREFIX = 'TCH'


def generate_code(prefix: str) -> str:
    return f'{prefix}-{get_random_string(CODE_LENGTH, allowed_chars=CODE_ALPHABET)}'


def generate_unique_code(prefix: str, exists, attempts: int = 10) -> str:
    """
    Сгенерировать код, которого ещё нет в БД.

    exists: callable(code) -> bool
    """
    for _ in range(attempts):
        code = generate_code(prefix)
        if not exists(code):
            return code
    raise RuntimeError(f'Не удалось сгенерировать уникальный код {prefix} за {attempts} попыток')
