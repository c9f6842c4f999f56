"""
Шкала оценивания и расчёт GPA.

Используется для:
1. Расчёта GPA результата при его создании (Result.save)
2. Предпросмотра оценок при вводе результатов учителем
3. Отображения оценок по предметам (оценки не хранятся)

Чистые функции, без I/O.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Mapping

# =============================================================================
# Шкала: (минимальный балл, grade point, буква)
# Проверяется сверху вниз, первое совпадение выигрывает
# =============================================================================

GRADE_LADDER = (
    (80, Decimal('5.0'), 'A+'),
    (70, Decimal('4.0'), 'A'),
    (60, Decimal('3.5'), 'A-'),
    (50, Decimal('3.0'), 'B'),
    (40, Decimal('2.0'), 'C'),
    (33, Decimal('1.0'), 'D'),
)
FAIL_POINT = Decimal('0.0')
FAIL_LETTER = 'F'

PASS_MARK = GRADE_LADDER[-1][0]
MIN_MARK = 0
MAX_MARK = 100

GPA_QUANT = Decimal('0.01')


def _grade_of(mark):
    for threshold, point, letter in GRADE_LADDER:
        if mark >= threshold:
            return point, letter
    # Всё ниже 33 (включая отрицательные): провал
    return FAIL_POINT, FAIL_LETTER


def grade_point_of(mark) -> float:
    """Grade point по баллу: 5.0, 4.0, 3.5, 3.0, 2.0, 1.0 или 0.0."""
    return float(_grade_of(mark)[0])


def grade_letter_of(mark) -> str:
    """Буквенная оценка по баллу: A+, A, A-, B, C, D или F."""
    return _grade_of(mark)[1]


def _mark_of(subject):
    if isinstance(subject, Mapping):
        return subject['mark']
    return subject.mark


def gpa_decimal(subjects: Iterable) -> Decimal:
    """GPA в Decimal с двумя знаками (ROUND_HALF_UP)."""
    points = [_grade_of(_mark_of(subject))[0] for subject in subjects]
    if not points:
        return Decimal('0.00')
    # Один несданный предмет обнуляет весь результат
    if any(point == FAIL_POINT for point in points):
        return Decimal('0.00')
    mean = sum(points, Decimal('0')) / Decimal(len(points))
    return mean.quantize(GPA_QUANT, rounding=ROUND_HALF_UP)


def compute_gpa(subjects: Iterable) -> float:
    """
    GPA по списку предметов [{name, mark}, ...].

    Пустой список → 0.0. Любой предмет с баллом ниже 33 → 0.0.
    Иначе среднее grade point, округлённое до сотых (половина — от нуля).
    """
    return float(gpa_decimal(subjects))


def grade_breakdown(subjects: Iterable) -> List[dict]:
    """Оценки по каждому предмету: [{name, mark, letter, point}, ...]."""
    rows = []
    for subject in subjects:
        mark = _mark_of(subject)
        point, letter = _grade_of(mark)
        name = subject['name'] if isinstance(subject, Mapping) else subject.name
        rows.append({'name': name, 'mark': mark, 'letter': letter, 'point': float(point)})
    return rows
