"""Справочники школы: классы, учебные годы, смены, предметы."""

CLASSES = [
    'Play',
    'Nursery',
    'KG',
] + [f'Class {n}' for n in range(1, 13)]

SESSIONS = [str(year) for year in range(2024, 2051)]

SHIFTS = ['Morning', 'Day']

SUBJECTS = [
    'Bangla', 'English', 'Math', 'Science', 'History',
    'Geography', 'Art', 'Music', 'Physical Education',
]


def as_choices(values):
    return [(value, value) for value in values]
