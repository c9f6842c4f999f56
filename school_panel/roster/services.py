"""
RosterService — зачисление учеников и учителей.

Запись ростера и связанный пользователь создаются внутри
create_within_seat_limit, то есть под блокировкой строки School.
"""
import logging

from django.contrib.auth import get_user_model

from tenants.codes import STUDENT_PREFIX, TEACHER_PREFIX, generate_unique_code
from tenants.limits import create_within_seat_limit

from .models import Student, Teacher

logger = logging.getLogger(__name__)
User = get_user_model()


def _login_code_taken(code):
    return User.objects.filter(login_code=code).exists()


class RosterService:

    @staticmethod
    def _create_member_user(school, role, prefix, name):
        code = generate_unique_code(prefix, _login_code_taken)
        user = User.objects.create_user(
            login_code=code,
            role=role,
            school=school,
            first_name=name[:150],
        )
        return user, code

    @staticmethod
    def add_student(school, *, name, class_name, roll, shift, session):
        """Зачислить ученика. SeatLimitError если лимит школы исчерпан."""

        def _create(locked_school):
            user, code = RosterService._create_member_user(
                locked_school, User.ROLE_STUDENT, STUDENT_PREFIX, name,
            )
            return Student.objects.create(
                school=locked_school,
                user=user,
                name=name,
                class_name=class_name,
                roll=roll,
                shift=shift,
                session=session,
                login_code=code,
            )

        student = create_within_seat_limit(school, 'students', _create)
        logger.info('Student enrolled: school=%s student=%s code=%s', school.code, student.pk, student.login_code)
        return student

    @staticmethod
    def add_teacher(school, *, name, assigned_class, assigned_subjects):
        """Добавить учителя. SeatLimitError если лимит школы исчерпан."""

        def _create(locked_school):
            user, code = RosterService._create_member_user(
                locked_school, User.ROLE_TEACHER, TEACHER_PREFIX, name,
            )
            return Teacher.objects.create(
                school=locked_school,
                user=user,
                name=name,
                assigned_class=assigned_class,
                assigned_subjects=list(assigned_subjects),
                login_code=code,
            )

        teacher = create_within_seat_limit(school, 'teachers', _create)
        logger.info('Teacher added: school=%s teacher=%s code=%s', school.code, teacher.pk, teacher.login_code)
        return teacher
