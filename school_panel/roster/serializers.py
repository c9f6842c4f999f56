from rest_framework import serializers

from .choices import CLASSES, SESSIONS, SHIFTS, SUBJECTS
from .models import Student, Teacher
from .services import RosterService


class StudentSerializer(serializers.ModelSerializer):
    shift = serializers.ChoiceField(choices=SHIFTS)
    session = serializers.ChoiceField(choices=SESSIONS)
    class_name = serializers.ChoiceField(choices=CLASSES)
    roll = serializers.IntegerField(min_value=1)

    class Meta:
        model = Student
        fields = ['id', 'name', 'class_name', 'roll', 'shift', 'session', 'login_code', 'created_at']
        read_only_fields = ['id', 'login_code', 'created_at']
        extra_kwargs = {
            'name': {'min_length': 3},
        }

    def create(self, validated_data):
        school = validated_data.pop('school')
        return RosterService.add_student(school, **validated_data)


class TeacherSerializer(serializers.ModelSerializer):
    assigned_class = serializers.ChoiceField(choices=CLASSES)
    assigned_subjects = serializers.ListField(
        child=serializers.ChoiceField(choices=SUBJECTS),
        allow_empty=False,
    )

    class Meta:
        model = Teacher
        fields = ['id', 'name', 'assigned_class', 'assigned_subjects', 'login_code', 'created_at']
        read_only_fields = ['id', 'login_code', 'created_at']
        extra_kwargs = {
            'name': {'min_length': 3},
        }

    def validate_assigned_subjects(self, value):
        # Порядок сохраняем, дубли убираем
        return list(dict.fromkeys(value))

    def create(self, validated_data):
        school = validated_data.pop('school')
        return RosterService.add_teacher(school, **validated_data)


class StudentBriefSerializer(serializers.ModelSerializer):
    """Ученик в списке учителя — без кода входа."""

    class Meta:
        model = Student
        fields = ['id', 'name', 'class_name', 'roll', 'shift', 'session']
        read_only_fields = fields
