"""
Сериализаторы результатов экзаменов.

Валидация баллов (0..100, непустые названия, хотя бы один предмет) —
здесь, а не в exam.grading.
"""
from rest_framework import serializers

from roster.models import Student

from .grading import MAX_MARK, MIN_MARK, compute_gpa, grade_breakdown
from .models import Result


class SubjectMarkSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, trim_whitespace=True)
    mark = serializers.FloatField(min_value=MIN_MARK, max_value=MAX_MARK)


class SubjectListMixin(serializers.Serializer):
    subjects = serializers.ListField(child=SubjectMarkSerializer(), allow_empty=False)

    def validate_subjects(self, value):
        names = [subject['name'].lower() for subject in value]
        if len(names) != len(set(names)):
            raise serializers.ValidationError('Предмет указан несколько раз')
        return value


class ResultPreviewSerializer(SubjectListMixin):
    """Предпросмотр: GPA и оценки без сохранения."""

    def to_representation(self, instance):
        subjects = instance['subjects']
        gpa = compute_gpa(subjects)
        return {
            'gpa': gpa,
            'passed': gpa > 0,
            'subjects': grade_breakdown(subjects),
        }


class ResultCreateSerializer(SubjectListMixin, serializers.ModelSerializer):
    """Создание результата учителем. gpa считается на сервере, published=False."""
    student = serializers.PrimaryKeyRelatedField(queryset=Student.objects.all())
    exam_name = serializers.CharField(min_length=3, max_length=200)
    gpa = serializers.FloatField(read_only=True)

    class Meta:
        model = Result
        fields = ['id', 'student', 'student_name', 'exam_name', 'subjects', 'gpa', 'published', 'created_at']
        read_only_fields = ['id', 'student_name', 'gpa', 'published', 'created_at']

    def validate_student(self, student):
        school = self.context.get('school')
        if school is None or student.school_id != school.pk:
            raise serializers.ValidationError('Ученик не найден в вашей школе')
        return student

    def create(self, validated_data):
        validated_data['student_name'] = validated_data['student'].name
        validated_data['published'] = False
        return super().create(validated_data)


class ResultSerializer(serializers.ModelSerializer):
    gpa = serializers.FloatField(read_only=True)
    grades = serializers.SerializerMethodField()
    passed = serializers.BooleanField(read_only=True)
    created_by_name = serializers.SerializerMethodField()

    class Meta:
        model = Result
        fields = [
            'id', 'student', 'student_name', 'exam_name',
            'subjects', 'grades', 'gpa', 'passed', 'published',
            'created_by', 'created_by_name', 'created_at',
        ]
        read_only_fields = fields

    def get_grades(self, obj):
        return grade_breakdown(obj.subjects)

    def get_created_by_name(self, obj):
        if obj.created_by:
            return obj.created_by.get_full_name() or obj.created_by.email or obj.created_by.login_code
        return ''
