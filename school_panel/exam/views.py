"""
API результатов экзаменов.

  /api/result-entry/            — учитель: ввод результата (POST)
  /api/result-entry/preview/    — учитель: предпросмотр GPA (POST)
  /api/result-entry/students/   — учитель: ученики школы для выбора
  /api/results/                 — админ: все результаты школы
  /api/results/{id}/toggle-publish/
  /api/my-result/               — ученик: свои опубликованные результаты
"""
import logging

from rest_framework import mixins, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import (
    HasActiveSubscription,
    IsSchoolAdmin,
    IsStudent,
    IsTeacher,
    PathAccessPermission,
)
from roster.models import Student
from roster.serializers import StudentBriefSerializer
from tenants.mixins import SchoolScopedViewSetMixin

from .models import Result
from .serializers import ResultCreateSerializer, ResultPreviewSerializer, ResultSerializer

logger = logging.getLogger(__name__)


class ResultEntryViewSet(SchoolScopedViewSetMixin, mixins.CreateModelMixin, viewsets.GenericViewSet):
    """Ввод результатов учителем."""
    queryset = Result.objects.all()
    serializer_class = ResultCreateSerializer
    permission_classes = [IsAuthenticated, PathAccessPermission, IsTeacher, HasActiveSubscription]

    def get_serializer_class(self):
        if self.action == 'preview':
            return ResultPreviewSerializer
        if self.action == 'students':
            return StudentBriefSerializer
        return ResultCreateSerializer

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context['school'] = self.get_school()
        return context

    def perform_create(self, serializer):
        result = serializer.save(school=self.get_school(), created_by=self.request.user)
        logger.info(
            'Result created: school=%s student=%s exam=%s gpa=%s by user=%s',
            result.school.code, result.student_id, result.exam_name, result.gpa, self.request.user.pk,
        )

    @action(detail=False, methods=['post'])
    def preview(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response(serializer.to_representation(serializer.validated_data))

    @action(detail=False, methods=['get'])
    def students(self, request):
        students = Student.objects.filter(school=self.get_school()).order_by('name')
        return Response(StudentBriefSerializer(students, many=True).data)


class ResultViewSet(SchoolScopedViewSetMixin, mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Результаты школы для администратора, новые сверху.

    Фильтры: ?published=true|false, ?student=<id>
    """
    queryset = Result.objects.select_related('created_by')
    serializer_class = ResultSerializer
    permission_classes = [IsAuthenticated, PathAccessPermission, IsSchoolAdmin, HasActiveSubscription]

    def get_queryset(self):
        qs = super().get_queryset().order_by('-created_at')
        published = self.request.query_params.get('published')
        if published in ('true', 'false'):
            qs = qs.filter(published=(published == 'true'))
        student = self.request.query_params.get('student')
        if student:
            if not student.isdigit():
                raise ValidationError({'student': 'Ожидается числовой id ученика'})
            qs = qs.filter(student_id=student)
        return qs

    @action(detail=True, methods=['post'], url_path='toggle-publish')
    def toggle_publish(self, request, pk=None):
        result = self.get_object()
        result.published = not result.published
        result.save(update_fields=['published', 'updated_at'])
        logger.info('Result %s published=%s by user=%s', result.pk, result.published, request.user.pk)
        return Response(ResultSerializer(result).data)


class MyResultViewSet(SchoolScopedViewSetMixin, mixins.ListModelMixin, viewsets.GenericViewSet):
    """Опубликованные результаты текущего ученика, новые сверху."""
    queryset = Result.objects.all()
    serializer_class = ResultSerializer
    permission_classes = [IsAuthenticated, PathAccessPermission, IsStudent]

    def get_queryset(self):
        return (
            super().get_queryset()
            .filter(student__user=self.request.user, published=True)
            .order_by('-created_at')
        )
