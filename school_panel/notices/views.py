"""
API объявлений.

  /api/notices/                      — админ: CRUD; учителя/ученики: чтение
  /api/notices/{id}/toggle-publish/  — админ: публикация
  /api/notices/generate/             — админ: AI-черновик по заголовку
  /api/notices/{id}/draft/           — админ: AI-черновик для сохранённого объявления
"""
import logging

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import (
    HasActiveSubscription,
    IsSchoolAdmin,
    IsSchoolAdminOrReadOnly,
    PathAccessPermission,
)
from roster.models import Student, Teacher
from tenants.mixins import SchoolScopedViewSetMixin

from .ai_service import generate_notice_content
from .gateway import submit_draft
from .models import Notice
from .serializers import NoticeGenerateSerializer, NoticeReadSerializer, NoticeSerializer

logger = logging.getLogger(__name__)


class NoticeViewSet(SchoolScopedViewSetMixin, viewsets.ModelViewSet):
    queryset = Notice.objects.all()
    permission_classes = [
        IsAuthenticated, PathAccessPermission, IsSchoolAdminOrReadOnly, HasActiveSubscription,
    ]

    def get_permissions(self):
        if self.action in ('generate', 'draft', 'toggle_publish'):
            return [IsAuthenticated(), PathAccessPermission(), IsSchoolAdmin(), HasActiveSubscription()]
        return super().get_permissions()

    def get_serializer_class(self):
        if self.action == 'generate':
            return NoticeGenerateSerializer
        claim = self.get_claim()
        if claim is not None and claim.role == 'admin':
            return NoticeSerializer
        return NoticeReadSerializer

    def _member_class(self):
        """Класс ученика / учителя для объявлений publish_to=class."""
        user = self.request.user
        student = Student.objects.filter(user=user).only('class_name').first()
        if student is not None:
            return student.class_name
        teacher = Teacher.objects.filter(user=user).only('assigned_class').first()
        if teacher is not None:
            return teacher.assigned_class
        return None

    def get_queryset(self):
        qs = super().get_queryset().order_by('-created_at')
        claim = self.get_claim()
        if claim is None:
            return qs.none()
        if claim.role == 'admin':
            return qs
        return qs.filter(published=True).filter(
            Notice.audience_filter(claim.role, self._member_class())
        )

    def perform_create(self, serializer):
        notice = serializer.save(school=self.get_school(), created_by=self.request.user)
        logger.info('Notice created: school=%s notice=%s audience=%s', notice.school.code, notice.pk, notice.publish_to)

    @action(detail=True, methods=['post'], url_path='toggle-publish')
    def toggle_publish(self, request, pk=None):
        notice = self.get_object()
        notice.published = not notice.published
        notice.save(update_fields=['published', 'updated_at'])
        logger.info('Notice %s published=%s by user=%s', notice.pk, notice.published, request.user.pk)
        return Response(NoticeSerializer(notice).data)

    @action(detail=False, methods=['post'])
    def generate(self, request):
        """
        AI-черновик текста.

        Body: {"title": "...", "target_audience": "all|teacher|student|class", "class_details": "..."}
        """
        serializer = NoticeGenerateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = generate_notice_content(**serializer.validated_data)
        if result['error']:
            return Response(result, status=status.HTTP_502_BAD_GATEWAY)
        return Response(result)

    @action(detail=True, methods=['post'])
    def draft(self, request, pk=None):
        """Сгенерировать текст для сохранённого объявления (sync или Celery)."""
        notice = self.get_object()
        queued = submit_draft(notice)
        notice.refresh_from_db()
        data = NoticeSerializer(notice).data
        if queued:
            return Response(data, status=status.HTTP_202_ACCEPTED)
        if notice.draft_status == Notice.DraftStatus.FAILED:
            return Response(data, status=status.HTTP_502_BAD_GATEWAY)
        return Response(data)
