import logging

from rest_framework import mixins, viewsets
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated

from accounts.permissions import (
    HasActiveSubscription,
    IsSchoolAdmin,
    IsTeacher,
    PathAccessPermission,
)
from tenants.mixins import SchoolScopedViewSetMixin

from .models import Student, Teacher
from .serializers import StudentBriefSerializer, StudentSerializer, TeacherSerializer

logger = logging.getLogger(__name__)


class RosterViewSet(
    SchoolScopedViewSetMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    """Базовый ViewSet ростера: админ школы, запись только при активной подписке."""
    permission_classes = [IsAuthenticated, PathAccessPermission, IsSchoolAdmin, HasActiveSubscription]


class StudentViewSet(RosterViewSet):
    """
    /api/students/ — ученики школы.

    Фильтры: ?class_name=Class 5, ?session=2025
    """
    queryset = Student.objects.all()
    serializer_class = StudentSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        class_name = self.request.query_params.get('class_name')
        if class_name:
            qs = qs.filter(class_name=class_name)
        session = self.request.query_params.get('session')
        if session:
            qs = qs.filter(session=session)
        return qs


class TeacherViewSet(RosterViewSet):
    """/api/teachers/ — учителя школы."""
    queryset = Teacher.objects.all()
    serializer_class = TeacherSerializer


class MyStudentsViewSet(SchoolScopedViewSetMixin, mixins.ListModelMixin, viewsets.GenericViewSet):
    """/api/my-students/ — ученики класса, закреплённого за учителем."""
    queryset = Student.objects.all()
    serializer_class = StudentBriefSerializer
    permission_classes = [IsAuthenticated, PathAccessPermission, IsTeacher]

    def get_queryset(self):
        qs = super().get_queryset()
        teacher = Teacher.objects.filter(user=self.request.user, school=self.get_school()).first()
        if teacher is None:
            raise PermissionDenied('Профиль учителя не найден')
        return qs.filter(class_name=teacher.assigned_class)
