"""
API views для школ (tenants).

SchoolViewSet — управление школами владельцем платформы.
SubscriptionListView — сводка подписок всех школ.
DashboardStatsView — сводка для главной страницы дашборда (по роли).
"""
import logging

from django.utils import timezone
from rest_framework import generics, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsMaster, PathAccessPermission

from .mixins import SchoolContextMixin
from .models import School
from .serializers import (
    SchoolAdminCreateSerializer,
    SchoolAdminSerializer,
    SchoolSerializer,
    SubscriptionSerializer,
)

logger = logging.getLogger(__name__)


class SchoolViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    """
    /api/schools/ — школы платформы (только master).

    Удаление не поддерживается: школу отключают через status='disabled'.
    """
    queryset = School.objects.all()
    serializer_class = SchoolSerializer
    permission_classes = [IsAuthenticated, PathAccessPermission, IsMaster]

    def perform_create(self, serializer):
        school = serializer.save()
        logger.info('School created: %s (%s) by user=%s', school.name, school.code, self.request.user.pk)

    def perform_update(self, serializer):
        school = serializer.save()
        logger.info(
            'School updated: %s status=%s limits=%s/%s expires=%s',
            school.code, school.status, school.max_students, school.max_teachers,
            school.subscription_expires_at.isoformat(),
        )

    @action(detail=True, methods=['get', 'post'])
    def admins(self, request, pk=None):
        """GET — администраторы школы, POST — создать администратора."""
        school = self.get_object()
        if request.method == 'GET':
            admins = school.users.filter(role='admin').order_by('email')
            return Response(SchoolAdminSerializer(admins, many=True).data)

        serializer = SchoolAdminCreateSerializer(data=request.data, context={'school': school})
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info('School admin created: school=%s user=%s', school.code, user.pk)
        return Response(SchoolAdminSerializer(user).data, status=status.HTTP_201_CREATED)


class SubscriptionListView(generics.ListAPIView):
    """GET /api/subscriptions/ — подписки всех школ."""
    queryset = School.objects.all()
    serializer_class = SubscriptionSerializer
    permission_classes = [IsAuthenticated, PathAccessPermission, IsMaster]


class DashboardStatsView(SchoolContextMixin, APIView):
    """GET /api/dashboard/stats/ — сводка для главной страницы."""
    permission_classes = [IsAuthenticated, PathAccessPermission]

    def get(self, request):
        claim = self.get_claim()
        now = timezone.now()

        if claim.is_master:
            schools = School.objects.all()
            return Response({
                'role': claim.role,
                'schools': schools.count(),
                'active_schools': schools.filter(status=School.Status.ACTIVE).count(),
                'active_subscriptions': schools.filter(subscription_expires_at__gt=now).count(),
            })

        school = self.get_school()
        data = {
            'role': claim.role,
            'school': {'id': str(school.pk), 'name': school.name, 'code': school.code},
            'subscription_active': claim.subscription_active,
            'days_until_expiry': school.days_until_expiry(now),
        }

        if claim.role == 'admin':
            from finance.models import Payment

            data.update({
                'students': school.students.count(),
                'max_students': school.max_students,
                'teachers': school.teachers.count(),
                'max_teachers': school.max_teachers,
                'pending_payments': Payment.objects.filter(
                    school=school, status=Payment.Status.PENDING,
                ).count(),
            })
        return Response(data)
