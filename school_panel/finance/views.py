"""
Payments API views.

Endpoints:
- /api/my-payments/ - заявки об оплате текущего ученика (GET, POST)
- /api/my-payments/{id}/receipt/ - PDF-квитанция подтверждённой оплаты
- /api/payments/ - все оплаты школы для админа (?status=pending)
- /api/payments/{id}/approve/ - подтвердить оплату
- /api/payments/{id}/reject/ - отклонить оплату
"""
import logging

from django.http import HttpResponse
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import (
    HasActiveSubscription,
    IsSchoolAdmin,
    IsStudent,
    PathAccessPermission,
)
from roster.models import Student
from tenants.mixins import SchoolScopedViewSetMixin

from .models import Payment
from .receipts import receipt_filename, render_receipt
from .serializers import PaymentRequestSerializer, PaymentSerializer
from .services import PaymentService, PaymentStateError

logger = logging.getLogger(__name__)


class MyPaymentsViewSet(
    SchoolScopedViewSetMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Оплаты текущего ученика.

    GET /api/my-payments/ — мои заявки, новые сверху
    POST /api/my-payments/ — новая заявка (status=pending)
    GET /api/my-payments/{id}/receipt/ — PDF-квитанция (только approved)
    """
    queryset = Payment.objects.all()
    serializer_class = PaymentSerializer
    permission_classes = [IsAuthenticated, PathAccessPermission, IsStudent, HasActiveSubscription]

    def get_queryset(self):
        return super().get_queryset().filter(student__user=self.request.user).order_by('-created_at')

    def get_student(self):
        student = Student.objects.filter(user=self.request.user, school=self.get_school()).first()
        if student is None:
            raise PermissionDenied('Профиль ученика не найден')
        return student

    def create(self, request, *args, **kwargs):
        serializer = PaymentRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = PaymentService.request_payment(student=self.get_student(), **serializer.validated_data)
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get'])
    def receipt(self, request, pk=None):
        payment = self.get_object()
        if payment.status != Payment.Status.APPROVED:
            return Response(
                {'detail': 'Квитанция доступна только для подтверждённых оплат'},
                status=status.HTTP_409_CONFLICT,
            )
        response = HttpResponse(render_receipt(payment), content_type='application/pdf')
        response['Content-Disposition'] = f'attachment; filename="{receipt_filename(payment)}"'
        return response


class PaymentViewSet(
    SchoolScopedViewSetMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Оплаты школы (для администратора).

    GET /api/payments/?status=pending — список, новые сверху
    POST /api/payments/{id}/approve/ — подтвердить
    POST /api/payments/{id}/reject/ — отклонить
    """
    queryset = Payment.objects.select_related('reviewed_by')
    serializer_class = PaymentSerializer
    permission_classes = [IsAuthenticated, PathAccessPermission, IsSchoolAdmin, HasActiveSubscription]

    def get_queryset(self):
        qs = super().get_queryset().order_by('-created_at')
        status_filter = self.request.query_params.get('status')
        if status_filter:
            qs = qs.filter(status=status_filter)
        return qs

    def _review(self, request, review):
        payment = self.get_object()
        try:
            payment = review(payment, reviewed_by=request.user)
        except PaymentStateError as e:
            return Response({'detail': str(e)}, status=status.HTTP_409_CONFLICT)
        return Response(PaymentSerializer(payment).data)

    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        return self._review(request, PaymentService.approve)

    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        return self._review(request, PaymentService.reject)
