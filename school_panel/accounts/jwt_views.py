import logging

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView

from .serializers import CodeLoginSerializer, CustomTokenObtainPairSerializer

logger = logging.getLogger(__name__)


class LoginView(TokenObtainPairView):
    """Вход по email и паролю (владелец платформы, администраторы школ)."""
    serializer_class = CustomTokenObtainPairSerializer
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = 'login'


class CodeLoginView(APIView):
    """Вход по коду школы + личному коду (учителя, ученики)."""
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = 'login'
    www_authenticate_realm = 'api'

    def get_authenticate_header(self, request):
        # Неверный код → 401, а не 403
        return f'Bearer realm="{self.www_authenticate_realm}"'

    def post(self, request):
        serializer = CodeLoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.user
        logger.info('Code login: user=%s school=%s role=%s', user.pk, user.school_id, user.role)
        return Response(serializer.validated_data, status=status.HTTP_200_OK)
