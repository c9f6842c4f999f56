from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .access_policy import DASHBOARD_ACCESS_TABLE, navigation_for, resolve_access, resolve_rule
from .claims import get_request_claim
from .serializers import UserProfileSerializer


class MeView(APIView):
    """Профиль текущего пользователя + claims сессии."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        claim = get_request_claim(request)
        data = UserProfileSerializer(request.user).data
        data['claims'] = claim.as_dict()
        return Response(data)


class AccessCheckView(APIView):
    """
    GET /api/access/check/?path=/dashboard/students

    Решение политики доступа для страницы дашборда.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        path = request.query_params.get('path') or '/dashboard'
        claim = get_request_claim(request)
        rule = resolve_rule(path, DASHBOARD_ACCESS_TABLE)
        return Response({
            'path': path,
            'role': claim.role,
            'allowed': resolve_access(claim.role, path, DASHBOARD_ACCESS_TABLE),
            'matched_prefix': rule.prefix if rule else None,
        })


class NavigationView(APIView):
    """Пункты бокового меню, доступные роли."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        claim = get_request_claim(request)
        return Response({'role': claim.role, 'items': navigation_for(claim.role)})
