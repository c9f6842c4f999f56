from django.contrib.auth import get_user_model
from rest_framework import exceptions, serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .claims import claim_for_user

User = get_user_model()


def _ensure_school_enabled(user):
    school = getattr(user, 'school', None)
    if school is not None and not school.is_active:
        raise exceptions.AuthenticationFailed('Школа отключена. Обратитесь к владельцу платформы')


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Добавляет роль, школу и статус подписки в JWT токен"""

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)

        # Claims считаются по БД в момент выдачи и не меняются до повторного входа
        claim = claim_for_user(user)
        token['role'] = claim.role
        token['school_id'] = claim.school_id
        token['subscription_active'] = claim.subscription_active
        token['email'] = user.email

        return token

    def validate(self, attrs):
        attrs[self.username_field] = (attrs.get(self.username_field) or '').strip().lower()
        data = super().validate(attrs)
        _ensure_school_enabled(self.user)
        return data


class CodeLoginSerializer(serializers.Serializer):
    """Вход учителя/ученика по коду школы и личному коду."""
    school_code = serializers.CharField()
    login_code = serializers.CharField()

    def validate(self, attrs):
        school_code = attrs['school_code'].strip().upper()
        login_code = attrs['login_code'].strip().upper()

        user = (
            User.objects.select_related('school')
            .filter(login_code=login_code, school__code=school_code)
            .first()
        )
        if user is None or not user.is_active:
            raise exceptions.AuthenticationFailed('Неверный код школы или код входа')
        _ensure_school_enabled(user)

        refresh = CustomTokenObtainPairSerializer.get_token(user)
        self.user = user
        return {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        }


class UserProfileSerializer(serializers.ModelSerializer):
    """Сериализатор для профиля текущего пользователя"""
    school_name = serializers.CharField(source='school.name', read_only=True, default=None)

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'first_name',
            'last_name',
            'role',
            'school',
            'school_name',
            'login_code',
            'created_at',
        ]
        read_only_fields = fields
