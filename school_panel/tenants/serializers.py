from django.contrib.auth import get_user_model
from rest_framework import serializers

from core.fields import TimestampField

from .models import School

User = get_user_model()


class SchoolSerializer(serializers.ModelSerializer):
    subscription_expires_at = TimestampField()
    subscription_active = serializers.SerializerMethodField()
    days_until_expiry = serializers.SerializerMethodField()
    student_count = serializers.SerializerMethodField()
    teacher_count = serializers.SerializerMethodField()

    class Meta:
        model = School
        fields = [
            'id', 'name', 'address', 'code', 'status',
            'max_students', 'max_teachers', 'subscription_expires_at',
            'subscription_active', 'days_until_expiry',
            'student_count', 'teacher_count',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'code', 'created_at', 'updated_at']
        extra_kwargs = {
            'name': {'min_length': 3},
            'max_students': {'min_value': 1},
            'max_teachers': {'min_value': 1},
        }

    def get_subscription_active(self, obj):
        return obj.subscription_active()

    def get_days_until_expiry(self, obj):
        return obj.days_until_expiry()

    def get_student_count(self, obj):
        return obj.students.count()

    def get_teacher_count(self, obj):
        return obj.teachers.count()


class SubscriptionSerializer(SchoolSerializer):
    """Сводка подписки школы для владельца платформы."""

    class Meta(SchoolSerializer.Meta):
        fields = [
            'id', 'name', 'code', 'status',
            'max_students', 'student_count',
            'max_teachers', 'teacher_count',
            'subscription_expires_at', 'subscription_active', 'days_until_expiry',
        ]
        read_only_fields = fields


class SchoolAdminSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'email', 'first_name', 'last_name', 'role', 'is_active', 'created_at']
        read_only_fields = fields


class SchoolAdminCreateSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)
    first_name = serializers.CharField(required=False, allow_blank=True, default='')
    last_name = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_email(self, value):
        value = value.strip().lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('Пользователь с таким email уже существует')
        return value

    def create(self, validated_data):
        return User.objects.create_user(
            role=User.ROLE_ADMIN,
            school=self.context['school'],
            **validated_data,
        )
