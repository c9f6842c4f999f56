from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    """Админ-панель для кастомной модели пользователя"""

    model = CustomUser
    list_display = ('email', 'login_code', 'role', 'school', 'first_name', 'last_name', 'is_staff', 'is_active', 'created_at')
    list_filter = ('role', 'is_staff', 'is_active')

    fieldsets = (
        (None, {'fields': ('email', 'login_code', 'password')}),
        ('Личная информация', {'fields': ('first_name', 'last_name')}),
        ('Роль и права', {'fields': ('role', 'school', 'is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Важные даты', {'fields': ('last_login', 'date_joined')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'role', 'school', 'password1', 'password2', 'is_staff', 'is_active')
        }),
    )

    search_fields = ('email', 'login_code', 'first_name', 'last_name')
    ordering = ('-created_at',)
    readonly_fields = ('created_at', 'updated_at')
