from django.contrib import admin

from .models import School


@admin.register(School)
class SchoolAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'status', 'max_students', 'max_teachers', 'subscription_expires_at', 'created_at']
    list_filter = ['status']
    search_fields = ['name', 'code']
    readonly_fields = ['id', 'code', 'created_at', 'updated_at']
