from django.contrib import admin

from .models import Student, Teacher


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ['name', 'school', 'class_name', 'roll', 'shift', 'session', 'login_code']
    list_filter = ['school', 'class_name', 'session', 'shift']
    search_fields = ['name', 'login_code']
    readonly_fields = ['login_code', 'created_at', 'updated_at']


@admin.register(Teacher)
class TeacherAdmin(admin.ModelAdmin):
    list_display = ['name', 'school', 'assigned_class', 'login_code']
    list_filter = ['school', 'assigned_class']
    search_fields = ['name', 'login_code']
    readonly_fields = ['login_code', 'created_at', 'updated_at']
