from django.contrib import admin

from .models import Result


@admin.register(Result)
class ResultAdmin(admin.ModelAdmin):
    list_display = ['student_name', 'exam_name', 'school', 'gpa', 'published', 'created_at']
    list_filter = ['published', 'school']
    search_fields = ['student_name', 'exam_name']
    readonly_fields = ['gpa', 'created_by', 'created_at', 'updated_at']
