from django.contrib import admin

from .models import Notice


@admin.register(Notice)
class NoticeAdmin(admin.ModelAdmin):
    list_display = ['title', 'school', 'publish_to', 'class_details', 'published', 'draft_status', 'created_at']
    list_filter = ['published', 'publish_to', 'school']
    search_fields = ['title', 'content']
    readonly_fields = ['draft_status', 'draft_error', 'created_by', 'created_at', 'updated_at']
