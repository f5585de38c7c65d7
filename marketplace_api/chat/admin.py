from django.contrib import admin

from .models import DirectMessage, ProjectMessage


@admin.register(DirectMessage)
class DirectMessageAdmin(admin.ModelAdmin):
    list_display = ('id', 'sender', 'receiver', 'message_type', 'is_read', 'created_at')
    list_filter = ('message_type', 'is_read')


@admin.register(ProjectMessage)
class ProjectMessageAdmin(admin.ModelAdmin):
    list_display = ('id', 'project', 'sender', 'message_type', 'is_read', 'created_at')
    list_filter = ('message_type',)
