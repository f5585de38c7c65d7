from django.contrib import admin

from .models import Milestone, Project, ProjectStatusChange


class MilestoneInline(admin.TabularInline):
    model = Milestone
    extra = 0


class StatusChangeInline(admin.TabularInline):
    model = ProjectStatusChange
    extra = 0
    readonly_fields = ('status', 'changed_by', 'changed_at')


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ('id', 'job_title', 'client_email', 'freelancer_email', 'progress', 'status', 'payment_status')
    list_filter = ('status', 'payment_status')
    search_fields = ('job_title', 'client_email', 'freelancer_email')
    inlines = [MilestoneInline, StatusChangeInline]
