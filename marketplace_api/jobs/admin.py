from django.contrib import admin

from .models import Job, Proposal


class ProposalInline(admin.TabularInline):
    model = Proposal
    extra = 0
    readonly_fields = ('freelancer', 'proposed_amount', 'status', 'created_at')


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'created_by', 'budget', 'status', 'visibility', 'created_at')
    list_filter = ('status', 'job_type', 'experience_level', 'visibility')
    search_fields = ('title', 'created_by__email')
    inlines = [ProposalInline]
