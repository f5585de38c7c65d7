import django_filters
from django.db.models import Q, TextField
from django.db.models.functions import Cast

from .models import Job


class JobFilter(django_filters.FilterSet):
    """
    Query filters for the public job list.

    ``title`` searches title, description and additional details; ``skills`` is a
    comma separated list and matches jobs requiring any of them.
    """
    title = django_filters.CharFilter(method='filter_text')
    skills = django_filters.CharFilter(method='filter_skills')
    budget_min = django_filters.NumberFilter(field_name='budget', lookup_expr='gte')
    budget_max = django_filters.NumberFilter(field_name='budget', lookup_expr='lte')
    remote_available = django_filters.BooleanFilter()
    category = django_filters.CharFilter(lookup_expr='iexact')
    job_type = django_filters.ChoiceFilter(choices=Job.JOB_TYPE_CHOICES)
    experience_level = django_filters.ChoiceFilter(choices=Job.EXPERIENCE_CHOICES)
    status = django_filters.ChoiceFilter(choices=Job.STATUS_CHOICES)

    class Meta:
        model = Job
        fields = ['title', 'skills', 'budget_min', 'budget_max', 'remote_available', 'category',
                  'job_type', 'experience_level', 'status']

    def filter_text(self, queryset, name, value):
        return queryset.filter(
            Q(title__icontains=value) | Q(description__icontains=value) | Q(additional_details__icontains=value)
        )

    def filter_skills(self, queryset, name, value):
        skills = [s.strip() for s in value.split(',') if s.strip()]
        if not skills:
            return queryset

        condition = Q()
        for skill in skills:
            condition |= Q(skills_text__icontains=skill)
        return queryset.annotate(skills_text=Cast('skills_required', TextField())).filter(condition)
