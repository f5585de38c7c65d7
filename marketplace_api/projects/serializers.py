from rest_framework import serializers

from .models import Milestone, Project, ProjectStatusChange


class MilestoneSerializer(serializers.ModelSerializer):
    class Meta:
        model = Milestone
        fields = ('id', 'title', 'description', 'status', 'created_at', 'updated_at')
        read_only_fields = ('id', 'status', 'created_at', 'updated_at')


class UpdateMilestoneSerializer(serializers.Serializer):
    """
    Any subset of title, description and status. Status is checked against the
    milestone states by the service so the error message stays the same
    over REST and in tests.
    """
    title = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    status = serializers.CharField(required=False)


class StatusChangeSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProjectStatusChange
        fields = ('status', 'changed_at')


class ProjectSerializer(serializers.ModelSerializer):
    milestones = MilestoneSerializer(many=True, read_only=True)
    status_history = StatusChangeSerializer(many=True, read_only=True)

    class Meta:
        model = Project
        fields = ('id', 'job', 'client', 'freelancer', 'job_title', 'job_description', 'job_budget', 'job_category',
                  'job_type', 'freelancer_name', 'freelancer_email', 'freelancer_profile_pic', 'client_name',
                  'client_email', 'client_profile_pic', 'progress', 'status', 'status_history', 'payment_status',
                  'payment_request', 'milestones', 'created_at', 'updated_at')
        read_only_fields = fields


class ProjectStatusSerializer(serializers.Serializer):
    status = serializers.CharField()
