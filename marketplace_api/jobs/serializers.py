from rest_framework import serializers

from .models import Job, Proposal


class ProposalSerializer(serializers.ModelSerializer):
    """
    Serializer for listing proposals, with the applicant's public details.
    """
    freelancer_name = serializers.CharField(source='freelancer.name', read_only=True)
    freelancer_email = serializers.EmailField(source='freelancer.email', read_only=True)
    freelancer_profile_pic = serializers.CharField(source='freelancer.profile_pic', read_only=True)

    class Meta:
        model = Proposal
        fields = ('id', 'job', 'freelancer', 'freelancer_name', 'freelancer_email', 'freelancer_profile_pic',
                  'proposed_amount', 'proposed_timeline', 'proposal_message', 'status', 'created_at')
        read_only_fields = fields


class CreateProposalFreelancerSerializer(serializers.Serializer):
    """
    Serializer for a freelancer applying to a job.
    """
    proposed_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    proposed_timeline = serializers.CharField(max_length=255)
    proposal_message = serializers.CharField()


class ProposalDecisionSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=(('accept', 'Accept'), ('reject', 'Reject')))


class JobSerializer(serializers.ModelSerializer):
    """
    Serializer for creating, reading and updating jobs.

    ``status`` and ownership are read-only: status only moves through the
    proposal and project lifecycle.
    """
    created_by_name = serializers.CharField(source='created_by.name', read_only=True)
    proposals_count = serializers.IntegerField(source='proposals.count', read_only=True)

    class Meta:
        model = Job
        fields = ('id', 'title', 'description', 'budget', 'job_photo', 'skills_required', 'category', 'job_type',
                  'location', 'remote_available', 'deadline', 'experience_level', 'additional_details', 'status',
                  'budget_type', 'hourly_rate', 'minimum_bid_amount', 'preferred_freelancer_location', 'priority',
                  'visibility', 'tags', 'created_by', 'created_by_name', 'proposals_count', 'created_at',
                  'updated_at')
        read_only_fields = ('id', 'status', 'created_by', 'created_by_name', 'proposals_count', 'created_at',
                            'updated_at')

    def validate_skills_required(self, value):
        if not isinstance(value, list) or not all(isinstance(s, str) for s in value):
            raise serializers.ValidationError("skills_required must be a list of strings.")
        return value

    def validate_tags(self, value):
        if not isinstance(value, list) or not all(isinstance(s, str) for s in value):
            raise serializers.ValidationError("tags must be a list of strings.")
        return value

    def validate(self, attrs):
        budget_type = attrs.get('budget_type', getattr(self.instance, 'budget_type', 'fixed'))
        hourly_rate = attrs.get('hourly_rate', getattr(self.instance, 'hourly_rate', None))
        if budget_type == 'hourly' and hourly_rate is None:
            raise serializers.ValidationError({'hourly_rate': "Hourly rate is required for hourly jobs."})
        return attrs


class JobDetailSerializer(JobSerializer):
    """
    Job with its proposals, returned to the job owner.
    """
    proposals = ProposalSerializer(many=True, read_only=True)

    class Meta(JobSerializer.Meta):
        fields = JobSerializer.Meta.fields + ('proposals',)


class AppliedJobSerializer(serializers.ModelSerializer):
    """
    A freelancer's own proposal together with the job it was sent to.
    """
    job = JobSerializer(read_only=True)

    class Meta:
        model = Proposal
        fields = ('id', 'job', 'proposed_amount', 'proposed_timeline', 'proposal_message', 'status', 'created_at')
        read_only_fields = fields

