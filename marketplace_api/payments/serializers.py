from rest_framework import serializers

from .models import Transaction


class TransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Transaction
        fields = ('id', 'transaction_uuid', 'project', 'freelancer', 'client', 'freelancer_name', 'freelancer_email',
                  'client_name', 'client_email', 'job_title', 'job_description', 'job_budget', 'amount',
                  'platform_fee', 'freelancer_share', 'currency', 'payment_intent_id', 'payment_method',
                  'payment_status', 'created_at')
        read_only_fields = fields


class StartPaymentSerializer(serializers.Serializer):
    project_id = serializers.IntegerField()


class ConfirmStripePaymentSerializer(serializers.Serializer):
    """
    Serializer for the client reporting a confirmed Stripe Payment Intent.
    """
    project_id = serializers.IntegerField()
    payment_intent_id = serializers.CharField(max_length=255)


class VerifyEsewaPaymentSerializer(serializers.Serializer):
    """
    Serializer for the eSewa success redirect: ``rid`` is eSewa's reference id.
    """
    project_id = serializers.IntegerField()
    rid = serializers.CharField(max_length=255)
