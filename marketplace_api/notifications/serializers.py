from rest_framework import serializers
from django.contrib.auth import get_user_model

from .models import Notification

User = get_user_model()


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = ('id', 'recipient', 'title', 'message', 'type', 'link', 'is_read', 'created_at')
        read_only_fields = fields


class CreateNotificationSerializer(serializers.Serializer):
    """
    Serializer used by administrators to send a notification to a user.
    """
    recipient = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())
    title = serializers.CharField(max_length=255)
    message = serializers.CharField()
    type = serializers.ChoiceField(choices=Notification.TYPE_CHOICES, default=Notification.TYPE_INFO)
    link = serializers.CharField(max_length=500, required=False, allow_blank=True)
