from rest_framework import serializers
from django.contrib.auth import get_user_model

from .models import DirectMessage, ProjectMessage

User = get_user_model()


class ChatUserSerializer(serializers.ModelSerializer):
    name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = ('id', 'name', 'email', 'profile_pic', 'role')


class DirectMessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = DirectMessage
        fields = ('id', 'sender', 'receiver', 'message', 'message_type', 'file_url', 'is_read', 'created_at')
        read_only_fields = fields


class ProjectMessageSerializer(serializers.ModelSerializer):
    sender_name = serializers.CharField(source='sender.name', read_only=True)

    class Meta:
        model = ProjectMessage
        fields = ('id', 'project', 'sender', 'sender_name', 'message', 'message_type', 'file_url', 'is_read',
                  'created_at')
        read_only_fields = fields


class SendMessageSerializer(serializers.Serializer):
    """
    Serializer for a chat message, shared by the REST endpoints and the websocket events.
    """
    message = serializers.CharField(required=False, allow_blank=True, default='')
    message_type = serializers.ChoiceField(choices=DirectMessage.MESSAGE_TYPE_CHOICES, default=DirectMessage.TYPE_TEXT)
    file_url = serializers.URLField(required=False, allow_blank=True, default='')

    def validate(self, attrs):
        if not attrs['message'].strip() and not attrs['file_url']:
            raise serializers.ValidationError("A message needs text or a file.")
        return attrs


class SendDirectMessageSerializer(SendMessageSerializer):
    receiver = serializers.IntegerField()
