import logging
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer
from django.contrib.auth import get_user_model
from rest_framework.exceptions import APIException
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import AccessToken

from marketplace_api.exceptions import InvalidInput, NotFound, error_message
from notifications.services import NotificationService, project_group, user_group
from projects.models import Project
from .serializers import SendDirectMessageSerializer, SendMessageSerializer
from .services import ChatService, ProjectChatService

User = get_user_model()
logger = logging.getLogger(__name__)

CHAT_ROLES = (User.ROLE_CLIENT, User.ROLE_FREELANCER)


class EventsConsumer(AsyncJsonWebsocketConsumer):
    """
    One socket per signed-in client or freelancer, authenticated with ``?token=<access>``.

    Frames in both directions are ``{"event": <name>, "data": {...}}``. The socket
    joins ``user_<id>`` on connect and ``project_<id>`` rooms on request; anything
    a handler rejects comes back as an ``error`` event on this socket only.
    """

    async def connect(self):
        self.user = None
        self.groups_joined = set()

        token = parse_qs(self.scope.get('query_string', b'').decode()).get('token', [None])[0]
        if not token:
            await self.close(code=4401)
            return

        user = await self.get_user_from_token(token)
        if user is None:
            await self.close(code=4401)
            return
        if user.role not in CHAT_ROLES:
            await self.close(code=4403)
            return

        self.user = user
        await self.join_group(user_group(user.pk))
        await self.accept()
        logger.info(f"Socket connected for user {user.pk}")

    async def disconnect(self, close_code):
        for group in list(self.groups_joined):
            await self.channel_layer.group_discard(group, self.channel_name)
        self.groups_joined.clear()

    async def join_group(self, group):
        await self.channel_layer.group_add(group, self.channel_name)
        self.groups_joined.add(group)

    async def receive_json(self, content, **kwargs):
        if not isinstance(content, dict):
            await self.send_error("Frames must be JSON objects.")
            return

        event = content.get('event')
        data = content.get('data') or {}
        handler = self.handlers.get(event)
        if handler is None:
            await self.send_error(f"Unknown event '{event}'.", event)
            return

        try:
            await handler(self, data)
        except APIException as exc:
            await self.send_error(error_message(exc.detail), event)
        except Exception as exc:
            logger.exception(f"Socket event '{event}' from user {self.user.pk} failed: {exc}")
            await self.send_error("An unexpected error occurred.", event)

    async def send_error(self, message, event=None):
        await self.send_json({'event': 'error', 'data': {'message': message, 'source': event}})

    # channel layer -> socket
    async def event_push(self, event):
        await self.send_json({'event': event['event'], 'data': event['data']})

    # socket -> server
    async def on_join_project_room(self, data):
        project_id = data.get('project_id')
        if not project_id:
            raise InvalidInput("project_id is required.")

        project = await database_sync_to_async(self.load_project_for_participant)(project_id)
        await self.join_group(project_group(project.pk))

    async def on_send_message(self, data):
        serializer = SendDirectMessageSerializer(data=data)
        serializer.is_valid(raise_exception=True)
        payload = serializer.validated_data

        await database_sync_to_async(ChatService.send)(
            sender=self.user,
            receiver_id=payload['receiver'],
            message=payload['message'],
            message_type=payload['message_type'],
            file_url=payload['file_url'],
        )

    async def on_delete_message(self, data):
        message_id = data.get('message_id')
        if not message_id:
            raise InvalidInput("message_id is required.")

        await database_sync_to_async(ChatService.delete)(user=self.user, message_id=message_id)

    async def on_send_project_message(self, data):
        project_id = data.get('project_id')
        if not project_id:
            raise InvalidInput("project_id is required.")

        serializer = SendMessageSerializer(data=data)
        serializer.is_valid(raise_exception=True)

        project = await database_sync_to_async(self.load_project_for_participant)(project_id)
        await database_sync_to_async(ProjectChatService.send)(
            sender=self.user, project=project, **serializer.validated_data,
        )

    async def on_mark_as_read(self, data):
        notification_id = data.get('notification_id')
        if not notification_id:
            raise InvalidInput("notification_id is required.")

        notification = await database_sync_to_async(NotificationService.mark_read)(
            user=self.user, notification_id=notification_id,
        )
        await self.send_json({
            'event': 'notification-marked-as-read',
            'data': {'notification_id': notification.pk, 'is_read': notification.is_read},
        })

    handlers = {
        'join-project-room': on_join_project_room,
        'send-message': on_send_message,
        'delete-message': on_delete_message,
        'send-project-message': on_send_project_message,
        'mark-as-read': on_mark_as_read,
    }

    def load_project_for_participant(self, project_id):
        project = Project.objects.filter(pk=project_id).first()
        if project is None:
            raise NotFound("Project not found.")
        ProjectChatService.require_participant(self.user, project)
        return project

    @database_sync_to_async
    def get_user_from_token(self, token):
        try:
            user_id = AccessToken(token)['user_id']
        except (TokenError, KeyError):
            return None
        return User.objects.filter(pk=user_id, is_active=True).first()
