import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q

from marketplace_api.exceptions import Forbidden, InvalidInput, NotFound
from notifications.services import notify, project_group, push_to_group, push_to_user
from .models import DirectMessage, ProjectMessage
from .serializers import ChatUserSerializer, DirectMessageSerializer, ProjectMessageSerializer

User = get_user_model()
logger = logging.getLogger(__name__)

HISTORY_LIMIT = 50


def _visible_to(user):
    return (
        Q(sender=user, deleted_by_sender=False)
        | Q(receiver=user, deleted_by_receiver=False)
    )


class ChatService:

    @staticmethod
    def send(*, sender, receiver_id, message='', message_type=DirectMessage.TYPE_TEXT, file_url=''):
        if receiver_id == sender.pk:
            raise InvalidInput("You cannot send a message to yourself.")

        receiver = User.objects.filter(pk=receiver_id, is_active=True).first()
        if receiver is None:
            raise NotFound("Receiver not found.")

        direct = DirectMessage.objects.create(
            sender=sender,
            receiver=receiver,
            message=message,
            message_type=message_type,
            file_url=file_url,
        )

        push_to_user(receiver.pk, 'receive-message', dict(DirectMessageSerializer(direct).data))
        notify(
            recipient_id=receiver.pk,
            title="New Message",
            message=f"You have a new message from {sender.name}.",
            type='info',
            link=f"/chat/{sender.pk}",
        )
        return direct

    @staticmethod
    def list_between(*, user, other_id, limit=HISTORY_LIMIT):
        """The latest ``limit`` messages exchanged with ``other_id``, newest first."""
        return list(
            DirectMessage.objects.filter(
                Q(sender=user, receiver_id=other_id, deleted_by_sender=False)
                | Q(sender_id=other_id, receiver=user, deleted_by_receiver=False)
            ).order_by('-created_at', '-id')[:limit]
        )

    @staticmethod
    def list_conversations(*, user):
        """
        One entry per counterpart with the latest message, its time and read flag,
        most recent conversation first.
        """
        messages = (
            DirectMessage.objects.filter(_visible_to(user))
            .select_related('sender', 'receiver')
            .order_by('-created_at', '-id')
        )

        conversations = {}
        for direct in messages.iterator():
            other = direct.receiver if direct.sender_id == user.pk else direct.sender
            entry = conversations.get(other.pk)
            if entry is None:
                conversations[other.pk] = entry = {
                    'user': ChatUserSerializer(other).data,
                    'last_message': direct.message,
                    'last_message_type': direct.message_type,
                    'last_message_time': direct.created_at,
                    'is_read': direct.is_read,
                    'unread_count': 0,
                }
            if direct.receiver_id == user.pk and not direct.is_read:
                entry['unread_count'] += 1
        return list(conversations.values())

    @staticmethod
    def get_message(message_id):
        direct = DirectMessage.objects.filter(pk=message_id).first()
        if direct is None:
            raise NotFound("Message not found.")
        return direct

    @staticmethod
    def mark_read(*, user, message_id):
        direct = ChatService.get_message(message_id)
        if direct.receiver_id != user.pk:
            raise Forbidden("Only the receiver can mark a message as read.")

        if not direct.is_read:
            direct.is_read = True
            direct.save(update_fields=['is_read'])
        return direct

    @staticmethod
    def mark_conversation_read(*, user, other_id):
        return DirectMessage.objects.filter(sender_id=other_id, receiver=user, is_read=False).update(is_read=True)

    @staticmethod
    def delete(*, user, message_id):
        """
        Hide the message on the caller's side; once both sides have deleted it the
        row is removed. Both participants receive ``message-deleted``.
        """
        with transaction.atomic():
            direct = DirectMessage.objects.select_for_update().filter(pk=message_id).first()
            if direct is None:
                raise NotFound("Message not found.")
            if not direct.is_participant(user):
                raise Forbidden("You can only delete messages you sent or received.")

            if direct.sender_id == user.pk:
                direct.deleted_by_sender = True
            if direct.receiver_id == user.pk:
                direct.deleted_by_receiver = True

            participants = (direct.sender_id, direct.receiver_id)
            removed = direct.deleted_by_sender and direct.deleted_by_receiver
            if removed:
                direct.delete()
            else:
                direct.save(update_fields=['deleted_by_sender', 'deleted_by_receiver'])

        payload = {'message_id': message_id, 'deleted_by': user.pk}
        for participant_id in participants:
            push_to_user(participant_id, 'message-deleted', payload)

        logger.info(f"User {user.pk} deleted message {message_id}{' (removed)' if removed else ''}")
        return removed


class ProjectChatService:

    @staticmethod
    def require_participant(user, project):
        if not project.is_participant(user):
            raise Forbidden("You are not a participant of this project.")

    @staticmethod
    def send(*, sender, project, message='', message_type=ProjectMessage.TYPE_TEXT, file_url=''):
        ProjectChatService.require_participant(sender, project)

        project_message = ProjectMessage.objects.create(
            project=project,
            sender=sender,
            message=message,
            message_type=message_type,
            file_url=file_url,
        )
        push_to_group(
            project_group(project.pk),
            'receive-project-message',
            dict(ProjectMessageSerializer(project_message).data),
        )
        return project_message

    @staticmethod
    def history(*, user, project, limit=HISTORY_LIMIT):
        ProjectChatService.require_participant(user, project)
        return list(
            project.messages.select_related('sender').order_by('-created_at', '-id')[:limit]
        )

    @staticmethod
    def mark_read(*, user, project, message_id):
        ProjectChatService.require_participant(user, project)

        project_message = project.messages.filter(pk=message_id).first()
        if project_message is None:
            raise NotFound("Message not found.")

        if project_message.sender_id != user.pk and not project_message.is_read:
            project_message.is_read = True
            project_message.save(update_fields=['is_read'])
        return project_message
