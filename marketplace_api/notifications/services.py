"""
Durable notification log plus best-effort realtime delivery.

A notification row is written first and is the source of truth; the websocket
push that follows is a hint. A recipient with no open connection simply finds
the row the next time they list their notifications.
"""
import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import DatabaseError, transaction

from marketplace_api.exceptions import NotFound
from .models import Notification

logger = logging.getLogger(__name__)


def user_group(user_id):
    return f"user_{user_id}"


def project_group(project_id):
    return f"project_{project_id}"


def push_to_group(group, event, data):
    """
    Send ``{"event": event, "data": data}`` to every socket in ``group``.
    Failures are logged and dropped; callers never depend on delivery.
    """
    channel_layer = get_channel_layer()
    if channel_layer is None:
        logger.warning(f"No channel layer configured, dropping '{event}' for {group}")
        return False

    try:
        async_to_sync(channel_layer.group_send)(
            group,
            {'type': 'event.push', 'event': event, 'data': data},
        )
    except Exception as e:
        logger.error(f"Push of '{event}' to {group} failed: {str(e)}")
        return False
    return True


def push_to_user(user_id, event, data):
    return push_to_group(user_group(user_id), event, data)


def serialize_notification(notification):
    return {
        'id': notification.id,
        'recipient': notification.recipient_id,
        'title': notification.title,
        'message': notification.message,
        'type': notification.type,
        'link': notification.link,
        'is_read': notification.is_read,
        'created_at': notification.created_at.isoformat(),
    }


class NotificationService:

    @staticmethod
    def notify(*, recipient_id, title, message, type=Notification.TYPE_INFO, link=''):
        """
        Persist a notification for ``recipient_id`` and push ``new-notification``
        to their group. Returns the row, or None when it could not be stored.
        """
        try:
            with transaction.atomic():
                notification = Notification.objects.create(
                    recipient_id=recipient_id,
                    title=title,
                    message=message,
                    type=type,
                    link=link or '',
                )
        except DatabaseError as e:
            logger.error(f"Failed to store notification '{title}' for user {recipient_id}: {str(e)}")
            return None

        push_to_user(recipient_id, 'new-notification', serialize_notification(notification))
        return notification

    @staticmethod
    def list_for(user):
        return Notification.objects.filter(recipient=user).order_by('-created_at', '-id')

    @staticmethod
    def mark_read(*, user, notification_id):
        notification = Notification.objects.filter(pk=notification_id, recipient=user).first()
        if notification is None:
            raise NotFound("Notification not found.")

        if not notification.is_read:
            notification.is_read = True
            notification.save(update_fields=['is_read'])
        return notification

    @staticmethod
    def mark_all_read(*, user):
        return Notification.objects.filter(recipient=user, is_read=False).update(is_read=True)

    @staticmethod
    def delete(*, user, notification_id):
        deleted, _ = Notification.objects.filter(pk=notification_id, recipient=user).delete()
        if not deleted:
            raise NotFound("Notification not found.")

    @staticmethod
    def delete_all(*, user):
        deleted, _ = Notification.objects.filter(recipient=user).delete()
        return deleted


notify = NotificationService.notify
