"""
Notification service tests: durable rows first, realtime push second.
"""
from unittest.mock import patch

import pytest
from django.db import DatabaseError

from marketplace_api.exceptions import NotFound
from notifications.models import Notification
from notifications.services import NotificationService, notify, push_to_group, user_group


@pytest.mark.django_db
class TestNotify:

    def test_persists_row_and_pushes_to_recipient_group(self, freelancer, listen):
        next_message = listen(user_group(freelancer.pk))

        notification = notify(
            recipient_id=freelancer.pk,
            title="New Job Posted",
            message="A job matching your skills was posted.",
            link="/job/1",
        )

        assert Notification.objects.filter(pk=notification.pk, recipient=freelancer).exists()
        assert notification.type == Notification.TYPE_INFO
        assert notification.is_read is False

        message = next_message()
        assert message['type'] == 'event.push'
        assert message['event'] == 'new-notification'
        assert message['data']['id'] == notification.pk
        assert message['data']['title'] == "New Job Posted"
        assert message['data']['link'] == "/job/1"
        assert next_message() is None

    def test_other_users_do_not_receive_the_push(self, freelancer, other_freelancer, listen):
        other_inbox = listen(user_group(other_freelancer.pk))

        notify(recipient_id=freelancer.pk, title="Hi", message="Only for you")

        assert other_inbox() is None

    def test_row_survives_a_failed_push(self, freelancer):
        with patch('notifications.services.get_channel_layer', return_value=None):
            notification = notify(recipient_id=freelancer.pk, title="Offline", message="Stored anyway")

        assert notification is not None
        assert NotificationService.list_for(freelancer).count() == 1

    def test_storage_failure_returns_none_without_push(self, freelancer, listen):
        next_message = listen(user_group(freelancer.pk))

        with patch.object(Notification.objects, 'create', side_effect=DatabaseError("disk full")):
            notification = notify(recipient_id=freelancer.pk, title="Lost", message="Not stored")

        assert notification is None
        assert next_message() is None

    def test_push_to_group_swallows_layer_errors(self):
        with patch('notifications.services.async_to_sync', side_effect=RuntimeError("redis down")):
            assert push_to_group('user_1', 'new-notification', {}) is False


@pytest.mark.django_db
class TestNotificationQueries:

    def test_list_is_newest_first_and_scoped(self, freelancer, other_freelancer):
        first = notify(recipient_id=freelancer.pk, title="First", message="1")
        second = notify(recipient_id=freelancer.pk, title="Second", message="2")
        notify(recipient_id=other_freelancer.pk, title="Other", message="3")

        listed = list(NotificationService.list_for(freelancer))

        assert listed == [second, first]

    def test_mark_read_is_idempotent(self, freelancer):
        notification = notify(recipient_id=freelancer.pk, title="Read me", message="...")

        NotificationService.mark_read(user=freelancer, notification_id=notification.pk)
        again = NotificationService.mark_read(user=freelancer, notification_id=notification.pk)

        assert again.is_read is True
        notification.refresh_from_db()
        assert notification.is_read is True

    def test_mark_read_of_someone_elses_notification_is_not_found(self, freelancer, other_freelancer):
        notification = notify(recipient_id=freelancer.pk, title="Private", message="...")

        with pytest.raises(NotFound):
            NotificationService.mark_read(user=other_freelancer, notification_id=notification.pk)

        notification.refresh_from_db()
        assert notification.is_read is False

    def test_mark_all_read_only_touches_unread_rows(self, freelancer):
        read = notify(recipient_id=freelancer.pk, title="A", message="a")
        NotificationService.mark_read(user=freelancer, notification_id=read.pk)
        notify(recipient_id=freelancer.pk, title="B", message="b")
        notify(recipient_id=freelancer.pk, title="C", message="c")

        assert NotificationService.mark_all_read(user=freelancer) == 2
        assert not Notification.objects.filter(recipient=freelancer, is_read=False).exists()

    def test_delete_and_delete_all(self, freelancer, other_freelancer):
        mine = notify(recipient_id=freelancer.pk, title="A", message="a")
        notify(recipient_id=freelancer.pk, title="B", message="b")
        theirs = notify(recipient_id=other_freelancer.pk, title="C", message="c")

        with pytest.raises(NotFound):
            NotificationService.delete(user=freelancer, notification_id=theirs.pk)

        NotificationService.delete(user=freelancer, notification_id=mine.pk)
        assert NotificationService.delete_all(user=freelancer) == 1
        assert Notification.objects.filter(pk=theirs.pk).exists()
