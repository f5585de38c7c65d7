import pytest
from django.urls import reverse

from chat.models import DirectMessage
from chat.services import ChatService


@pytest.mark.django_db
class TestDirectChatEndpoints:

    def test_send_and_read_conversation(self, auth_client, client_user, freelancer):
        response = auth_client(client_user).post(reverse('chat-send'), {
            'receiver': freelancer.pk,
            'message': "Are you available?",
        }, format='json')

        assert response.status_code == 201
        assert response.data['chat']['receiver'] == freelancer.pk

        history = auth_client(freelancer).get(reverse('chat-between', kwargs={'user_id': client_user.pk}))
        assert [m['message'] for m in history.data['chats']] == ["Are you available?"]

        conversations = auth_client(freelancer).get(reverse('chat-conversations'))
        assert conversations.data['conversations'][0]['user']['id'] == client_user.pk
        assert conversations.data['conversations'][0]['unread_count'] == 1

    def test_empty_message_is_rejected(self, auth_client, client_user, freelancer):
        response = auth_client(client_user).post(reverse('chat-send'), {'receiver': freelancer.pk}, format='json')

        assert response.status_code == 400
        assert response.data['message'] == "A message needs text or a file."

    def test_file_message(self, auth_client, client_user, freelancer):
        response = auth_client(client_user).post(reverse('chat-send'), {
            'receiver': freelancer.pk,
            'message_type': 'file',
            'file_url': 'https://files.example.com/brief.pdf',
        }, format='json')

        assert response.status_code == 201
        assert response.data['chat']['message_type'] == 'file'

    def test_mark_read_and_delete(self, auth_client, client_user, freelancer):
        direct = ChatService.send(sender=client_user, receiver_id=freelancer.pk, message="hi")

        response = auth_client(freelancer).patch(reverse('chat-read', kwargs={'id': direct.pk}))
        assert response.data['chat']['is_read'] is True

        response = auth_client(freelancer).delete(reverse('chat-delete', kwargs={'id': direct.pk}))
        assert response.status_code == 200
        direct.refresh_from_db()
        assert direct.deleted_by_receiver is True
        assert DirectMessage.objects.filter(pk=direct.pk).exists()


@pytest.mark.django_db
class TestProjectChatEndpoints:

    def test_participants_post_and_read(self, auth_client, project):
        url = reverse('project-chat', kwargs={'project_id': project.pk})

        response = auth_client(project.client).post(url, {'message': "Kickoff call tomorrow"}, format='json')
        assert response.status_code == 201
        message_id = response.data['chat']['id']

        history = auth_client(project.freelancer).get(url)
        assert [m['id'] for m in history.data['chats']] == [message_id]

        response = auth_client(project.freelancer).patch(
            reverse('project-chat-read', kwargs={'project_id': project.pk, 'id': message_id}),
        )
        assert response.data['chat']['is_read'] is True

    def test_outsider_is_forbidden(self, auth_client, project, other_freelancer):
        response = auth_client(other_freelancer).get(reverse('project-chat', kwargs={'project_id': project.pk}))

        assert response.status_code == 403
        assert response.data['message'] == "You are not a participant of this project."
