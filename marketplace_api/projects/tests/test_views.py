import pytest
from django.urls import reverse

from conftest import MilestoneFactory, ProjectFactory
from projects.models import Project


@pytest.mark.django_db
class TestProjectEndpoints:

    def test_list_my_projects(self, auth_client, project):
        ProjectFactory(freelancer=project.freelancer, status=Project.STATUS_COMPLETED)
        ProjectFactory()
        api = auth_client(project.freelancer)

        everything = api.get(reverse('project-list'))
        active = api.get(reverse('project-list'), {'active': 'true'})
        completed = api.get(reverse('project-list'), {'status': 'completed'})

        assert len(everything.data) == 2
        assert [p['id'] for p in active.data] == [project.pk]
        assert [p['status'] for p in completed.data] == ['completed']

    def test_detail_is_participant_only(self, auth_client, project, other_freelancer):
        url = reverse('project-detail', kwargs={'project_id': project.pk})

        assert auth_client(project.client).get(url).data['project']['id'] == project.pk
        response = auth_client(other_freelancer).get(url)
        assert response.status_code == 403
        assert response.data['message'] == "You are not a participant of this project."

    def test_missing_project_is_404(self, auth_client, freelancer):
        response = auth_client(freelancer).get(reverse('project-detail', kwargs={'project_id': 4242}))

        assert response.status_code == 404


@pytest.mark.django_db
class TestMilestoneEndpoints:

    def test_milestone_flow_over_rest(self, auth_client, project):
        client_api = auth_client(project.client)
        freelancer_api = auth_client(project.freelancer)
        list_url = reverse('milestone-list-create', kwargs={'project_id': project.pk})

        first = client_api.post(list_url, {'title': "Wireframes", 'status': 'completed'}, format='json')
        second = client_api.post(list_url, {'title': "Implementation"}, format='json')
        assert first.status_code == 201
        assert first.data['milestone']['status'] == 'pending'
        assert second.data['progress'] == 0

        response = freelancer_api.patch(
            reverse('milestone-update-delete', kwargs={'project_id': project.pk,
                                                       'milestone_id': first.data['milestone']['id']}),
            {'status': 'completed'}, format='json',
        )
        assert response.status_code == 200
        assert response.data['progress'] == 50

        response = client_api.delete(
            reverse('milestone-update-delete', kwargs={'project_id': project.pk,
                                                       'milestone_id': second.data['milestone']['id']}),
        )
        assert response.data['progress'] == 100

        listed = freelancer_api.get(list_url)
        assert [m['title'] for m in listed.data] == ["Wireframes"]

    def test_freelancer_cannot_add_milestone(self, auth_client, project):
        response = auth_client(project.freelancer).post(
            reverse('milestone-list-create', kwargs={'project_id': project.pk}), {'title': "Mine"}, format='json',
        )

        assert response.status_code == 403

    def test_invalid_milestone_status_is_400(self, auth_client, project):
        milestone = MilestoneFactory(project=project)

        response = auth_client(project.freelancer).patch(
            reverse('milestone-update-delete', kwargs={'project_id': project.pk, 'milestone_id': milestone.pk}),
            {'status': 'finished'}, format='json',
        )

        assert response.status_code == 400
        assert response.data['message'] == "Invalid milestone status 'finished'."


@pytest.mark.django_db
class TestStatusEndpoint:

    def test_complete_then_close(self, auth_client, project):
        MilestoneFactory(project=project, status='completed')
        url = reverse('project-status', kwargs={'project_id': project.pk})
        api = auth_client(project.client)

        response = api.patch(url, {'status': 'completed'}, format='json')
        assert response.status_code == 200
        assert response.data['project']['status'] == 'completed'
        assert response.data['project']['progress'] == 100

        response = api.patch(url, {'status': 'closed'}, format='json')
        assert response.data['message'] == "Project marked as closed."

    def test_incomplete_project_cannot_complete(self, auth_client, project):
        MilestoneFactory(project=project)

        response = auth_client(project.client).patch(
            reverse('project-status', kwargs={'project_id': project.pk}), {'status': 'completed'}, format='json',
        )

        assert response.status_code == 400
        assert response.data['success'] is False

    def test_freelancer_cannot_change_status(self, auth_client, project):
        response = auth_client(project.freelancer).patch(
            reverse('project-status', kwargs={'project_id': project.pk}), {'status': 'completed'}, format='json',
        )

        assert response.status_code == 403

    def test_request_payment(self, auth_client, project):
        response = auth_client(project.freelancer).post(
            reverse('project-request-payment', kwargs={'project_id': project.pk}),
        )

        assert response.status_code == 200
        assert response.data['project']['payment_request'] is True
