"""
Project lifecycle tests: milestone progress and forward-only status transitions.
"""
import pytest

from conftest import MilestoneFactory, ProjectFactory
from jobs.models import Job
from marketplace_api.exceptions import Forbidden, InvalidInput, InvalidState
from notifications.models import Notification
from projects.models import Milestone, Project, ProjectStatusChange, calculate_progress
from projects.services import ProjectService


class TestCalculateProgress:

    @pytest.mark.parametrize('completed, total, expected', [
        (0, 0, 0),
        (0, 3, 0),
        (1, 3, 33),
        (2, 3, 67),
        (1, 2, 50),
        (1, 8, 13),
        (3, 8, 38),
        (5, 8, 63),
        (3, 3, 100),
    ])
    def test_rounds_half_up(self, completed, total, expected):
        assert calculate_progress(completed, total) == expected


@pytest.mark.django_db
class TestMilestones:

    def test_two_milestones_drive_progress_to_completion(self, project):
        client, freelancer = project.client, project.freelancer

        first = ProjectService.add_milestone(user=client, project=project, title="Design")
        second = ProjectService.add_milestone(user=client, project=project, title="Build")
        project.refresh_from_db()
        assert project.progress == 0

        ProjectService.update_milestone(user=freelancer, project=project, milestone=first, status='completed')
        project.refresh_from_db()
        assert project.progress == 50

        ProjectService.update_milestone(user=freelancer, project=project, milestone=second, status='completed')
        project.refresh_from_db()
        assert project.progress == 100

        ProjectService.transition_status(user=client, project=project, target='completed')
        project.refresh_from_db()
        assert project.status == Project.STATUS_COMPLETED
        assert project.job.status == Job.STATUS_COMPLETED

    def test_adding_a_milestone_lowers_progress(self, project):
        MilestoneFactory(project=project, status='completed')
        project.refresh_progress()
        assert project.progress == 100

        ProjectService.add_milestone(user=project.client, project=project, title="Extra")

        project.refresh_from_db()
        assert project.progress == 50

    def test_deleting_a_milestone_recomputes_progress(self, project):
        done = MilestoneFactory(project=project, status='completed')
        pending = MilestoneFactory(project=project)
        project.refresh_progress()
        assert project.progress == 50

        ProjectService.delete_milestone(user=project.client, project=project, milestone=pending)
        project.refresh_from_db()
        assert project.progress == 100

        ProjectService.delete_milestone(user=project.client, project=project, milestone=done)
        project.refresh_from_db()
        assert project.progress == 0

    def test_add_milestone_notifies_freelancer(self, project):
        ProjectService.add_milestone(user=project.client, project=project, title="Kickoff")

        notification = Notification.objects.get(recipient=project.freelancer)
        assert notification.title == "New Milestone Added"
        assert notification.link == f"/projects/{project.pk}"

    def test_freelancer_status_change_notifies_client(self, project):
        milestone = MilestoneFactory(project=project)

        ProjectService.update_milestone(user=project.freelancer, project=project, milestone=milestone,
                                        status='in-progress')

        assert Notification.objects.filter(recipient=project.client, title="Milestone Updated").exists()

    def test_only_client_adds_or_deletes(self, project):
        with pytest.raises(Forbidden):
            ProjectService.add_milestone(user=project.freelancer, project=project, title="Sneaky")

        milestone = MilestoneFactory(project=project)
        with pytest.raises(Forbidden):
            ProjectService.delete_milestone(user=project.freelancer, project=project, milestone=milestone)

    def test_outsiders_cannot_update(self, project, other_freelancer):
        milestone = MilestoneFactory(project=project)

        with pytest.raises(Forbidden):
            ProjectService.update_milestone(user=other_freelancer, project=project, milestone=milestone,
                                            status='completed')

    def test_invalid_milestone_status(self, project):
        milestone = MilestoneFactory(project=project)

        with pytest.raises(InvalidInput):
            ProjectService.update_milestone(user=project.freelancer, project=project, milestone=milestone,
                                            status='done')

        milestone.refresh_from_db()
        assert milestone.status == Milestone.STATUS_PENDING

    def test_milestones_are_frozen_once_completed(self):
        project = ProjectFactory(status=Project.STATUS_COMPLETED)

        with pytest.raises(InvalidState):
            ProjectService.add_milestone(user=project.client, project=project, title="Late")


@pytest.mark.django_db
class TestStatusTransitions:

    def completed_milestones(self, project, count=2):
        for _ in range(count):
            MilestoneFactory(project=project, status='completed')
        project.refresh_progress()

    def test_completion_requires_full_progress(self, project):
        MilestoneFactory(project=project, status='completed')
        MilestoneFactory(project=project)
        project.refresh_progress()

        with pytest.raises(InvalidState, match="100%"):
            ProjectService.transition_status(user=project.client, project=project, target='completed')

        project.refresh_from_db()
        assert project.status == Project.STATUS_IN_PROGRESS

    def test_project_without_milestones_cannot_complete(self, project):
        with pytest.raises(InvalidState):
            ProjectService.transition_status(user=project.client, project=project, target='completed')

    def test_close_requires_completed(self, project):
        self.completed_milestones(project)

        with pytest.raises(InvalidState):
            ProjectService.transition_status(user=project.client, project=project, target='closed')

        ProjectService.transition_status(user=project.client, project=project, target='completed')
        closed = ProjectService.transition_status(user=project.client, project=project, target='closed')

        assert closed.status == Project.STATUS_CLOSED
        closed.job.refresh_from_db()
        assert closed.job.status == Job.STATUS_CLOSED
        assert list(ProjectStatusChange.objects.filter(project=project).values_list('status', flat=True)) == [
            'completed', 'closed',
        ]

    def test_no_backward_moves(self, project):
        self.completed_milestones(project)
        ProjectService.transition_status(user=project.client, project=project, target='completed')

        with pytest.raises(InvalidState):
            ProjectService.transition_status(user=project.client, project=project, target='in-progress')

    def test_unknown_status(self, project):
        with pytest.raises(InvalidInput):
            ProjectService.transition_status(user=project.client, project=project, target='archived')

    def test_only_client_transitions(self, project):
        self.completed_milestones(project)

        with pytest.raises(Forbidden):
            ProjectService.transition_status(user=project.freelancer, project=project, target='completed')

    def test_transition_notifies_freelancer(self, project):
        self.completed_milestones(project, count=1)

        ProjectService.transition_status(user=project.client, project=project, target='completed')

        notification = Notification.objects.get(recipient=project.freelancer, title="Project Status Updated")
        assert notification.type == Notification.TYPE_SUCCESS


@pytest.mark.django_db
class TestRequestPayment:

    def test_freelancer_requests_payment(self, project):
        ProjectService.request_payment(user=project.freelancer, project=project)

        project.refresh_from_db()
        assert project.payment_request is True
        assert Notification.objects.filter(recipient=project.client, title="Payment Requested").exists()

    def test_client_cannot_request(self, project):
        with pytest.raises(Forbidden):
            ProjectService.request_payment(user=project.client, project=project)

    def test_paid_project_cannot_request(self, project):
        Project.objects.filter(pk=project.pk).update(payment_status=Project.PAYMENT_COMPLETED)
        project.refresh_from_db()

        with pytest.raises(InvalidState):
            ProjectService.request_payment(user=project.freelancer, project=project)
