import logging

from django.db import transaction
from django.utils import timezone

from jobs.models import Job
from marketplace_api.exceptions import Forbidden, InvalidInput, InvalidState
from notifications.services import notify
from .models import Milestone, Project, ProjectStatusChange

logger = logging.getLogger(__name__)

MILESTONE_STATUSES = {choice for choice, _ in Milestone.STATUS_CHOICES}
PROJECT_STATUSES = {choice for choice, _ in Project.STATUS_CHOICES}

# target status -> (required current status, job status to propagate)
STATUS_TRANSITIONS = {
    Project.STATUS_COMPLETED: (Project.STATUS_IN_PROGRESS, Job.STATUS_COMPLETED),
    Project.STATUS_CLOSED: (Project.STATUS_COMPLETED, Job.STATUS_CLOSED),
}


class ProjectService:

    @staticmethod
    def _require_client(user, project, action):
        if project.client_id != user.pk:
            raise Forbidden(f"Only the project client can {action}.")

    @staticmethod
    def _require_participant(user, project):
        if not project.is_participant(user):
            raise Forbidden("You are not a participant of this project.")

    @staticmethod
    def _require_in_progress(project):
        if project.status != Project.STATUS_IN_PROGRESS:
            raise InvalidState("Milestones can only be changed while the project is in progress.")

    @staticmethod
    def add_milestone(*, user, project, title, description=''):
        ProjectService._require_client(user, project, "add milestones")
        ProjectService._require_in_progress(project)

        with transaction.atomic():
            milestone = Milestone.objects.create(project=project, title=title, description=description)
            project.refresh_progress()

        notify(
            recipient_id=project.freelancer_id,
            title="New Milestone Added",
            message=f"A new milestone '{title}' was added to project '{project.job_title}'.",
            type='info',
            link=f"/projects/{project.id}",
        )
        return milestone

    @staticmethod
    def update_milestone(*, user, project, milestone, **fields):
        ProjectService._require_participant(user, project)
        ProjectService._require_in_progress(project)

        new_status = fields.get('status')
        if new_status is not None and new_status not in MILESTONE_STATUSES:
            raise InvalidInput(f"Invalid milestone status '{new_status}'.")

        status_changed = new_status is not None and new_status != milestone.status

        with transaction.atomic():
            for attr in ('title', 'description', 'status'):
                if attr in fields:
                    setattr(milestone, attr, fields[attr])
            milestone.save()
            project.refresh_progress()

        if status_changed and user.pk == project.freelancer_id:
            notify(
                recipient_id=project.client_id,
                title="Milestone Updated",
                message=f"Milestone '{milestone.title}' is now {milestone.status}. "
                        f"Project progress: {project.progress}%.",
                type='info',
                link=f"/projects/{project.id}",
            )
        return milestone

    @staticmethod
    def delete_milestone(*, user, project, milestone):
        ProjectService._require_client(user, project, "delete milestones")
        ProjectService._require_in_progress(project)

        with transaction.atomic():
            milestone.delete()
            project.refresh_progress()
        return project

    @staticmethod
    def transition_status(*, user, project, target):
        """
        Move the project forward: in-progress -> completed -> closed. Both steps
        require every milestone to be completed, and the job follows along.
        """
        ProjectService._require_client(user, project, "change the project status")

        if target not in PROJECT_STATUSES:
            raise InvalidInput(f"Invalid project status '{target}'.")

        if target not in STATUS_TRANSITIONS:
            raise InvalidState(f"A project cannot be moved back to '{target}'.")

        required_status, job_status = STATUS_TRANSITIONS[target]

        with transaction.atomic():
            project = Project.objects.select_for_update().get(pk=project.pk)

            if project.status != required_status:
                raise InvalidState(f"Only a {required_status} project can be marked as {target}.")

            progress = project.compute_progress()
            if progress != 100:
                raise InvalidState(f"Project progress must be 100% to mark it as {target}.")

            project.status = target
            project.save(update_fields=['status', 'updated_at'])
            Job.objects.filter(pk=project.job_id).update(status=job_status, updated_at=timezone.now())
            ProjectStatusChange.objects.create(project=project, status=target, changed_by=user)

        logger.info(f"Project {project.id} moved to {target}")

        notify(
            recipient_id=project.freelancer_id,
            title="Project Status Updated",
            message=f"Project '{project.job_title}' is now {target}.",
            type='success',
            link=f"/projects/{project.id}",
        )
        return project

    @staticmethod
    def request_payment(*, user, project):
        if project.freelancer_id != user.pk:
            raise Forbidden("Only the assigned freelancer can request payment.")

        if project.payment_status == Project.PAYMENT_COMPLETED:
            raise InvalidState("This project has already been paid.")

        project.payment_request = True
        project.save(update_fields=['payment_request', 'updated_at'])

        notify(
            recipient_id=project.client_id,
            title="Payment Requested",
            message=f"{project.freelancer_name} requested payment for project '{project.job_title}'.",
            type='info',
            link=f"/projects/{project.id}",
        )
        return project
