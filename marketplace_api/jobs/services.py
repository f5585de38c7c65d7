import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError
from django.utils import timezone

from marketplace_api.exceptions import Conflict, Forbidden, InvalidInput, InvalidState, NotFound
from notifications.services import notify
from projects.models import Project, ProjectStatusChange
from .models import Job, Proposal

User = get_user_model()
logger = logging.getLogger(__name__)


def skills_match(freelancer_skills, required_skills):
    """True when any required skill appears, case-insensitively, inside one of the freelancer's skills."""
    wanted = [s.lower() for s in required_skills if s]
    have = [s.lower() for s in freelancer_skills or [] if isinstance(s, str)]
    return any(w in h for w in wanted for h in have)


class JobService:

    @staticmethod
    def create_job(*, user, **fields):
        if not user.is_client:
            raise Forbidden("Only clients can post jobs.")

        job = Job.objects.create(created_by=user, **fields)
        logger.info(f"Job {job.id} posted by user {user.id}")

        JobService.notify_matching_freelancers(job)
        return job

    @staticmethod
    def notify_matching_freelancers(job):
        if not job.skills_required:
            return 0

        recipients = [
            freelancer_id
            for freelancer_id, skills in User.objects.freelancers().filter(is_active=True).values_list('id', 'skills')
            if skills_match(skills, job.skills_required)
        ]
        for freelancer_id in recipients:
            notify(
                recipient_id=freelancer_id,
                title="New Job Posted",
                message=f"A new job matching your skills was posted: {job.title}",
                type='info',
                link=f"/job/{job.id}",
            )
        return len(recipients)

    @staticmethod
    def can_manage(user, job):
        return job.created_by_id == user.pk or user.is_platform_admin

    @staticmethod
    def update_job(*, user, job, **fields):
        if not JobService.can_manage(user, job):
            raise Forbidden("You can only edit your own jobs.")

        for attr, value in fields.items():
            setattr(job, attr, value)
        job.save()
        return job

    @staticmethod
    def delete_job(*, user, job):
        if not JobService.can_manage(user, job):
            raise Forbidden("You can only delete your own jobs.")

        try:
            job.delete()
        except ProtectedError:
            raise InvalidState("A job that already has a project cannot be deleted.")
        logger.info(f"Job {job.pk} deleted by user {user.id}")

    @staticmethod
    def submit_proposal(*, user, job, proposed_amount, proposed_timeline, proposal_message):
        if not user.is_freelancer:
            raise Forbidden("Only freelancers can apply to jobs.")

        if job.status != Job.STATUS_OPEN:
            raise Conflict("This job is not open for proposals.")

        if job.proposals.filter(freelancer=user).exists():
            raise Conflict("You have already applied to this job.")

        if job.minimum_bid_amount is not None and proposed_amount < job.minimum_bid_amount:
            raise InvalidInput(f"The proposed amount must be at least {job.minimum_bid_amount}.")

        try:
            with transaction.atomic():
                proposal = Proposal.objects.create(
                    job=job,
                    freelancer=user,
                    proposed_amount=proposed_amount,
                    proposed_timeline=proposed_timeline,
                    proposal_message=proposal_message,
                )
        except IntegrityError:
            raise Conflict("You have already applied to this job.")

        logger.info(f"Freelancer {user.id} applied to job {job.id}")

        notify(
            recipient_id=job.created_by_id,
            title="New Job Application",
            message=f"{user.name} applied to your job: {job.title}",
            type='info',
            link=f"/job/{job.id}",
        )
        return job

    @staticmethod
    def withdraw_proposal(*, user, proposal):
        if proposal.freelancer_id != user.pk:
            raise Forbidden("You can only withdraw your own proposals.")

        if proposal.status == Proposal.STATUS_ACCEPTED:
            raise InvalidState("An accepted proposal cannot be withdrawn.")

        proposal.delete()

    @staticmethod
    def decide_proposal(*, user, job, proposal, action):
        if job.created_by_id != user.pk:
            raise Forbidden("Only the job owner can decide on proposals.")

        if proposal.job_id != job.pk:
            raise NotFound("Proposal not found for this job.")

        if action == 'accept':
            return JobService._accept(job=job, proposal=proposal)
        if action == 'reject':
            return JobService._reject(job=job, proposal=proposal)
        raise InvalidInput("Action must be either 'accept' or 'reject'.")

    @staticmethod
    def _accept(*, job, proposal):
        with transaction.atomic():
            if Project.objects.filter(job=job).exists():
                raise Conflict("A project for this job already exists.")

            # Claiming the job is the serialisation point between concurrent accepts.
            claimed = Job.objects.filter(pk=job.pk, status=Job.STATUS_OPEN).update(
                status=Job.STATUS_IN_PROGRESS,
                updated_at=timezone.now(),
            )
            if not claimed:
                raise Conflict("This job is no longer open for proposals.")

            now = timezone.now()
            Proposal.objects.filter(job=job).exclude(pk=proposal.pk).update(
                status=Proposal.STATUS_REJECTED, updated_at=now,
            )
            Proposal.objects.filter(pk=proposal.pk).update(status=Proposal.STATUS_ACCEPTED, updated_at=now)

            job.refresh_from_db()
            proposal.refresh_from_db()
            freelancer = proposal.freelancer
            client = job.created_by

            try:
                with transaction.atomic():
                    project = Project.objects.create(
                        job=job,
                        client=client,
                        freelancer=freelancer,
                        job_title=job.title,
                        job_description=job.description,
                        job_budget=job.budget,
                        job_category=job.category,
                        job_type=job.job_type,
                        freelancer_name=freelancer.name,
                        freelancer_email=freelancer.email,
                        freelancer_profile_pic=freelancer.profile_pic,
                        client_name=client.name,
                        client_email=client.email,
                        client_profile_pic=client.profile_pic,
                    )
            except IntegrityError:
                raise Conflict("A project for this job already exists.")

            ProjectStatusChange.objects.create(project=project, status=project.status, changed_by=client)

        logger.info(f"Proposal {proposal.id} accepted, project {project.id} created for job {job.id}")

        notify(
            recipient_id=freelancer.id,
            title="Proposal Accepted",
            message=f"Your proposal for '{job.title}' has been accepted.",
            type='success',
            link=f"/projects/{project.id}",
        )
        return {'job': job, 'proposal': proposal, 'project': project}

    @staticmethod
    def _reject(*, job, proposal):
        with transaction.atomic():
            updated = Proposal.objects.filter(pk=proposal.pk, status=Proposal.STATUS_PENDING).update(
                status=Proposal.STATUS_REJECTED,
                updated_at=timezone.now(),
            )
            if not updated:
                raise InvalidState("Only pending proposals can be rejected.")

        proposal.refresh_from_db()
        logger.info(f"Proposal {proposal.id} on job {job.id} rejected")

        notify(
            recipient_id=proposal.freelancer_id,
            title="Proposal Rejected",
            message=f"Your proposal for '{job.title}' has been rejected.",
            type='error',
            link=f"/job/{job.id}",
        )
        return {'job': job, 'proposal': proposal, 'project': None}
