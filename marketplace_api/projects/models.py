from django.db import models
from django.db.models import Q
from django.contrib.auth import get_user_model
from auditlog.registry import auditlog

from jobs.models import Job

User = get_user_model()


def calculate_progress(completed, total):
    """Integer percentage of completed milestones, rounded half up. 0 when there are none."""
    if total <= 0:
        return 0
    return (200 * completed + total) // (2 * total)


class ProjectQuerySet(models.QuerySet):

    def for_participant(self, user):
        return self.filter(Q(client=user) | Q(freelancer=user))

    def active_for(self, user):
        """In-progress projects on the side of ``user``'s role; other roles have none."""
        if user.role == User.ROLE_FREELANCER:
            side = Q(freelancer=user)
        elif user.role == User.ROLE_CLIENT:
            side = Q(client=user)
        else:
            return self.none()
        return self.filter(side, status=Project.STATUS_IN_PROGRESS)


class Project(models.Model):
    """
    Work agreed on an accepted proposal. Job and party details are copied at
    creation so the project keeps describing what was agreed on even if the
    job or the profiles are edited later.
    """
    STATUS_IN_PROGRESS = 'in-progress'
    STATUS_COMPLETED = 'completed'
    STATUS_CLOSED = 'closed'
    STATUS_CHOICES = (
        (STATUS_IN_PROGRESS, 'In progress'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CLOSED, 'Closed'),
    )
    PAYMENT_PENDING = 'pending'
    PAYMENT_COMPLETED = 'completed'
    PAYMENT_STATUS_CHOICES = (
        (PAYMENT_PENDING, 'Pending'),
        (PAYMENT_COMPLETED, 'Completed'),
    )

    job = models.OneToOneField(Job, on_delete=models.PROTECT, related_name='project')
    client = models.ForeignKey(User, on_delete=models.PROTECT, related_name='client_projects')
    freelancer = models.ForeignKey(User, on_delete=models.PROTECT, related_name='freelancer_projects')

    job_title = models.CharField(max_length=255)
    job_description = models.TextField()
    job_budget = models.DecimalField(max_digits=12, decimal_places=2)
    job_category = models.CharField(max_length=100)
    job_type = models.CharField(max_length=20)

    freelancer_name = models.CharField(max_length=255)
    freelancer_email = models.EmailField()
    freelancer_profile_pic = models.URLField(max_length=500, blank=True)
    client_name = models.CharField(max_length=255)
    client_email = models.EmailField()
    client_profile_pic = models.URLField(max_length=500, blank=True)

    progress = models.PositiveSmallIntegerField(default=0)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_IN_PROGRESS)
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default=PAYMENT_PENDING)
    payment_request = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProjectQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.job_title} ({self.client_email} -> {self.freelancer_email})"

    def save(self, *args, **kwargs):
        if self.pk:
            self.progress = self.compute_progress()
            update_fields = kwargs.get('update_fields')
            if update_fields is not None and 'progress' not in update_fields:
                kwargs['update_fields'] = list(update_fields) + ['progress']
        super().save(*args, **kwargs)

    def compute_progress(self):
        total = self.milestones.count()
        completed = self.milestones.filter(status=Milestone.STATUS_COMPLETED).count()
        return calculate_progress(completed, total)

    def refresh_progress(self):
        self.save(update_fields=['progress', 'updated_at'])
        return self.progress

    def is_participant(self, user):
        return user.pk in (self.client_id, self.freelancer_id)


class Milestone(models.Model):
    STATUS_PENDING = 'pending'
    STATUS_IN_PROGRESS = 'in-progress'
    STATUS_COMPLETED = 'completed'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_IN_PROGRESS, 'In progress'),
        (STATUS_COMPLETED, 'Completed'),
    )

    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='milestones')
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.title} ({self.status})"


class ProjectStatusChange(models.Model):
    """Append-only trail of project status transitions."""
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='status_history')
    status = models.CharField(max_length=20, choices=Project.STATUS_CHOICES)
    changed_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    changed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['changed_at', 'id']

    def __str__(self):
        return f"{self.project_id}: {self.status} at {self.changed_at}"


auditlog.register(Project)
