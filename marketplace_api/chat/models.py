from django.db import models
from django.contrib.auth import get_user_model

from projects.models import Project

User = get_user_model()


class BaseMessage(models.Model):
    TYPE_TEXT = 'text'
    TYPE_IMAGE = 'image'
    TYPE_FILE = 'file'
    MESSAGE_TYPE_CHOICES = (
        (TYPE_TEXT, 'Text'),
        (TYPE_IMAGE, 'Image'),
        (TYPE_FILE, 'File'),
    )

    message = models.TextField(blank=True)
    message_type = models.CharField(max_length=10, choices=MESSAGE_TYPE_CHOICES, default=TYPE_TEXT)
    file_url = models.URLField(max_length=500, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ['-created_at', '-id']


class DirectMessage(BaseMessage):
    sender = models.ForeignKey(User, on_delete=models.CASCADE, related_name='sent_messages')
    receiver = models.ForeignKey(User, on_delete=models.CASCADE, related_name='received_messages')
    deleted_by_sender = models.BooleanField(default=False)
    deleted_by_receiver = models.BooleanField(default=False)

    class Meta(BaseMessage.Meta):
        indexes = [
            models.Index(fields=['sender', 'receiver', '-created_at']),
        ]

    def __str__(self):
        return f"{self.sender} -> {self.receiver}: {self.message[:30]}"

    def is_participant(self, user):
        return user.pk in (self.sender_id, self.receiver_id)


class ProjectMessage(BaseMessage):
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='messages')
    sender = models.ForeignKey(User, on_delete=models.CASCADE, related_name='sent_project_messages')

    def __str__(self):
        return f"[{self.project_id}] {self.sender}: {self.message[:30]}"
