from rest_framework.permissions import BasePermission


class IsProjectParticipant(BasePermission):
    """
    Allows access only to the client or the assigned freelancer of the project.
    """
    message = "You are not a participant of this project."

    def has_object_permission(self, request, view, obj):
        project = getattr(obj, 'project', obj)
        return project.is_participant(request.user)
