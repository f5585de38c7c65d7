from rest_framework import views as drf_views, generics, status
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from drf_yasg.utils import swagger_auto_schema

from accounts.permissions import IsClient, IsFreelancer
from . import serializers as my_serializers
from .models import Milestone, Project
from .permissions import IsProjectParticipant
from .services import ProjectService


class ProjectLookupMixin:
    """Resolves ``project_id`` from the URL and enforces participant access."""

    def get_project(self):
        project = get_object_or_404(Project, id=self.kwargs['project_id'])
        self.check_object_permissions(self.request, project)
        return project


class ListMyProjectsAPIView(generics.ListAPIView):
    """
    Projects where the current user is the client or the freelancer.
    ?status= narrows the list; ?active=true returns in-progress projects on the user's side only.
    """
    serializer_class = my_serializers.ProjectSerializer
    permission_classes = [IsAuthenticated]
    authentication_classes = [JWTAuthentication]

    def get_queryset(self):
        user = self.request.user
        if self.request.query_params.get('active') == 'true':
            queryset = Project.objects.active_for(user)
        else:
            queryset = Project.objects.for_participant(user)

        project_status = self.request.query_params.get('status')
        if project_status:
            queryset = queryset.filter(status=project_status)
        return queryset.prefetch_related('milestones', 'status_history')


class RetrieveProjectAPIView(ProjectLookupMixin, drf_views.APIView):
    permission_classes = [IsAuthenticated, IsProjectParticipant]
    authentication_classes = [JWTAuthentication]

    def get(self, request, project_id):
        project = self.get_project()
        return Response({
            'success': True,
            'project': my_serializers.ProjectSerializer(project).data,
        }, status=status.HTTP_200_OK)


class UpdateProjectStatusClientAPIView(ProjectLookupMixin, drf_views.APIView):
    permission_classes = [IsAuthenticated, IsClient, IsProjectParticipant]
    authentication_classes = [JWTAuthentication]

    @swagger_auto_schema(
        operation_summary="Mark a project as completed or closed",
        request_body=my_serializers.ProjectStatusSerializer,
    )
    def patch(self, request, project_id):
        project = self.get_project()
        serializer = my_serializers.ProjectStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        project = ProjectService.transition_status(
            user=request.user, project=project, target=serializer.validated_data['status'],
        )
        return Response({
            'success': True,
            'message': f"Project marked as {project.status}.",
            'project': my_serializers.ProjectSerializer(project).data,
        }, status=status.HTTP_200_OK)


class RequestPaymentFreelancerAPIView(ProjectLookupMixin, drf_views.APIView):
    permission_classes = [IsAuthenticated, IsFreelancer, IsProjectParticipant]
    authentication_classes = [JWTAuthentication]

    @swagger_auto_schema(operation_summary="Ask the client to pay for the project")
    def post(self, request, project_id):
        project = ProjectService.request_payment(user=request.user, project=self.get_project())
        return Response({
            'success': True,
            'message': "Payment requested.",
            'project': my_serializers.ProjectSerializer(project).data,
        }, status=status.HTTP_200_OK)


class MilestoneListCreateAPIView(ProjectLookupMixin, generics.ListCreateAPIView):
    """
    GET: milestones of the project (participants).
    POST: add a milestone (project client only).
    """
    serializer_class = my_serializers.MilestoneSerializer
    permission_classes = [IsAuthenticated, IsProjectParticipant]
    authentication_classes = [JWTAuthentication]

    def get_queryset(self):
        return self.get_project().milestones.all()

    def create(self, request, *args, **kwargs):
        project = self.get_project()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        milestone = ProjectService.add_milestone(user=request.user, project=project, **serializer.validated_data)
        project.refresh_from_db()
        return Response({
            'success': True,
            'message': "Milestone added.",
            'milestone': my_serializers.MilestoneSerializer(milestone).data,
            'progress': project.progress,
        }, status=status.HTTP_201_CREATED)


class MilestoneUpdateDeleteAPIView(ProjectLookupMixin, drf_views.APIView):
    permission_classes = [IsAuthenticated, IsProjectParticipant]
    authentication_classes = [JWTAuthentication]

    def get_milestone(self, project):
        return get_object_or_404(Milestone, id=self.kwargs['milestone_id'], project=project)

    @swagger_auto_schema(
        operation_summary="Update a milestone",
        request_body=my_serializers.UpdateMilestoneSerializer,
    )
    def patch(self, request, project_id, milestone_id):
        project = self.get_project()
        milestone = self.get_milestone(project)
        serializer = my_serializers.UpdateMilestoneSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        milestone = ProjectService.update_milestone(
            user=request.user, project=project, milestone=milestone, **serializer.validated_data,
        )
        project.refresh_from_db()
        return Response({
            'success': True,
            'message': "Milestone updated.",
            'milestone': my_serializers.MilestoneSerializer(milestone).data,
            'progress': project.progress,
        }, status=status.HTTP_200_OK)

    @swagger_auto_schema(operation_summary="Delete a milestone")
    def delete(self, request, project_id, milestone_id):
        project = self.get_project()
        milestone = self.get_milestone(project)
        project = ProjectService.delete_milestone(user=request.user, project=project, milestone=milestone)
        return Response({
            'success': True,
            'message': "Milestone deleted.",
            'progress': project.progress,
        }, status=status.HTTP_200_OK)
