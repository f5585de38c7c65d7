from rest_framework import views as drf_views, generics, status
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework.permissions import IsAuthenticated
from rest_framework.filters import OrderingFilter
from django_filters.rest_framework import DjangoFilterBackend
from django.db.models import Q
from django.shortcuts import get_object_or_404
from drf_yasg.utils import swagger_auto_schema

from accounts.permissions import IsClient, IsFreelancer
from marketplace_api.exceptions import Forbidden
from projects.serializers import ProjectSerializer
from . import serializers as my_serializers
from .filters import JobFilter
from .models import Job, Proposal
from .services import JobService


class JobListCreateAPIView(generics.ListCreateAPIView):
    """
    GET: public jobs, newest first, filtered by title/skills/budget_min/budget_max/
         remote_available/category/job_type/experience_level/status.
    POST: a client posts a new job; freelancers with matching skills are notified.
    """
    serializer_class = my_serializers.JobSerializer
    permission_classes = [IsAuthenticated]
    authentication_classes = [JWTAuthentication]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = JobFilter
    ordering_fields = ['created_at', 'budget', 'deadline']
    ordering = ['-created_at', '-id']

    def get_queryset(self):
        user = self.request.user
        return Job.objects.filter(Q(visibility='public') | Q(created_by=user)).select_related('created_by')

    @swagger_auto_schema(operation_summary="Post a new job (clients only)")
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        job = JobService.create_job(user=request.user, **serializer.validated_data)

        return Response({
            'success': True,
            'message': "Job created successfully.",
            'job': my_serializers.JobSerializer(job).data,
        }, status=status.HTTP_201_CREATED)


class ListMyJobsClientAPIView(generics.ListAPIView):
    serializer_class = my_serializers.JobSerializer
    permission_classes = [IsAuthenticated, IsClient]
    authentication_classes = [JWTAuthentication]

    def get_queryset(self):
        return Job.objects.filter(created_by=self.request.user).order_by('-created_at', '-id')


class JobsByUserAPIView(generics.ListAPIView):
    serializer_class = my_serializers.JobSerializer
    permission_classes = [IsAuthenticated]
    authentication_classes = [JWTAuthentication]

    def get_queryset(self):
        return Job.objects.filter(created_by_id=self.kwargs['user_id'], visibility='public')


class RetrieveUpdateDeleteJobAPIView(generics.RetrieveUpdateDestroyAPIView):
    """
    GET: job details; the owner also receives the proposals.
    PUT/PATCH/DELETE: job owner or administrators only.
    """
    permission_classes = [IsAuthenticated]
    authentication_classes = [JWTAuthentication]
    queryset = Job.objects.select_related('created_by')
    lookup_field = 'id'

    def get_serializer_class(self):
        if self.request.method == 'GET' and self._is_manager():
            return my_serializers.JobDetailSerializer
        return my_serializers.JobSerializer

    def _is_manager(self):
        job = getattr(self, '_job', None)
        return job is not None and JobService.can_manage(self.request.user, job)

    def get_object(self):
        self._job = super().get_object()
        return self._job

    def retrieve(self, request, *args, **kwargs):
        job = self.get_object()
        serializer = self.get_serializer(job)
        return Response({'success': True, 'job': serializer.data}, status=status.HTTP_200_OK)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        job = self.get_object()
        serializer = self.get_serializer(job, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        job = JobService.update_job(user=request.user, job=job, **serializer.validated_data)

        return Response({
            'success': True,
            'message': "Job updated successfully.",
            'job': my_serializers.JobSerializer(job).data,
        }, status=status.HTTP_200_OK)

    def destroy(self, request, *args, **kwargs):
        JobService.delete_job(user=request.user, job=self.get_object())
        return Response({'success': True, 'message': "Job deleted successfully."}, status=status.HTTP_200_OK)


class JobProposalsAPIView(generics.ListCreateAPIView):
    """
    GET: proposals received on the job (job owner only).
    POST: apply to the job (freelancers only).
    """
    permission_classes = [IsAuthenticated]
    authentication_classes = [JWTAuthentication]

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return my_serializers.CreateProposalFreelancerSerializer
        return my_serializers.ProposalSerializer

    def get_job(self):
        return get_object_or_404(Job, id=self.kwargs['job_id'])

    def get_queryset(self):
        job = self.get_job()
        if job.created_by_id != self.request.user.pk:
            raise Forbidden("Only the job owner can view its proposals.")
        return job.proposals.select_related('freelancer')

    def list(self, request, *args, **kwargs):
        serializer = my_serializers.ProposalSerializer(self.get_queryset(), many=True)
        return Response({'success': True, 'proposals': serializer.data}, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        operation_summary="Apply to a job (freelancers only)",
        request_body=my_serializers.CreateProposalFreelancerSerializer,
    )
    def create(self, request, *args, **kwargs):
        job = self.get_job()
        serializer = my_serializers.CreateProposalFreelancerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        job = JobService.submit_proposal(user=request.user, job=job, **serializer.validated_data)
        proposal = job.proposals.get(freelancer=request.user)
        return Response({
            'success': True,
            'message': "Proposal submitted successfully.",
            'proposal': my_serializers.ProposalSerializer(proposal).data,
        }, status=status.HTTP_201_CREATED)


class ProposalDecisionClientAPIView(drf_views.APIView):
    """
    Accept or reject a proposal. Accepting creates the project, rejects every
    other proposal on the job and moves the job to in-progress.
    """
    permission_classes = [IsAuthenticated, IsClient]
    authentication_classes = [JWTAuthentication]

    @swagger_auto_schema(
        operation_summary="Accept or reject a proposal",
        request_body=my_serializers.ProposalDecisionSerializer,
    )
    def post(self, request, job_id, proposal_id):
        job = get_object_or_404(Job, id=job_id)
        proposal = get_object_or_404(Proposal, id=proposal_id, job=job)
        serializer = my_serializers.ProposalDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        action = serializer.validated_data['action']

        result = JobService.decide_proposal(user=request.user, job=job, proposal=proposal, action=action)

        payload = {
            'success': True,
            'message': f"Proposal {action}ed successfully.",
            'job': my_serializers.JobSerializer(result['job']).data,
            'proposal': my_serializers.ProposalSerializer(result['proposal']).data,
        }
        if result['project'] is not None:
            payload['project'] = ProjectSerializer(result['project']).data
        return Response(payload, status=status.HTTP_200_OK)


class AppliedJobsFreelancerAPIView(generics.ListAPIView):
    serializer_class = my_serializers.AppliedJobSerializer
    permission_classes = [IsAuthenticated, IsFreelancer]
    authentication_classes = [JWTAuthentication]

    def get_queryset(self):
        return Proposal.objects.filter(freelancer=self.request.user).select_related('job').order_by('-created_at')


class WithdrawProposalFreelancerAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated, IsFreelancer]
    authentication_classes = [JWTAuthentication]

    @swagger_auto_schema(operation_summary="Withdraw one of your proposals")
    def delete(self, request, id):
        proposal = get_object_or_404(Proposal, id=id)
        JobService.withdraw_proposal(user=request.user, proposal=proposal)
        return Response({'success': True, 'message': "Proposal withdrawn."}, status=status.HTTP_200_OK)


class ClientApplicationsAPIView(generics.ListAPIView):
    """
    Every proposal received on the current client's jobs, newest first.
    """
    serializer_class = my_serializers.ProposalSerializer
    permission_classes = [IsAuthenticated, IsClient]
    authentication_classes = [JWTAuthentication]
    filter_backends = [OrderingFilter]
    ordering_fields = ['created_at']
    ordering = ['-created_at']

    def get_queryset(self):
        return Proposal.objects.filter(job__created_by=self.request.user).select_related('freelancer', 'job')
