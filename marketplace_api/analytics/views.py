from rest_framework import views as drf_views, generics, status
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework.permissions import IsAuthenticated
from rest_framework.filters import SearchFilter, OrderingFilter
from django_filters.rest_framework import DjangoFilterBackend
from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from accounts.permissions import IsPlatformAdmin
from accounts.serializers import UserListSerializer
from accounts.services import AccountService
from jobs.models import Job
from jobs.serializers import JobSerializer
from jobs.services import JobService
from .pagination import AdminListPagination
from .services import AnalyticsService

User = get_user_model()


class AnalyticsAPIView(drf_views.APIView):
    """
    Platform figures for the current month, or for ?from=YYYY-MM-DD&to=YYYY-MM-DD.
    """
    permission_classes = [IsAuthenticated, IsPlatformAdmin]
    authentication_classes = [JWTAuthentication]

    @swagger_auto_schema(
        operation_summary="Platform analytics (Admin only)",
        manual_parameters=[
            openapi.Parameter('from', openapi.IN_QUERY, type=openapi.TYPE_STRING, format=openapi.FORMAT_DATE),
            openapi.Parameter('to', openapi.IN_QUERY, type=openapi.TYPE_STRING, format=openapi.FORMAT_DATE),
        ]
    )
    def get(self, request):
        date_from = request.query_params.get('from')
        date_to = request.query_params.get('to')
        if date_from or date_to:
            data = AnalyticsService.timeframe(date_from, date_to)
        else:
            data = AnalyticsService.this_month()

        return Response({'success': True, 'analytics': data}, status=status.HTTP_200_OK)


class AdminUserListAPIView(generics.ListAPIView):
    """
    Allows admin users to list all users with filtering and searching.

    Query Parameters:
        - role, is_active (filter)
        - search (email, first_name, last_name)
        - ordering (id, date_joined, last_name)
    """
    serializer_class = UserListSerializer
    permission_classes = [IsAuthenticated, IsPlatformAdmin]
    authentication_classes = [JWTAuthentication]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_fields = ['role', 'is_active']
    search_fields = ['email', 'first_name', 'last_name']
    ordering_fields = ['id', 'date_joined', 'last_name']
    ordering = ['-date_joined']
    pagination_class = AdminListPagination
    queryset = User.objects.all()


class AdminUserDeleteAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated, IsPlatformAdmin]
    authentication_classes = [JWTAuthentication]

    @swagger_auto_schema(operation_summary="Delete a user (Admin only)")
    def delete(self, request, id):
        user = get_object_or_404(User, id=id)
        AccountService.delete_user(user=user)
        return Response({'success': True, 'message': "User deleted."}, status=status.HTTP_200_OK)


class AdminJobListAPIView(generics.ListAPIView):
    serializer_class = JobSerializer
    permission_classes = [IsAuthenticated, IsPlatformAdmin]
    authentication_classes = [JWTAuthentication]
    filter_backends = [DjangoFilterBackend, SearchFilter]
    filterset_fields = ['status', 'visibility']
    search_fields = ['title', 'created_by__email']
    pagination_class = AdminListPagination
    queryset = Job.objects.select_related('created_by').order_by('-created_at', '-id')


class AdminJobDeleteAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated, IsPlatformAdmin]
    authentication_classes = [JWTAuthentication]

    @swagger_auto_schema(operation_summary="Delete a job (Admin only)")
    def delete(self, request, id):
        job = get_object_or_404(Job, id=id)
        JobService.delete_job(user=request.user, job=job)
        return Response({'success': True, 'message': "Job deleted."}, status=status.HTTP_200_OK)
