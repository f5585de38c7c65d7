from rest_framework import views as drf_views, generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication
from drf_yasg.utils import swagger_auto_schema

from accounts.permissions import IsPlatformAdmin
from marketplace_api.exceptions import Unexpected
from . import serializers as my_serializers
from .services import NotificationService


class ListNotificationsAPIView(generics.ListAPIView):
    """
    Notifications of the current user, newest first.
    """
    serializer_class = my_serializers.NotificationSerializer
    permission_classes = [IsAuthenticated]
    authentication_classes = [JWTAuthentication]

    def get_queryset(self):
        return NotificationService.list_for(self.request.user)

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response({
            'success': True,
            'notifications': serializer.data,
        }, status=status.HTTP_200_OK)


class CreateNotificationAdminAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated, IsPlatformAdmin]
    authentication_classes = [JWTAuthentication]

    @swagger_auto_schema(
        operation_summary="Send a notification to a user (Admin only)",
        request_body=my_serializers.CreateNotificationSerializer,
        responses={201: my_serializers.NotificationSerializer}
    )
    def post(self, request):
        serializer = my_serializers.CreateNotificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        notification = NotificationService.notify(
            recipient_id=data['recipient'].id,
            title=data['title'],
            message=data['message'],
            type=data['type'],
            link=data.get('link', ''),
        )
        if notification is None:
            raise Unexpected("Notification could not be stored.")

        return Response({
            'success': True,
            'message': "Notification created.",
            'notification': my_serializers.NotificationSerializer(notification).data,
        }, status=status.HTTP_201_CREATED)


class MarkNotificationReadAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated]
    authentication_classes = [JWTAuthentication]

    @swagger_auto_schema(operation_summary="Mark a notification as read")
    def patch(self, request, id):
        notification = NotificationService.mark_read(user=request.user, notification_id=id)
        return Response({
            'success': True,
            'message': "Notification marked as read.",
            'notification': my_serializers.NotificationSerializer(notification).data,
        }, status=status.HTTP_200_OK)


class MarkAllNotificationsReadAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated]
    authentication_classes = [JWTAuthentication]

    @swagger_auto_schema(operation_summary="Mark every notification of the current user as read")
    def patch(self, request):
        updated = NotificationService.mark_all_read(user=request.user)
        return Response({
            'success': True,
            'message': "All notifications marked as read.",
            'updated': updated,
        }, status=status.HTTP_200_OK)


class DeleteNotificationAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated]
    authentication_classes = [JWTAuthentication]

    @swagger_auto_schema(operation_summary="Delete a notification")
    def delete(self, request, id):
        NotificationService.delete(user=request.user, notification_id=id)
        return Response({
            'success': True,
            'message': "Notification deleted.",
        }, status=status.HTTP_200_OK)


class DeleteAllNotificationsAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated]
    authentication_classes = [JWTAuthentication]

    @swagger_auto_schema(operation_summary="Delete every notification of the current user")
    def delete(self, request):
        deleted = NotificationService.delete_all(user=request.user)
        return Response({
            'success': True,
            'message': "All notifications deleted.",
            'deleted': deleted,
        }, status=status.HTTP_200_OK)
