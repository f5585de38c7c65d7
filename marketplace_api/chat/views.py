from rest_framework import views as drf_views, status
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from drf_yasg.utils import swagger_auto_schema

from projects.models import Project
from . import serializers as my_serializers
from .services import ChatService, ProjectChatService


class SendDirectMessageAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated]
    authentication_classes = [JWTAuthentication]

    @swagger_auto_schema(
        operation_summary="Send a direct message",
        request_body=my_serializers.SendDirectMessageSerializer,
        responses={201: my_serializers.DirectMessageSerializer}
    )
    def post(self, request):
        serializer = my_serializers.SendDirectMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        direct = ChatService.send(
            sender=request.user,
            receiver_id=data['receiver'],
            message=data['message'],
            message_type=data['message_type'],
            file_url=data['file_url'],
        )
        return Response({
            'success': True,
            'message': "Message sent.",
            'chat': my_serializers.DirectMessageSerializer(direct).data,
        }, status=status.HTTP_201_CREATED)


class ConversationAPIView(drf_views.APIView):
    """
    The latest 50 messages exchanged with another user, newest first.
    """
    permission_classes = [IsAuthenticated]
    authentication_classes = [JWTAuthentication]

    def get(self, request, user_id):
        messages = ChatService.list_between(user=request.user, other_id=user_id)
        return Response({
            'success': True,
            'chats': my_serializers.DirectMessageSerializer(messages, many=True).data,
        }, status=status.HTTP_200_OK)


class ConversationListAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated]
    authentication_classes = [JWTAuthentication]

    def get(self, request):
        return Response({
            'success': True,
            'conversations': ChatService.list_conversations(user=request.user),
        }, status=status.HTTP_200_OK)


class MarkMessageReadAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated]
    authentication_classes = [JWTAuthentication]

    @swagger_auto_schema(operation_summary="Mark a received message as read")
    def patch(self, request, id):
        direct = ChatService.mark_read(user=request.user, message_id=id)
        return Response({
            'success': True,
            'message': "Message marked as read.",
            'chat': my_serializers.DirectMessageSerializer(direct).data,
        }, status=status.HTTP_200_OK)


class DeleteMessageAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated]
    authentication_classes = [JWTAuthentication]

    @swagger_auto_schema(operation_summary="Delete a message on your side of the conversation")
    def delete(self, request, id):
        ChatService.delete(user=request.user, message_id=id)
        return Response({'success': True, 'message': "Message deleted."}, status=status.HTTP_200_OK)


class ProjectChatAPIView(drf_views.APIView):
    """
    GET: the latest 50 messages of the project room, newest first.
    POST: post a message to the project room.
    """
    permission_classes = [IsAuthenticated]
    authentication_classes = [JWTAuthentication]

    def get(self, request, project_id):
        project = get_object_or_404(Project, id=project_id)
        messages = ProjectChatService.history(user=request.user, project=project)
        return Response({
            'success': True,
            'chats': my_serializers.ProjectMessageSerializer(messages, many=True).data,
        }, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        operation_summary="Send a message to the project room",
        request_body=my_serializers.SendMessageSerializer,
        responses={201: my_serializers.ProjectMessageSerializer}
    )
    def post(self, request, project_id):
        project = get_object_or_404(Project, id=project_id)
        serializer = my_serializers.SendMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        project_message = ProjectChatService.send(sender=request.user, project=project, **serializer.validated_data)
        return Response({
            'success': True,
            'message': "Message sent.",
            'chat': my_serializers.ProjectMessageSerializer(project_message).data,
        }, status=status.HTTP_201_CREATED)


class MarkProjectMessageReadAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated]
    authentication_classes = [JWTAuthentication]

    def patch(self, request, project_id, id):
        project = get_object_or_404(Project, id=project_id)
        project_message = ProjectChatService.mark_read(user=request.user, project=project, message_id=id)
        return Response({
            'success': True,
            'message': "Message marked as read.",
            'chat': my_serializers.ProjectMessageSerializer(project_message).data,
        }, status=status.HTTP_200_OK)
