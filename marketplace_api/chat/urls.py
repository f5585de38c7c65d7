from django.urls import path

from . import views as my_views


urlpatterns = [
    path('chats/', my_views.SendDirectMessageAPIView.as_view(), name='chat-send'),
    path('chats/conversations/', my_views.ConversationListAPIView.as_view(), name='chat-conversations'),
    path('chats/users/<int:user_id>/', my_views.ConversationAPIView.as_view(), name='chat-between'),
    path('chats/<int:id>/read/', my_views.MarkMessageReadAPIView.as_view(), name='chat-read'),
    path('chats/<int:id>/', my_views.DeleteMessageAPIView.as_view(), name='chat-delete'),
    path('project-chats/<int:project_id>/', my_views.ProjectChatAPIView.as_view(), name='project-chat'),
    path('project-chats/<int:project_id>/<int:id>/read/', my_views.MarkProjectMessageReadAPIView.as_view(),
         name='project-chat-read'),
]
