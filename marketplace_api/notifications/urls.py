from django.urls import path

from . import views as my_views


urlpatterns = [
    path('notifications/', my_views.ListNotificationsAPIView.as_view(), name='notification-list'),
    path('notifications/create/', my_views.CreateNotificationAdminAPIView.as_view(), name='notification-create'),
    path('notifications/read-all/', my_views.MarkAllNotificationsReadAPIView.as_view(), name='notification-read-all'),
    path('notifications/delete-all/', my_views.DeleteAllNotificationsAPIView.as_view(), name='notification-delete-all'),
    path('notifications/<int:id>/read/', my_views.MarkNotificationReadAPIView.as_view(), name='notification-read'),
    path('notifications/<int:id>/', my_views.DeleteNotificationAPIView.as_view(), name='notification-delete'),
]
