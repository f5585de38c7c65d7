from django.urls import path

from . import views as my_views


urlpatterns = [
    path('admin-panel/analytics/', my_views.AnalyticsAPIView.as_view(), name='admin-analytics'),
    path('admin-panel/users/', my_views.AdminUserListAPIView.as_view(), name='admin-user-list'),
    path('admin-panel/users/<int:id>/', my_views.AdminUserDeleteAPIView.as_view(), name='admin-user-delete'),
    path('admin-panel/jobs/', my_views.AdminJobListAPIView.as_view(), name='admin-job-list'),
    path('admin-panel/jobs/<int:id>/', my_views.AdminJobDeleteAPIView.as_view(), name='admin-job-delete'),
]
