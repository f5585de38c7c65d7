from django.urls import path

from . import views as my_views


urlpatterns = [
    path('projects/', my_views.ListMyProjectsAPIView.as_view(), name='project-list'),
    path('projects/<int:project_id>/', my_views.RetrieveProjectAPIView.as_view(), name='project-detail'),
    path('projects/<int:project_id>/status/', my_views.UpdateProjectStatusClientAPIView.as_view(),
         name='project-status'),
    path('projects/<int:project_id>/request-payment/', my_views.RequestPaymentFreelancerAPIView.as_view(),
         name='project-request-payment'),
    path('projects/<int:project_id>/milestones/', my_views.MilestoneListCreateAPIView.as_view(),
         name='milestone-list-create'),
    path('projects/<int:project_id>/milestones/<int:milestone_id>/', my_views.MilestoneUpdateDeleteAPIView.as_view(),
         name='milestone-update-delete'),
]
