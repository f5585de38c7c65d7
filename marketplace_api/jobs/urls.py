from django.urls import path

from . import views as my_views


urlpatterns = [
    path('jobs/', my_views.JobListCreateAPIView.as_view(), name='job-list-create'),
    path('jobs/mine/', my_views.ListMyJobsClientAPIView.as_view(), name='job-mine'),
    path('jobs/applications/', my_views.ClientApplicationsAPIView.as_view(), name='job-applications'),
    path('jobs/proposals/applied/', my_views.AppliedJobsFreelancerAPIView.as_view(), name='proposal-applied'),
    path('jobs/proposals/<int:id>/', my_views.WithdrawProposalFreelancerAPIView.as_view(), name='proposal-withdraw'),
    path('jobs/users/<int:user_id>/', my_views.JobsByUserAPIView.as_view(), name='job-by-user'),
    path('jobs/<int:id>/', my_views.RetrieveUpdateDeleteJobAPIView.as_view(), name='job-detail'),
    path('jobs/<int:job_id>/proposals/', my_views.JobProposalsAPIView.as_view(), name='job-proposals'),
    path('jobs/<int:job_id>/proposals/<int:proposal_id>/decision/', my_views.ProposalDecisionClientAPIView.as_view(),
         name='proposal-decision'),
]
