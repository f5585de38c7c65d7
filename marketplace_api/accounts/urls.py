from rest_framework_simplejwt.views import TokenRefreshView
from django.urls import path


from . import views as my_views


urlpatterns = [
    path('account/token/', my_views.CustomTokenObtainPairView.as_view(), name='token-obtain-pair'),
    path('account/token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
    path('account/token/blacklist/', my_views.LogoutAPIView.as_view(), name='logout'),
    path('account/register/', my_views.RegistrationAPIView.as_view(), name='register'),
    path('account/users/me/', my_views.UserProfileRetrieveUpdateAPIView.as_view(), name='profile-retrieve-update'),
    path('account/users/me/delete/', my_views.DeleteOwnAccountAPIView.as_view(), name='delete-account'),
    path('account/users/change-password/', my_views.ChangePasswordAPIView.as_view(), name='change-password'),
    path('account/users/me/skills/', my_views.SkillsAPIView.as_view(), name='skills'),
    path('account/users/me/skills/<str:skill>/', my_views.DeleteSkillAPIView.as_view(), name='skill-delete'),
    path('account/users/me/portfolio/', my_views.PortfolioCreateAPIView.as_view(), name='portfolio-create'),
    path('account/users/me/portfolio/<int:id>/', my_views.PortfolioDeleteAPIView.as_view(), name='portfolio-delete'),
    path('account/users/me/withdraw/', my_views.WithdrawAPIView.as_view(), name='withdraw'),
    path('account/freelancers/', my_views.FreelancerListAPIView.as_view(), name='freelancer-list'),
    path('account/clients/', my_views.ClientListAPIView.as_view(), name='client-list'),
    path('account/users/<int:id>/', my_views.UserDetailAPIView.as_view(), name='user-detail'),
    path('account/users/<int:id>/reviews/', my_views.ReviewUserAPIView.as_view(), name='user-review'),
]
