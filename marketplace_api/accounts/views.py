from rest_framework_simplejwt import views as jwt_views, tokens, authentication
from rest_framework import views as drf_views, generics, permissions, status
from django.db import transaction
from django.shortcuts import get_object_or_404
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.filters import SearchFilter, OrderingFilter
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from . import serializers as my_serializers
from .models import CustomUser
from .permissions import IsFreelancer
from .services import AccountService


class CustomTokenObtainPairView(jwt_views.TokenObtainPairView):
    serializer_class = my_serializers.CustomTokenObtainPairSerializer
    throttle_classes = [AnonRateThrottle]


class RegistrationAPIView(generics.CreateAPIView):
    """
    Handles new user registration.

    Accepts a POST request with user details:
        - email, password, confirm_password, first_name, last_name, role (required)
        - phone_number, location, country (optional)
    Creates a new user, and returns the user's data along with JWT access and
    refresh tokens.
    """
    serializer_class = my_serializers.RegistrationSerializer
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @swagger_auto_schema(
        operation_summary="Register a new user",
        responses={
            201: my_serializers.RegistrationSerializer,
            400: "Invalid input"
        }
    )
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            user = serializer.save()
            refresh = tokens.RefreshToken.for_user(user)

        return Response(
            {
                'success': True,
                'message': "Registration successful.",
                'user': serializer.data,
                'refresh': str(refresh),
                'access': str(refresh.access_token)
            },
            status=status.HTTP_201_CREATED
        )


class UserProfileRetrieveUpdateAPIView(generics.RetrieveUpdateAPIView):
    """
    Allows authenticated users to retrieve and update their own profile.

    GET: Returns the profile of the currently authenticated user.
    PUT/PATCH: Updates first_name, last_name, phone_number, location, country, bio, profile_pic.
    """
    serializer_class = my_serializers.UserProfileSerializer
    authentication_classes = [authentication.JWTAuthentication]
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(operation_summary="Retrieve user profile")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @swagger_auto_schema(operation_summary="Update user profile")
    def put(self, request, *args, **kwargs):
        return super().put(request, *args, **kwargs)

    @swagger_auto_schema(operation_summary="Partially update user profile")
    def patch(self, request, *args, **kwargs):
        return super().patch(request, *args, **kwargs)

    def get_object(self):
        return self.request.user


class ChangePasswordAPIView(drf_views.APIView):
    """
    Allows an authenticated user to change their password.

    Method: POST
    Request Body:
        - current password (required)
        - new password with confirmation (required)
    """
    serializer_class = my_serializers.ChangePasswordSerializer
    authentication_classes = [authentication.JWTAuthentication]
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(
        operation_summary="Change the current user's password",
        request_body=my_serializers.ChangePasswordSerializer,
        responses={
            200: "Password updated successfully",
            400: "Invalid input"
        }
    )
    def post(self, request, *args, **kwargs):
        serializer = self.serializer_class(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        serializer.update(request.user, serializer.validated_data)
        return Response({
            'success': True,
            'message': "Password updated successfully"
        }, status=status.HTTP_200_OK)


class LogoutAPIView(drf_views.APIView):
    """
    Allows an authenticated user to log out by blacklisting their refresh token.

    Method: POST
    Headers:
        - X-Refresh-Token (required)
    """
    authentication_classes = [authentication.JWTAuthentication]
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(
        operation_summary="Log out the user by blacklisting their refresh token",
        manual_parameters=[
            openapi.Parameter(
                'X-Refresh-Token',
                openapi.IN_HEADER,
                description="Refresh token to blacklist",
                type=openapi.TYPE_STRING,
                required=True
            )
        ],
        responses={
            200: "Logout successful",
            400: "Invalid token"
        }
    )
    def post(self, request):
        refresh_token = request.headers.get('X-Refresh-Token')
        if not refresh_token:
            return Response({'success': False, 'message': 'X-Refresh-Token header is required.'},
                            status=status.HTTP_400_BAD_REQUEST)

        try:
            token = tokens.RefreshToken(refresh_token)
            token.blacklist()
        except tokens.TokenError:
            return Response({'success': False, 'message': 'Invalid token.'}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {'success': True, 'message': "Logout successful."},
            status=status.HTTP_200_OK
        )


class DeleteOwnAccountAPIView(drf_views.APIView):
    authentication_classes = [authentication.JWTAuthentication]
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(operation_summary="Delete the current user's account")
    def delete(self, request):
        AccountService.delete_user(user=request.user)
        return Response({'success': True, 'message': "Account deleted."}, status=status.HTTP_200_OK)


class FreelancerListAPIView(generics.ListAPIView):
    """
    Lists freelancers. Supports ?search= over name, email and location.
    """
    serializer_class = my_serializers.UserListSerializer
    authentication_classes = [authentication.JWTAuthentication]
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [SearchFilter, OrderingFilter]
    search_fields = ['first_name', 'last_name', 'email', 'location']
    ordering_fields = ['date_joined', 'first_name']
    ordering = ['-date_joined']

    def get_queryset(self):
        return CustomUser.objects.freelancers().filter(is_active=True)


class ClientListAPIView(FreelancerListAPIView):
    """
    Lists clients. Supports ?search= over name, email and location.
    """
    def get_queryset(self):
        return CustomUser.objects.clients().filter(is_active=True)


class UserDetailAPIView(generics.RetrieveAPIView):
    serializer_class = my_serializers.UserDetailSerializer
    authentication_classes = [authentication.JWTAuthentication]
    permission_classes = [permissions.IsAuthenticated]
    queryset = CustomUser.objects.filter(is_active=True).prefetch_related('portfolio', 'reviews_received')
    lookup_field = 'id'


class SkillsAPIView(drf_views.APIView):
    """
    GET: skills and portfolio of the current user.
    POST: add skills (duplicates are ignored).
    """
    authentication_classes = [authentication.JWTAuthentication]
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(operation_summary="Get skills and portfolio of the current user")
    def get(self, request):
        return Response({
            'success': True,
            'skills': request.user.skills,
            'portfolio': my_serializers.PortfolioItemSerializer(request.user.portfolio.all(), many=True).data,
        }, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        operation_summary="Add skills to the current user",
        request_body=my_serializers.SkillsSerializer,
    )
    def post(self, request):
        serializer = my_serializers.SkillsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        skills = AccountService.add_skills(user=request.user, skills=serializer.validated_data['skills'])
        return Response({
            'success': True,
            'message': "Skills updated.",
            'skills': skills,
        }, status=status.HTTP_200_OK)


class DeleteSkillAPIView(drf_views.APIView):
    authentication_classes = [authentication.JWTAuthentication]
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(operation_summary="Remove a skill from the current user")
    def delete(self, request, skill):
        skills = AccountService.remove_skill(user=request.user, skill=skill)
        return Response({
            'success': True,
            'message': "Skill removed.",
            'skills': skills,
        }, status=status.HTTP_200_OK)


class PortfolioCreateAPIView(generics.CreateAPIView):
    serializer_class = my_serializers.PortfolioItemSerializer
    authentication_classes = [authentication.JWTAuthentication]
    permission_classes = [permissions.IsAuthenticated]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = AccountService.add_portfolio_item(user=request.user, **serializer.validated_data)

        return Response({
            'success': True,
            'message': "Portfolio item added.",
            'portfolio_item': my_serializers.PortfolioItemSerializer(item).data,
        }, status=status.HTTP_201_CREATED)


class PortfolioDeleteAPIView(drf_views.APIView):
    authentication_classes = [authentication.JWTAuthentication]
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(operation_summary="Remove a portfolio item of the current user")
    def delete(self, request, id):
        AccountService.remove_portfolio_item(user=request.user, item_id=id)
        return Response({'success': True, 'message': "Portfolio item removed."}, status=status.HTTP_200_OK)


class ReviewUserAPIView(drf_views.APIView):
    authentication_classes = [authentication.JWTAuthentication]
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(
        operation_summary="Rate and review a user",
        request_body=my_serializers.CreateReviewSerializer,
        responses={201: my_serializers.ReviewSerializer}
    )
    def post(self, request, id):
        reviewee = get_object_or_404(CustomUser, id=id, is_active=True)
        serializer = my_serializers.CreateReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        review = AccountService.review_user(reviewer=request.user, reviewee=reviewee, **serializer.validated_data)
        return Response({
            'success': True,
            'message': "Review submitted.",
            'review': my_serializers.ReviewSerializer(review).data,
        }, status=status.HTTP_201_CREATED)


class WithdrawAPIView(drf_views.APIView):
    """
    Moves part of the freelancer's revenue to the withdrawn total.
    """
    authentication_classes = [authentication.JWTAuthentication]
    permission_classes = [permissions.IsAuthenticated, IsFreelancer]

    @swagger_auto_schema(
        operation_summary="Withdraw from the current freelancer's revenue",
        request_body=my_serializers.WithdrawSerializer,
        responses={200: "Withdrawal successful", 400: "Insufficient balance"}
    )
    def post(self, request):
        serializer = my_serializers.WithdrawSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = AccountService.withdraw(user=request.user, amount=serializer.validated_data['amount'])
        return Response({
            'success': True,
            'message': "Withdrawal successful.",
            'revenue': str(user.revenue),
            'withdrawn': str(user.withdrawn),
        }, status=status.HTTP_200_OK)
