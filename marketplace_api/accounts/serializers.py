from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoPasswordValidationError

from .models import CustomUser, PortfolioItem, Review


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Serializer for user login and token generation.

    Fields:
        - email (required)
        - password (required)
    Adds email and role claims to the token and returns the user next to the tokens.
    """
    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['email'] = user.email
        token['role'] = user.role
        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        data['user'] = UserProfileSerializer(self.user).data
        return data


class RegistrationSerializer(serializers.ModelSerializer):
    """
    Serializer for user registration.

    Fields :
        required: first_name, last_name, role, email, password, confirm_password
        optional: phone_number, location, country
    Only the 'client' and 'freelancer' roles can be self-registered.
    """
    password = serializers.CharField(required=True, write_only=True)
    confirm_password = serializers.CharField(required=True, write_only=True)
    role = serializers.ChoiceField(choices=(
        (CustomUser.ROLE_CLIENT, 'Client'),
        (CustomUser.ROLE_FREELANCER, 'Freelancer'),
    ))

    class Meta:
        model = CustomUser
        fields = ['id', 'first_name', 'last_name', 'role', 'phone_number', 'location', 'country',
                  'email', 'password', 'confirm_password']
        read_only_fields = ['id']
        extra_kwargs = {
            'first_name': {'required': True},
            'last_name': {'required': True},
            'email': {'required': True},
        }

    def validate(self, attrs):
        if attrs['password'] != attrs['confirm_password']:
            raise serializers.ValidationError("Passwords do not match.")
        prospective_user = CustomUser(
            email=attrs.get('email'),
            first_name=attrs.get('first_name'),
            last_name=attrs.get('last_name'),
            role=attrs.get('role'),
        )

        try:
            validate_password(attrs['password'], user=prospective_user)
        except DjangoPasswordValidationError as exc:
            raise serializers.ValidationError({'password': list(exc.messages)})

        return attrs

    def create(self, validated_data):
        validated_data.pop('confirm_password')
        return CustomUser.objects.create_user(**validated_data)


class PortfolioItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = PortfolioItem
        fields = ('id', 'title', 'description', 'link', 'created_at')
        read_only_fields = ('id', 'created_at')


class ReviewSerializer(serializers.ModelSerializer):
    reviewer_name = serializers.CharField(source='reviewer.name', read_only=True)

    class Meta:
        model = Review
        fields = ('id', 'reviewer', 'reviewer_name', 'rating', 'review', 'date')
        read_only_fields = ('id', 'reviewer', 'reviewer_name', 'date')


class UserProfileSerializer(serializers.ModelSerializer):
    """
    Serializer for user profile retrieval and updates.

    Fields:
        read-only: id, email, role, revenue, withdrawn, date_joined
        - first_name, last_name, phone_number, location, country, bio, profile_pic
    """
    class Meta:
        model = CustomUser
        fields = ('id', 'first_name', 'last_name', 'email', 'phone_number', 'role', 'location', 'country',
                  'bio', 'profile_pic', 'skills', 'revenue', 'withdrawn', 'date_joined')
        read_only_fields = ('id', 'email', 'role', 'skills', 'revenue', 'withdrawn', 'date_joined')


class UserDetailSerializer(serializers.ModelSerializer):
    """
    Public view of a user with portfolio, reviews and the derived
    posted-jobs / active-projects counters.
    """
    name = serializers.CharField(read_only=True)
    portfolio = PortfolioItemSerializer(many=True, read_only=True)
    reviews = ReviewSerializer(source='reviews_received', many=True, read_only=True)
    average_rating = serializers.FloatField(read_only=True)
    posted_jobs = serializers.SerializerMethodField()
    active_projects = serializers.SerializerMethodField()

    class Meta:
        model = CustomUser
        fields = ('id', 'name', 'email', 'role', 'location', 'country', 'bio', 'profile_pic', 'skills',
                  'portfolio', 'reviews', 'average_rating', 'posted_jobs', 'active_projects', 'date_joined')

    def get_posted_jobs(self, obj):
        return list(obj.posted_jobs.values_list('id', flat=True))

    def get_active_projects(self, obj):
        return list(obj.active_projects.values_list('id', flat=True))


class UserListSerializer(serializers.ModelSerializer):
    name = serializers.CharField(read_only=True)

    class Meta:
        model = CustomUser
        fields = ('id', 'name', 'email', 'role', 'location', 'profile_pic', 'skills', 'is_active', 'date_joined')


class ChangePasswordSerializer(serializers.Serializer):
    """
    Serializer for changing user password.

    Fields (all are required):
        - old_password
        - new_password
        - confirm_password
    Validates old password and ensures new passwords match.
    """
    old_password = serializers.CharField(required=True)
    new_password = serializers.CharField(required=True)
    confirm_password = serializers.CharField(required=True)

    def validate(self, attrs):
        user = self.context['request'].user

        if not user.check_password(attrs['old_password']):
            raise serializers.ValidationError("Incorrect Password.")

        if attrs['new_password'] != attrs['confirm_password']:
            raise serializers.ValidationError("Passwords do not match.")

        try:
            validate_password(attrs['new_password'], user=user)
        except DjangoPasswordValidationError as exc:
            raise serializers.ValidationError({'new_password': list(exc.messages)})

        return attrs

    def update(self, instance, validated_data):
        instance.set_password(validated_data['new_password'])
        instance.save(update_fields=['password'])
        return instance


class SkillsSerializer(serializers.Serializer):
    skills = serializers.ListField(child=serializers.CharField(max_length=100), allow_empty=False)


class CreateReviewSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    review = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')


class WithdrawSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
