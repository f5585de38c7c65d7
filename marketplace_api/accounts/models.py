from decimal import Decimal

from django.db import models
from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.core.validators import MaxValueValidator, MinValueValidator
from country_list import countries_for_language
from auditlog.registry import auditlog
from auditlog.models import AuditlogHistoryField


class CustomUserManager(BaseUserManager):
    """
    Manager for CustomUser. Handles user and superuser creation using email as the unique identifier.
    """
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("Email is required.")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('role', CustomUser.ROLE_ADMIN)

        return self.create_user(email, password, **extra_fields)

    def freelancers(self):
        return self.filter(role=CustomUser.ROLE_FREELANCER)

    def clients(self):
        return self.filter(role=CustomUser.ROLE_CLIENT)


class CustomUser(AbstractUser):
    """
    Marketplace account. Email is the login; ``role`` decides which side of a job
    or project the user can act on. ``revenue`` is the freelancer's withdrawable
    balance and ``withdrawn`` the running total already paid out.
    """
    ROLE_FREELANCER = 'freelancer'
    ROLE_CLIENT = 'client'
    ROLE_ADMIN = 'admin'
    ROLE_CHOICES = (
        (ROLE_FREELANCER, 'Freelancer'),
        (ROLE_CLIENT, 'Client'),
        (ROLE_ADMIN, 'Admin'),
    )

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_FREELANCER)
    phone_number = models.CharField(max_length=20, blank=True)
    location = models.CharField(max_length=255, blank=True)
    country = models.CharField(max_length=50, choices=countries_for_language('en'), blank=True)
    bio = models.CharField(max_length=500, blank=True)
    profile_pic = models.URLField(max_length=500, blank=True)
    skills = models.JSONField(default=list, blank=True)
    revenue = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    withdrawn = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    email = models.EmailField(unique=True, blank=False)
    username = None

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['first_name', 'last_name']

    objects = CustomUserManager()

    history = AuditlogHistoryField()

    def __str__(self):
        return self.email

    @property
    def name(self):
        return self.get_full_name() or self.email

    @property
    def is_client(self):
        return self.role == self.ROLE_CLIENT

    @property
    def is_freelancer(self):
        return self.role == self.ROLE_FREELANCER

    @property
    def is_platform_admin(self):
        return self.is_staff or self.role == self.ROLE_ADMIN

    @property
    def active_projects(self):
        from projects.models import Project

        return Project.objects.active_for(self)

    @property
    def average_rating(self):
        result = self.reviews_received.aggregate(avg=models.Avg('rating'))['avg']
        return round(result, 2) if result is not None else None


class PortfolioItem(models.Model):
    user = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='portfolio')
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    link = models.URLField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.title} ({self.user})"


class Review(models.Model):
    reviewer = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='reviews_given')
    reviewee = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='reviews_received')
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    review = models.CharField(max_length=1000, blank=True)
    date = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-date']

    def __str__(self):
        return f"{self.reviewer} -> {self.reviewee}: {self.rating}"


auditlog.register(CustomUser, exclude_fields=['password', 'last_login'])
