import uuid

from django.db import models
from django.contrib.auth import get_user_model

from projects.models import Project

User = get_user_model()


class Transaction(models.Model):
    """
    Immutable record of one settled project payment, with the parties and the
    job as they were at settlement time.
    """
    METHOD_STRIPE = 'stripe'
    METHOD_ESEWA = 'esewa'
    PAYMENT_METHOD_CHOICES = (
        (METHOD_STRIPE, 'Stripe'),
        (METHOD_ESEWA, 'eSewa'),
    )
    STATUS_CHOICES = (
        ('completed', 'Completed'),
    )

    transaction_uuid = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    project = models.ForeignKey(Project, on_delete=models.PROTECT, related_name='transactions')
    freelancer = models.ForeignKey(User, on_delete=models.PROTECT, related_name='earnings')
    client = models.ForeignKey(User, on_delete=models.PROTECT, related_name='payments_made')

    freelancer_name = models.CharField(max_length=255)
    freelancer_email = models.EmailField()
    client_name = models.CharField(max_length=255)
    client_email = models.EmailField()
    job_title = models.CharField(max_length=255)
    job_description = models.TextField()
    job_budget = models.DecimalField(max_digits=12, decimal_places=2)

    amount = models.DecimalField(max_digits=12, decimal_places=2)
    platform_fee = models.DecimalField(max_digits=12, decimal_places=2)
    freelancer_share = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3)
    payment_intent_id = models.CharField(max_length=255)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES)
    payment_status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='completed')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        constraints = [
            models.UniqueConstraint(fields=['project'], name='single_transaction_per_project'),
            models.UniqueConstraint(fields=['payment_method', 'payment_intent_id'], name='single_use_gateway_reference'),
        ]

    def __str__(self):
        return f"{self.transaction_uuid} {self.amount} {self.currency} ({self.payment_method})"

    def save(self, *args, **kwargs):
        if self.pk is not None:
            raise ValueError("Transactions are immutable once recorded.")
        super().save(*args, **kwargs)


class PlatformLedgerEntry(models.Model):
    """Append-only platform fee entries; platform revenue is their sum."""
    transaction = models.OneToOneField(Transaction, on_delete=models.PROTECT, related_name='ledger_entry')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        verbose_name_plural = 'platform ledger entries'

    def __str__(self):
        return f"+{self.amount} from {self.transaction_id}"

    @classmethod
    def platform_revenue(cls, queryset=None):
        queryset = cls.objects.all() if queryset is None else queryset
        total = queryset.aggregate(total=models.Sum('amount'))['total']
        return total if total is not None else 0
