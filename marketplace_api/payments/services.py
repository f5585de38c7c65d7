import logging
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import F, Q
from django.utils import timezone

from marketplace_api.exceptions import Conflict, Forbidden, InvalidInput, InvalidState, NotFound
from notifications.services import notify
from projects.models import Project
from .models import PlatformLedgerEntry, Transaction
from .providers import get_payment_provider

User = get_user_model()
logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


def split_amount(amount, rate=None):
    """Return (platform_fee, freelancer_share) for ``amount``; the fee is rounded to the cent."""
    rate = settings.PLATFORM_COMMISSION_RATE if rate is None else rate
    fee = (Decimal(amount) * Decimal(rate)).quantize(CENT, rounding=ROUND_HALF_UP)
    return fee, Decimal(amount) - fee


class PaymentService:
    """
    Provider adapter. This class should NOT create or update Transaction records.
    It only calls the configured payment provider(s).
    """
    def __init__(self, provider_name=None):
        self.default_provider_name = provider_name

    def _get_provider(self, provider_name):
        name = provider_name or self.default_provider_name
        if not name:
            raise ValueError("provider_name is required (no default configured).")
        try:
            return get_payment_provider(name), name
        except ValueError:
            raise InvalidInput(f"Unsupported payment method '{name}'.")

    def init_charge(self, *, user, amount, provider_name=None, **kwargs):
        provider, _ = self._get_provider(provider_name)
        return provider.charge(user=user, amount=amount, **kwargs)

    def verify_payment(self, *, provider_name, reference, **kwargs):
        provider, _ = self._get_provider(provider_name)
        return provider.verify(reference, **kwargs)

    def currency_for(self, provider_name):
        provider, _ = self._get_provider(provider_name)
        return provider.currency


class SettlementService:
    """
    Turns a confirmed gateway payment into exactly one Transaction for the
    project, credits the freelancer's share and books the platform fee.
    """
    def __init__(self, payment_service=None):
        self.payment_service = payment_service or PaymentService()

    def start_payment(self, *, user, project, provider_name):
        if project.client_id != user.pk:
            raise Forbidden("Only the project client can pay for this project.")

        if project.payment_status == Project.PAYMENT_COMPLETED:
            raise InvalidState("This project has already been paid.")

        result = self.payment_service.init_charge(
            user=user,
            amount=project.job_budget,
            provider_name=provider_name,
            project_id=project.pk,
            project_title=project.job_title,
            metadata={'project_id': project.pk},
        )
        if result.get('status') != 'success':
            raise InvalidState(result.get('message') or "Payment initialization failed.")
        return result

    def settle(self, *, user, project, reference, method):
        """
        Returns ``(transaction, created)``. A project that is already paid returns
        its existing transaction with ``created=False`` and changes nothing.
        """
        if project.client_id != user.pk:
            raise Forbidden("Only the project client can confirm a payment.")

        if not reference:
            raise InvalidInput("A payment reference is required.")

        existing = Transaction.objects.filter(project=project).first()
        if existing is not None:
            return existing, False

        if Transaction.objects.filter(payment_method=method, payment_intent_id=reference).exists():
            raise Conflict("This payment reference has already been used.")

        verified = self.payment_service.verify_payment(
            provider_name=method,
            reference=reference,
            amount=project.job_budget,
            pid=project.pk,
        )
        if not verified:
            logger.warning(f"Unverified {method} payment {reference} for project {project.pk}")
            raise InvalidState("Payment could not be verified.")

        currency = self.payment_service.currency_for(method)

        try:
            with transaction.atomic():
                claimed = Project.objects.filter(pk=project.pk, payment_status=Project.PAYMENT_PENDING).update(
                    payment_status=Project.PAYMENT_COMPLETED,
                    payment_request=False,
                    updated_at=timezone.now(),
                )
                if not claimed:
                    existing = Transaction.objects.filter(project=project).first()
                    if existing is None:
                        raise InvalidState("This project has already been paid.")
                    return existing, False

                project.refresh_from_db()
                amount = project.job_budget
                fee, share = split_amount(amount)

                record = Transaction.objects.create(
                    project=project,
                    freelancer_id=project.freelancer_id,
                    client_id=project.client_id,
                    freelancer_name=project.freelancer_name,
                    freelancer_email=project.freelancer_email,
                    client_name=project.client_name,
                    client_email=project.client_email,
                    job_title=project.job_title,
                    job_description=project.job_description,
                    job_budget=project.job_budget,
                    amount=amount,
                    platform_fee=fee,
                    freelancer_share=share,
                    currency=currency,
                    payment_intent_id=reference,
                    payment_method=method,
                )
                PlatformLedgerEntry.objects.create(transaction=record, amount=fee)
                User.objects.filter(pk=project.freelancer_id).update(revenue=F('revenue') + share)
        except IntegrityError:
            logger.warning(f"Duplicate {method} reference {reference} for project {project.pk}")
            raise Conflict("This payment reference has already been used.")

        logger.info(
            f"Settled project {project.pk} via {method}: amount {amount} {currency}, "
            f"freelancer share {share}, platform fee {fee}"
        )

        notify(
            recipient_id=project.freelancer_id,
            title="Payment Received",
            message=f"You received {share} {currency.upper()} for project '{project.job_title}'.",
            type='success',
            link=f"/projects/{project.pk}",
        )
        notify(
            recipient_id=project.client_id,
            title="Payment Successful",
            message=f"Your payment of {amount} {currency.upper()} for '{project.job_title}' was recorded.",
            type='success',
            link=f"/transactions/{record.pk}",
        )
        return record, True


class TransactionQueryService:

    @staticmethod
    def visible_to(user):
        if user.is_platform_admin:
            return Transaction.objects.all()
        return Transaction.objects.filter(Q(freelancer=user) | Q(client=user))

    @staticmethod
    def get_for(user, transaction_id):
        record = TransactionQueryService.visible_to(user).filter(pk=transaction_id).first()
        if record is None:
            raise NotFound("Transaction not found.")
        return record
