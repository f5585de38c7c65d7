import logging

import stripe
from django.conf import settings

from .base import BasePaymentProvider

logger = logging.getLogger(__name__)


class StripeProvider(BasePaymentProvider):
    """
    Stripe payment provider: the client confirms a Payment Intent in the browser
    and we check its status when they report back.
    """
    name = 'stripe'

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        stripe.api_key = settings.STRIPE_SECRET_KEY
        self.publishable_key = settings.STRIPE_PUBLISHABLE_KEY
        self.currency = getattr(settings, 'STRIPE_CURRENCY', 'usd')

    def charge(self, user, amount, **kwargs):
        """
        Create a Stripe Payment Intent.

        Args:
            user: User object making the payment
            amount: Amount to charge (Decimal)
            **kwargs: currency, metadata, project_title

        Returns:
            Dict containing the intent id and client secret
        """
        try:
            # Stripe uses the smallest currency unit
            amount_cents = int(amount * 100)

            metadata = {
                'user_id': str(user.id),
                'user_email': user.email,
            }
            metadata.update({k: str(v) for k, v in (kwargs.get('metadata') or {}).items()})

            intent = stripe.PaymentIntent.create(
                amount=amount_cents,
                currency=kwargs.get('currency') or self.currency,
                receipt_email=user.email,
                metadata=metadata,
                description=f"Payment for {kwargs.get('project_title', 'project')}",
                automatic_payment_methods={
                    'enabled': True,
                },
            )

            logger.info(f"Stripe Payment Intent created: {intent.id} for user {user.email}, amount: {amount}")

            return {
                'status': 'success',
                'payment_intent_id': intent.id,
                'client_secret': intent.client_secret,
                'publishable_key': self.publishable_key,
                'provider': self.name,
            }

        except stripe.StripeError as e:
            logger.error(f"Stripe API error in charge: {str(e)}")
            return {
                'status': 'error',
                'message': 'Payment initiation failed',
                'error': str(e)
            }

    def verify(self, reference, **kwargs):
        """
        Verify a Stripe Payment Intent.

        Args:
            reference: Payment Intent ID
            amount: expected amount (Decimal), checked against the intent when given
            pid: expected project id, checked against the intent metadata when given

        Returns:
            bool: True if the intent has succeeded for that amount and project
        """
        amount = kwargs.get('amount')
        pid = kwargs.get('pid')
        try:
            intent = stripe.PaymentIntent.retrieve(reference)
            is_successful = intent.status == 'succeeded'

            if is_successful and amount is not None and intent.amount != int(amount * 100):
                logger.warning(f"Stripe intent {reference} is for {intent.amount}, expected {int(amount * 100)}")
                is_successful = False

            if is_successful and pid is not None:
                try:
                    project_ref = intent.metadata['project_id']
                except (KeyError, TypeError):
                    project_ref = None
                if project_ref != str(pid):
                    logger.warning(f"Stripe intent {reference} belongs to project {project_ref}, not {pid}")
                    is_successful = False

            logger.info(f"Stripe payment verification result: {is_successful} for intent {reference}")
            return is_successful

        except stripe.StripeError as e:
            logger.error(f"Stripe verification error: {str(e)}")
            return False
