import logging

import requests
from django.conf import settings

from .base import BasePaymentProvider

logger = logging.getLogger(__name__)


class EsewaProvider(BasePaymentProvider):
    """
    eSewa provider. The payment form is submitted by the browser; eSewa then
    redirects back with a reference id (``rid``) that we confirm against the
    transaction verification endpoint.
    """
    name = 'esewa'
    currency = 'npr'

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.merchant_code = settings.ESEWA_MERCHANT_CODE
        self.verify_url = settings.ESEWA_VERIFY_URL
        self.timeout = kwargs.get('timeout', 15)

    def charge(self, user, amount, **kwargs):
        """
        Build the form fields the frontend posts to eSewa.

        Args:
            user: User object making the payment
            amount: Amount to charge (Decimal)
            **kwargs: pid (product id, defaults to the project id)
        """
        pid = kwargs.get('pid') or kwargs.get('project_id')
        if not pid:
            return {'status': 'error', 'message': 'A product id is required for eSewa payments'}

        return {
            'status': 'success',
            'provider': self.name,
            'data': {
                'amt': str(amount),
                'tAmt': str(amount),
                'pid': str(pid),
                'scd': self.merchant_code,
            },
        }

    def verify(self, reference, **kwargs):
        """
        Verify an eSewa payment.

        Args:
            reference: Reference id (rid) returned by eSewa
            **kwargs: amount and pid of the payment being verified

        Returns:
            bool: True if eSewa reports the payment as successful
        """
        payload = {
            'amt': str(kwargs.get('amount', '')),
            'rid': reference,
            'pid': str(kwargs.get('pid', '')),
            'scd': self.merchant_code,
        }

        try:
            logger.info(f"Verifying eSewa payment: {reference}")

            response = requests.post(self.verify_url, data=payload, timeout=self.timeout)
            response.raise_for_status()
            is_successful = 'success' in response.text.lower()

            logger.info(f"eSewa payment verification result: {is_successful}")
            return is_successful
        except requests.exceptions.RequestException as e:
            logger.error(f"eSewa verification request failed: {str(e)}")
            return False
