from abc import ABC, abstractmethod


class BasePaymentProvider(ABC):
    """
    Abstract base class for all payment providers.
    A provider only talks to its gateway; it never touches projects or transactions.
    """

    name = None
    currency = None

    def __init__(self, **kwargs):
        """Initialize the payment provider with configuration."""
        self.config = kwargs

    @abstractmethod
    def charge(self, user, amount, **kwargs):
        """
        Start a payment on the gateway.

        Args:
            user: User object making the payment
            amount: Amount to charge (as Decimal)
            **kwargs: Additional parameters specific to the provider

        Returns:
            Dict with 'status' ('success' or 'error') and the provider's reference data
        """

    @abstractmethod
    def verify(self, reference, **kwargs):
        """
        Ask the gateway whether a payment went through.

        Args:
            reference: The provider's payment reference (intent id, rid, ...)
            **kwargs: Additional data some gateways need to look the payment up

        Returns:
            bool: True if payment is successful, False otherwise
        """
