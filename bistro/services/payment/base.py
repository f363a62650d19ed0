"""
Payment Service Abstract Base Class

Defines the interface contract for all payment processor implementations.
Both MockPaymentService and StripePaymentService implement these methods,
so the payment-intent route behaves identically whichever is active.

Design Pattern: Strategy Pattern
    - Runtime switching between processors via ENV_MODE
    - Tests run against the mock implementation
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_EVEN
from typing import Optional, Union

from bistro.core.config import AmountRounding


@dataclass
class PaymentResult:
    """
    Standardized result from a processor call.

    Attributes:
        success: Whether the processor accepted the request
        payment_intent_id: Processor identifier (Stripe format: pi_xxx)
        client_secret: Secret the browser uses to confirm the payment
        amount: Amount in minor units (cents)
        currency: Currency code (e.g., "usd")
        error_message: Error description if the call failed
        error_code: Machine-readable error code
        status: Processor-reported intent status
    """
    success: bool
    payment_intent_id: Optional[str] = None
    client_secret: Optional[str] = None
    amount: Optional[int] = None
    currency: str = "usd"
    error_message: Optional[str] = None
    error_code: Optional[str] = None
    status: Optional[str] = None


def to_minor_units(
    price: Union[int, float, str, Decimal],
    rounding: AmountRounding = AmountRounding.TRUNCATE,
) -> int:
    """
    Convert a dollar price to integer cents.

    The price goes through its decimal string form so that binary float
    error cannot push 19.99 down to 1998.

    Args:
        price: Amount in dollars (e.g., 19.99)
        rounding: TRUNCATE drops fractional cents, BANKERS rounds half to even

    Returns:
        int: Amount in cents (e.g., 1999)
    """
    cents = Decimal(str(price)) * 100
    mode = ROUND_HALF_EVEN if rounding == AmountRounding.BANKERS else ROUND_DOWN
    return int(cents.quantize(Decimal("1"), rounding=mode))


class BasePaymentService(ABC):
    """
    Abstract base class for payment processors.

    Example:
        >>> service = get_payment_service()  # Returns Mock or Stripe
        >>> result = await service.create_payment_intent(amount=1999)
        >>> if result.success:
        ...     print(result.client_secret)
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the payment provider.

        Returns:
            str: Provider name (e.g., "mock", "stripe")
        """
        pass

    @abstractmethod
    async def create_payment_intent(
        self,
        amount: int,
        currency: str = "usd",
    ) -> PaymentResult:
        """
        Create a card payment intent for client-side confirmation.

        Args:
            amount: Amount in cents
            currency: Three-letter currency code

        Returns:
            PaymentResult: Carries client_secret on success
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Verify connectivity to the payment processor.

        Returns:
            bool: True if the processor is reachable
        """
        pass
