"""
Stripe Payment Service Implementation

Production implementation using the official Stripe Python SDK.
Used when ENV_MODE=production or ENV_MODE=staging.

Requirements:
    - STRIPE_SECRET_KEY must be set in environment

Security Notes:
    - Only the client secret leaves this module; the full intent never
      reaches the HTTP response
"""

import logging

import stripe

from bistro.core.config import get_settings
from bistro.services.payment.base import BasePaymentService, PaymentResult

logger = logging.getLogger(__name__)


class StripePaymentService(BasePaymentService):
    """
    Stripe payment service.

    Configuration:
        Requires STRIPE_SECRET_KEY environment variable.

    Example:
        >>> service = StripePaymentService()
        >>> result = await service.create_payment_intent(amount=1999)
    """

    def __init__(self):
        """
        Initialize Stripe with API key from settings.

        Raises:
            ValueError: If STRIPE_SECRET_KEY is not configured
        """
        settings = get_settings()

        if not settings.stripe_secret_key:
            raise ValueError(
                "STRIPE_SECRET_KEY is required for staging and production. "
                "Set it in your .env file or environment variables."
            )

        stripe.api_key = settings.stripe_secret_key
        self._currency = settings.stripe_currency

        logger.info("StripePaymentService initialized")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "stripe"

    async def create_payment_intent(
        self,
        amount: int,
        currency: str = "usd",
    ) -> PaymentResult:
        """
        Create a card PaymentIntent for client-side confirmation.

        Returns a client_secret that the frontend uses with Stripe.js
        to complete the payment.
        """
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount,
                currency=currency or self._currency,
                payment_method_types=["card"],
            )

            logger.info(
                f"Stripe: PaymentIntent created - {intent.id} - "
                f"amount={amount} status={intent.status}"
            )

            return PaymentResult(
                success=True,
                payment_intent_id=intent.id,
                client_secret=intent.client_secret,
                amount=intent.amount,
                currency=intent.currency,
                status=intent.status,
            )

        except stripe.AuthenticationError as e:
            # API key issues
            logger.critical(f"Stripe: Authentication failed - {e}")

            return PaymentResult(
                success=False,
                amount=amount,
                error_message="Payment service configuration error",
                error_code="authentication_error",
            )

        except stripe.APIConnectionError as e:
            logger.error(f"Stripe: Connection error - {e}")

            return PaymentResult(
                success=False,
                amount=amount,
                error_message="Payment service temporarily unavailable",
                error_code="connection_error",
            )

        except stripe.StripeError as e:
            logger.error(f"Stripe: Failed to create PaymentIntent - {e}")

            return PaymentResult(
                success=False,
                amount=amount,
                error_message=getattr(e, "user_message", None) or "Payment processing error",
                error_code=getattr(e, "code", None) or "stripe_error",
            )

    async def health_check(self) -> bool:
        """
        Verify Stripe API connectivity.

        Makes a lightweight API call to verify credentials and connectivity.
        """
        try:
            stripe.Account.retrieve()
            logger.debug("Stripe: Health check passed")
            return True

        except stripe.StripeError as e:
            logger.error(f"Stripe: Health check failed - {e}")
            return False
