"""
Mock Payment Service Implementation

Simulates Stripe-like payment intents without making real API calls.
Used in development mode (ENV_MODE=development) and by the test suite to:
    - Exercise the checkout flow locally
    - Develop without a Stripe account or internet connectivity

Behavior:
    - Optional simulated latency
    - Fails a configurable share of requests with Stripe-like decline codes
    - Generates Stripe-like IDs and client secrets (pi_mock_xxx_secret_xxx)
"""

import asyncio
import random
import uuid
import logging

from bistro.services.payment.base import BasePaymentService, PaymentResult

logger = logging.getLogger(__name__)


class MockPaymentService(BasePaymentService):
    """
    Mock implementation of the payment service.

    Attributes:
        failure_rate: Probability of simulated failure (0.0-1.0)
        min_latency: Minimum simulated response time in seconds
        max_latency: Maximum simulated response time in seconds
        intents: Every intent request seen, as (amount, currency) pairs

    Example:
        >>> service = MockPaymentService(failure_rate=0.0)
        >>> result = await service.create_payment_intent(1999)
        >>> result.client_secret.startswith("pi_mock_")
        True
    """

    # Simulated failure reasons (mimics real Stripe decline codes)
    DECLINE_REASONS = [
        ("card_declined", "Your card was declined."),
        ("processing_error", "An error occurred while processing your card."),
        ("rate_limit", "Too many requests hit the API too quickly."),
    ]

    def __init__(
        self,
        failure_rate: float = 0.0,
        min_latency: float = 0.0,
        max_latency: float = 0.0,
    ):
        self.failure_rate = failure_rate
        self.min_latency = min_latency
        self.max_latency = max_latency
        self.intents: list[tuple[int, str]] = []

        logger.info(
            f"MockPaymentService initialized "
            f"(failure_rate={failure_rate:.0%}, "
            f"latency={min_latency}-{max_latency}s)"
        )

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "mock"

    def _generate_payment_intent_id(self) -> str:
        """Generate a Stripe-like payment intent ID."""
        return f"pi_mock_{uuid.uuid4().hex[:24]}"

    async def _simulate_latency(self) -> None:
        if self.max_latency > 0:
            await asyncio.sleep(random.uniform(self.min_latency, self.max_latency))

    def _should_fail(self) -> bool:
        """Determine if this request should simulate a failure."""
        return random.random() < self.failure_rate

    async def create_payment_intent(
        self,
        amount: int,
        currency: str = "usd",
    ) -> PaymentResult:
        """
        Simulate creating a payment intent.

        The mock client_secret has Stripe's shape but won't work with Stripe.js.
        """
        await self._simulate_latency()
        self.intents.append((amount, currency))

        if amount <= 0:
            return PaymentResult(
                success=False,
                amount=amount,
                currency=currency,
                error_message="Amount must be greater than 0",
                error_code="invalid_amount",
            )

        if self._should_fail():
            error_code, error_message = random.choice(self.DECLINE_REASONS)
            logger.debug(f"Mock: Payment intent declined - {error_code}")

            return PaymentResult(
                success=False,
                amount=amount,
                currency=currency,
                error_message=error_message,
                error_code=error_code,
            )

        payment_intent_id = self._generate_payment_intent_id()

        logger.debug(f"Mock: Created payment intent {payment_intent_id}")

        return PaymentResult(
            success=True,
            payment_intent_id=payment_intent_id,
            client_secret=f"{payment_intent_id}_secret_{uuid.uuid4().hex[:16]}",
            amount=amount,
            currency=currency,
            status="requires_payment_method",
        )

    async def health_check(self) -> bool:
        """Mock processor is always available."""
        logger.debug("Mock: Health check passed")
        return True
