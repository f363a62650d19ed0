"""
Payment Service Factory

Provides a single entry point for obtaining a payment processor instance.
The factory pattern keeps the routes agnostic about which implementation
is being used.

Usage:
    from bistro.services.payment import get_payment_service, create_intent

    client_secret = await create_intent(19.99, get_payment_service())

Environment Switching:
    - ENV_MODE=development → MockPaymentService (no API calls)
    - ENV_MODE=staging → StripePaymentService (test keys)
    - ENV_MODE=production → StripePaymentService (live keys)
"""

import logging
from functools import lru_cache

from bistro.core.config import get_settings
from bistro.services.payment.base import (
    BasePaymentService,
    PaymentResult,
    to_minor_units,
)
from bistro.services.payment.bridge import create_intent
from bistro.services.payment.mock import MockPaymentService
from bistro.services.payment.stripe import StripePaymentService

logger = logging.getLogger(__name__)


@lru_cache()
def get_payment_service() -> BasePaymentService:
    """
    Get the configured payment processor instance.

    The instance is cached so every request shares one processor.

    Raises:
        ValueError: If staging/production mode but Stripe key not configured
    """
    settings = get_settings()

    if settings.is_development:
        logger.info("Payment Service: Using MockPaymentService (development mode)")
        return MockPaymentService()
    else:
        logger.info(
            f"Payment Service: Using StripePaymentService "
            f"({settings.env_mode.value} mode)"
        )
        return StripePaymentService()


__all__ = [
    "get_payment_service",
    "create_intent",
    "to_minor_units",
    "BasePaymentService",
    "PaymentResult",
    "MockPaymentService",
    "StripePaymentService",
]
