"""
Checkout bridge between the HTTP layer and the payment processor.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Union

from bistro.core.config import get_settings
from bistro.core.exceptions import InvalidAmount, ProcessorError
from bistro.services.payment.base import BasePaymentService, to_minor_units

logger = logging.getLogger(__name__)


async def create_intent(
    price: Union[int, float, str, Decimal],
    service: BasePaymentService,
) -> str:
    """
    Request a card payment intent for ``price`` dollars.

    Returns:
        str: The client secret, and nothing else from the processor response

    Raises:
        InvalidAmount: The price is not finite or too large to express in cents
        ProcessorError: The processor rejected or failed the request
    """
    settings = get_settings()
    try:
        amount = to_minor_units(price, settings.payment_amount_rounding)
    except (InvalidOperation, ValueError):
        logger.warning(f"Rejected price {price!r}")
        raise InvalidAmount(f"invalid price: {price}")
    currency = settings.stripe_currency

    logger.info(f"Creating {service.provider_name} payment intent: {amount} {currency}")
    result = await service.create_payment_intent(amount=amount, currency=currency)

    if not result.success or not result.client_secret:
        logger.error(
            f"Payment intent failed ({result.error_code}): {result.error_message}"
        )
        raise ProcessorError(result.error_message or "payment processor error")

    return result.client_secret
