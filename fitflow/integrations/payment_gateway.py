"""Payment gateway clients used to open card payment intents."""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
import logging
from typing import Dict, List, Optional, Protocol

from pydantic import SecretStr
import stripe

logger = logging.getLogger(__name__)


class PaymentGatewayError(RuntimeError):
    """Raised when the payment processor rejects or fails a request."""


@dataclass(frozen=True)
class PaymentHandle:
    """What the client needs to finish a card payment."""

    id: str
    client_secret: str
    amount_cents: int
    currency: str


class PaymentGateway(Protocol):
    def create_payment_intent(
        self, amount_cents: int, currency: str, metadata: Optional[Dict[str, str]] = None
    ) -> PaymentHandle:
        ...


class StripePaymentGateway:
    """Creates card PaymentIntents through the Stripe API."""

    def __init__(self, *, api_key: str | SecretStr) -> None:
        secret_value = api_key.get_secret_value() if isinstance(api_key, SecretStr) else api_key
        if not secret_value:
            raise ValueError("Stripe API key must be provided")
        self._api_key = secret_value

    def create_payment_intent(
        self, amount_cents: int, currency: str, metadata: Optional[Dict[str, str]] = None
    ) -> PaymentHandle:
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount_cents,
                currency=currency,
                payment_method_types=["card"],
                metadata=metadata or {},
                api_key=self._api_key,
            )
        except stripe.StripeError as exc:
            logger.error("Stripe PaymentIntent creation failed: %s", exc)
            raise PaymentGatewayError(str(exc)) from exc

        logger.info("Created payment intent %s for %s %s", intent.id, amount_cents, currency)
        return PaymentHandle(
            id=intent.id,
            client_secret=intent.client_secret,
            amount_cents=int(intent.amount),
            currency=str(intent.currency),
        )


class FakePaymentGateway:
    """In-process gateway for development and tests; never talks to a processor."""

    def __init__(self) -> None:
        self.created: List[PaymentHandle] = []

    def create_payment_intent(
        self, amount_cents: int, currency: str, metadata: Optional[Dict[str, str]] = None
    ) -> PaymentHandle:
        seed = f"{len(self.created)}:{amount_cents}:{currency}:{sorted((metadata or {}).items())}"
        digest = hashlib.sha256(seed.encode("utf-8")).hexdigest()[:24]
        handle = PaymentHandle(
            id=f"pi_fake_{digest}",
            client_secret=f"pi_fake_{digest}_secret_{digest[:8]}",
            amount_cents=amount_cents,
            currency=currency,
        )
        self.created.append(handle)
        logger.debug("Fake payment intent %s created", handle.id)
        return handle


def build_payment_gateway(stripe_secret_key: Optional[SecretStr]) -> PaymentGateway:
    """Stripe when a key is configured, otherwise the fake gateway."""
    if stripe_secret_key is not None and stripe_secret_key.get_secret_value():
        return StripePaymentGateway(api_key=stripe_secret_key)
    logger.warning("No Stripe key configured; using FakePaymentGateway")
    return FakePaymentGateway()
