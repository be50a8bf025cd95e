import stripe
import logging

from app.core.config import settings
from app.core.exceptions import PaymentGatewayError
from app.schemas.coupon import PaymentIntent

logger = logging.getLogger(__name__)

stripe.api_key = settings.STRIPE_SECRET_KEY

class StripeService:

    async def _make_request(self, stripe_api_call, *args, **kwargs):
        try:
            return stripe_api_call(*args, **kwargs)
        except stripe.StripeError as e:
            logger.error(f"Stripe error: {e}")
            raise PaymentGatewayError(f"Stripe error: {e.user_message or e}")

    async def create_payment_intent(self, amount: float, currency: str = None) -> PaymentIntent:
        intent = await self._make_request(
            stripe.PaymentIntent.create,
            amount=int(round(amount * 100)),
            currency=currency or settings.PAYMENT_CURRENCY,
        )
        return PaymentIntent(client_secret=intent.client_secret)

stripe_service = StripeService()
