from typing import Dict

import stripe

from chalicelib.constants.constants import PAYMENT_METHOD_TYPES
from chalicelib.utils.logger import logger


class StripePaymentGateway:

    def __init__(self, api_key: str):
        self.api_key = api_key

    def create_payment_intent(self, amount: int, currency: str) -> Dict:
        """
        amount is in minor units (cents)
        """
        logger.info(f'create_payment_intent ::: {amount=}, {currency=}')
        intent = stripe.PaymentIntent.create(
            amount=amount,
            currency=currency,
            payment_method_types=PAYMENT_METHOD_TYPES,
            api_key=self.api_key
        )
        logger.info(f'create_payment_intent ::: SUCCESS, intent_id={intent.id}')
        return {'id': intent.id, 'client_secret': intent.client_secret}
