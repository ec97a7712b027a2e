import os

from chalicelib.utils.db import DynamoDBStore
from chalicelib.utils.logger import logger
from chalicelib.utils.payments import StripePaymentGateway
from chalicelib.utils.tokens import TokenService


class Services:
    """
    External collaborators of the route handlers:
    store - DynamoDBStore or anything with the same methods
    payments - StripePaymentGateway or anything with create_payment_intent
    tokens - TokenService
    """

    def __init__(self, store, payments, tokens: TokenService):
        self.store = store
        self.payments = payments
        self.tokens = tokens

    @classmethod
    def from_environ(cls) -> 'Services':
        return cls(
            store=DynamoDBStore(os.environ['GEN_TABLE_NAME'], endpoint_url=os.environ.get('ENDPOINT_URL')),
            payments=StripePaymentGateway(os.environ.get('STRIPE_SECRET_KEY', '')),
            tokens=TokenService(os.environ.get('ACCESS_TOKEN_SECRET', ''))
        )

    def open(self) -> 'Services':
        self.store.open()
        logger.info('Services.open ::: services are ready')
        return self

    def close(self) -> None:
        self.store.close()
        logger.info('Services.close ::: services are closed')
