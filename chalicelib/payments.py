from datetime import datetime
from decimal import Decimal
from typing import Tuple, List, Dict
from uuid import uuid4

from chalice import Response
from chalice.app import Request

from chalicelib.base_class_entity import EntityBase
from chalicelib.carts import delete_cart_items
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import PAYMENT_CURRENCY
from chalicelib.constants.status_codes import http200
from chalicelib.users import is_email
from chalicelib.utils import data as utils_data, app as utils_app, exceptions
from chalicelib.utils.auth import authorize, authenticated, owner_of
from chalicelib.utils.logger import logger


def is_list_of_ids(value) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) and item for item in value)


class Payment(EntityBase):
    """
    Payment is written once after the client has confirmed the payment intent
    """
    pk = keys_structure.payments_pk
    sk = keys_structure.payments_sk
    record_type = 'payment'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'email': is_email,
        'price': lambda x: isinstance(x, Decimal) and x >= 0,
        'cart_item_ids': is_list_of_ids,
        'date_created': lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'transaction_id': lambda x: isinstance(x, str),
        'menu_item_ids': is_list_of_ids,
        'status': lambda x: isinstance(x, str)
    }

    def __init__(self, store, id_, **kwargs):
        EntityBase.__init__(self, store, id_)

        self.email: str = kwargs.get('email')
        self.price: Decimal = utils_data.to_price(kwargs.get('price'))
        self.transaction_id: str = kwargs.get('transaction_id')
        self.cart_item_ids: List[str] = kwargs.get('cart_item_ids')
        self.menu_item_ids: List[str] = kwargs.get('menu_item_ids')
        self.status: str = kwargs.get('status')
        self.date_created: str = kwargs.get('date_created') or datetime.now().isoformat(timespec='seconds')

    @classmethod
    def init_request_create(cls, request: Request, store) -> 'Payment':
        request_body = cls.whitelist_body(utils_data.parse_raw_body(request))
        for key in ('id_', 'date_created'):
            request_body.pop(key, None)
        return cls(store, str(uuid4()), **request_body)

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(payment_id=self.id_)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'email': self.email,
            'price': self.price,
            'transaction_id': self.transaction_id,
            'cart_item_ids': self.cart_item_ids,
            'menu_item_ids': self.menu_item_ids,
            'status': self.status,
            'date_created': self.date_created
        }


def to_minor_units(price: Decimal) -> int:
    return int(price * 100)


@utils_app.request_exception_handler
@authorize(authenticated)
@utils_app.log_start_finish
def endpoint_create_payment_intent(request: Request, services) -> Response:
    price = utils_data.to_price(utils_data.parse_raw_body(request).get('price'))
    if price is None or price <= 0:
        raise exceptions.ValidationException('price should be a positive number')
    intent = services.payments.create_payment_intent(amount=to_minor_units(price), currency=PAYMENT_CURRENCY)
    return Response(status_code=http200, body={'client_secret': intent['client_secret']})


@utils_app.request_exception_handler
@authorize()
@utils_app.log_start_finish
def endpoint_record_payment(request: Request, services) -> Response:
    """
    Saves the payment and then clears the paid cart items.
    Cart items are not restored if the payment is saved and deletion fails
    """
    payment = Payment.init_request_create(request, services.store)
    payment._create_db_record()
    deleted_count = delete_cart_items(services.store, payment.cart_item_ids)
    logger.info(f'endpoint_record_payment ::: payment {payment.id_} recorded, {deleted_count=}')
    return Response(status_code=http200, body={
        'payment_result': {'id': payment.id_},
        'delete_result': {'deleted_count': deleted_count}
    })


@utils_app.request_exception_handler
@authorize(authenticated, owner_of('email', source='uri'))
@utils_app.log_start_finish
def endpoint_get_payments(request: Request, services, email: str) -> Response:
    payment_db_records: List[Dict] = services.store.query_items_paged(Payment.pk, filters={'email': email})
    return Response(status_code=http200, body=[utils_data.record_to_ui(record) for record in payment_db_records])
