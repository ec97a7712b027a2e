from datetime import datetime
from decimal import Decimal
from typing import Tuple, List, Dict
from uuid import uuid4

from chalice import Response
from chalice.app import Request

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200
from chalicelib.users import is_email
from chalicelib.utils import data as utils_data, app as utils_app
from chalicelib.utils.auth import authorize, authenticated, owner_of
from chalicelib.utils.logger import logger


class CartItem(EntityBase):
    """
    A menu item the user has selected but not paid yet.
    The owner is referenced by email only
    """
    pk = keys_structure.carts_pk
    sk = keys_structure.carts_sk
    record_type = 'cart_item'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'email': is_email,
        'menu_item_id': lambda x: isinstance(x, str) and len(x) > 0,
        'price': lambda x: isinstance(x, Decimal) and x >= 0,
        'date_created': lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'name_': lambda x: isinstance(x, str),
        'image': lambda x: isinstance(x, str)
    }

    def __init__(self, store, id_, **kwargs):
        EntityBase.__init__(self, store, id_)

        self.email: str = kwargs.get('email')
        self.menu_item_id: str = kwargs.get('menu_item_id')
        self.name_: str = kwargs.get('name_')
        self.image: str = kwargs.get('image')
        self.price: Decimal = utils_data.to_price(kwargs.get('price'))
        self.date_created: str = kwargs.get('date_created') or datetime.now().isoformat(timespec='seconds')

    @classmethod
    def init_request_create(cls, request: Request, store) -> 'CartItem':
        request_body = cls.whitelist_body(utils_data.parse_raw_body(request))
        for key in ('id_', 'date_created'):
            request_body.pop(key, None)
        return cls(store, str(uuid4()), **request_body)

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(cart_item_id=self.id_)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'email': self.email,
            'menu_item_id': self.menu_item_id,
            'name_': self.name_,
            'image': self.image,
            'price': self.price,
            'date_created': self.date_created
        }


def delete_cart_items(store, cart_item_ids: List[str]) -> int:
    """
    Deletes cart items one by one, absent ids are skipped
    :return:
    number of deleted items
    """
    deleted_count = sum(CartItem(store, cart_item_id)._delete_db_record() for cart_item_id in cart_item_ids)
    logger.info(f'delete_cart_items ::: {deleted_count} of {len(cart_item_ids)} cart items deleted')
    return deleted_count


@utils_app.request_exception_handler
@authorize(authenticated, owner_of('email', source='query'))
@utils_app.log_start_finish
def endpoint_get_cart_items(request: Request, services) -> Response:
    email = request.query_params.get('email')
    cart_db_records: List[Dict] = services.store.query_items_paged(CartItem.pk, filters={'email': email})
    return Response(status_code=http200, body=[utils_data.record_to_ui(record) for record in cart_db_records])


@utils_app.request_exception_handler
@authorize()
@utils_app.log_start_finish
def endpoint_add_item_to_cart(request: Request, services) -> Response:
    cart_item = CartItem.init_request_create(request, services.store)
    cart_item._create_db_record()
    return Response(status_code=http200, body={'message': 'Item was successfully added to the cart',
                                               'id': cart_item.id_})


@utils_app.request_exception_handler
@authorize()
@utils_app.log_start_finish
def endpoint_remove_item_from_cart(request: Request, services, cart_item_id: str) -> Response:
    deleted_count = CartItem(services.store, cart_item_id)._delete_db_record()
    return Response(status_code=http200, body={'deleted_count': deleted_count})
