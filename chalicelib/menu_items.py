from datetime import datetime
from decimal import Decimal
from typing import List, Dict, Tuple
from uuid import uuid4

from chalice import Response
from chalice.app import Request

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200
from chalicelib.utils import data as utils_data, app as utils_app
from chalicelib.utils.auth import authorize, authenticated, admin_only, get_auth_email
from chalicelib.utils.logger import logger


class MenuItem(EntityBase):
    pk = keys_structure.menu_items_pk
    sk = keys_structure.menu_items_sk
    record_type = 'menu_item'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'created_by': lambda x: isinstance(x, str),
        "date_created": lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'name_': lambda x: isinstance(x, str) and len(x) > 0,
        'category': lambda x: isinstance(x, str) and len(x) > 0,
        'price': lambda x: isinstance(x, Decimal) and x >= 0,
        "date_updated": lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'recipe': lambda x: isinstance(x, str),
        'image': lambda x: isinstance(x, str)
    }

    def __init__(self, store, id_, **kwargs):
        EntityBase.__init__(self, store, id_)

        self.name_: str = kwargs.get('name_')
        self.recipe: str = kwargs.get('recipe')
        self.image: str = kwargs.get('image')
        self.category: str = kwargs.get('category')
        self.price: Decimal = utils_data.to_price(kwargs.get('price'))
        self.created_by: str = kwargs.get('created_by')
        self.date_created: str = kwargs.get('date_created') or datetime.now().isoformat(timespec="seconds")
        self.date_updated: str = kwargs.get('date_updated') or datetime.now().isoformat(timespec="seconds")

    @classmethod
    def init_request_create(cls, request: Request, store) -> 'MenuItem':
        request_body = cls.whitelist_body(utils_data.parse_raw_body(request))
        for key in ('id_', 'date_created', 'date_updated'):
            request_body.pop(key, None)
        request_body['created_by'] = get_auth_email(request)
        return cls(store, str(uuid4()), **request_body)

    @classmethod
    def init_get_by_id(cls, store, menu_item_id: str) -> 'MenuItem':
        return cls(store, **store.get_db_item(cls.pk, cls.sk.format(menu_item_id=menu_item_id)))

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(menu_item_id=self.id_)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'name_': self.name_,
            'recipe': self.recipe,
            'image': self.image,
            'category': self.category,
            'price': self.price,
            'created_by': self.created_by,
            "date_created": self.date_created,
            "date_updated": self.date_updated
        }


def get_menu_items_by_id(store) -> Dict[str, Dict]:
    return {record['id_']: record for record in store.query_items_paged(MenuItem.pk)}


@utils_app.request_exception_handler
@authorize()
@utils_app.log_start_finish
def endpoint_get_menu_items(request: Request, services) -> Response:
    menu_item_db_records: List[Dict] = services.store.query_items_paged(MenuItem.pk)
    menu_items = [utils_data.record_to_ui(record) for record in menu_item_db_records]
    logger.info(f"endpoint_get_menu_items ::: returning {len(menu_items)} menu items")
    return Response(status_code=http200, body=menu_items)


@utils_app.request_exception_handler
@authorize()
@utils_app.log_start_finish
def endpoint_get_menu_item(request: Request, services, menu_item_id: str) -> Response:
    return Response(status_code=http200, body=MenuItem.init_get_by_id(services.store, menu_item_id)._to_ui())


@utils_app.request_exception_handler
@authorize(authenticated, admin_only)
@utils_app.log_start_finish
def endpoint_create_menu_item(request: Request, services) -> Response:
    menu_item = MenuItem.init_request_create(request, services.store)
    menu_item._create_db_record()
    return Response(status_code=http200, body={'message': 'Menu item successfully created', 'id': menu_item.id_})


@utils_app.request_exception_handler
@authorize(authenticated, admin_only)
@utils_app.log_start_finish
def endpoint_update_menu_item(request: Request, services, menu_item_id: str) -> Response:
    update_body = utils_data.parse_raw_body(request)
    if 'price' in update_body:
        update_body['price'] = utils_data.to_price(update_body['price'])
    MenuItem(services.store, menu_item_id)._update_db_record(update_body)
    return Response(status_code=http200, body={'message': 'Menu item was successfully updated', 'id': menu_item_id,
                                               'modified_count': 1})


@utils_app.request_exception_handler
@authorize(authenticated, admin_only)
@utils_app.log_start_finish
def endpoint_delete_menu_item(request: Request, services, menu_item_id: str) -> Response:
    deleted_count = MenuItem(services.store, menu_item_id)._delete_db_record()
    return Response(status_code=http200, body={'deleted_count': deleted_count})
