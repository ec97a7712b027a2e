from collections import OrderedDict
from decimal import Decimal
from typing import Dict, List

from chalice import Response
from chalice.app import Request

from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200
from chalicelib.menu_items import get_menu_items_by_id
from chalicelib.utils import app as utils_app
from chalicelib.utils.auth import authorize, authenticated, admin_only
from chalicelib.utils.logger import logger


def get_admin_stats(store) -> Dict:
    payments: List[Dict] = store.query_items_paged(keys_structure.payments_pk)
    revenue = sum((Decimal(payment.get('price', 0)) for payment in payments), Decimal('0'))
    return {
        'users': store.count_items(keys_structure.users_pk),
        'menu_items': store.count_items(keys_structure.menu_items_pk),
        'orders': len(payments),
        'revenue': revenue.quantize(Decimal('1.00'))
    }


def get_order_stats(store) -> List[Dict]:
    """
    Every menu item id of every payment is counted once in its category,
    ids of deleted menu items are skipped
    """
    menu_items = get_menu_items_by_id(store)
    stats: Dict[str, Dict] = OrderedDict()
    for payment in store.query_items_paged(keys_structure.payments_pk):
        for menu_item_id in payment.get('menu_item_ids') or []:
            menu_item = menu_items.get(menu_item_id)
            if menu_item is None:
                logger.warning(f'get_order_stats ::: {menu_item_id=} of payment {payment.get("id_")} not found')
                continue
            category = stats.setdefault(menu_item['category'], {
                'category': menu_item['category'],
                'quantity': 0,
                'revenue': Decimal('0')
            })
            category['quantity'] += 1
            category['revenue'] += Decimal(menu_item.get('price', 0))
    for category in stats.values():
        category['revenue'] = category['revenue'].quantize(Decimal('1.00'))
    return list(stats.values())


@utils_app.request_exception_handler
@authorize(authenticated, admin_only)
@utils_app.log_start_finish
def endpoint_admin_stats(request: Request, services) -> Response:
    return Response(status_code=http200, body=get_admin_stats(services.store))


@utils_app.request_exception_handler
@authorize()
@utils_app.log_start_finish
def endpoint_order_stats(request: Request, services) -> Response:
    return Response(status_code=http200, body=get_order_stats(services.store))
