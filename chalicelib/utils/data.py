import json
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from chalicelib.constants import substitute_keys as substitute_keys_maps
from chalicelib.utils.exceptions import ValidationException


def replace_dict_key(item, orig_key, new_key):
    if orig_key in item:
        if new_key not in item:
            item[new_key] = item[orig_key]
        del item[orig_key]


def substitute_keys(dict_to_process: dict, base_keys: dict, opt_dict=None):
    if opt_dict is None:
        opt_dict = {}
    all_keys = {**base_keys, **opt_dict}
    for key, val in all_keys.items():
        if val:
            replace_dict_key(dict_to_process, key, val)
        elif key in dict_to_process.keys():
            dict_to_process.pop(key, None)


def record_to_ui(record: dict) -> dict:
    item = dict(record)
    substitute_keys(dict_to_process=item, base_keys=substitute_keys_maps.from_db)
    return item


def parse_raw_body(chalice_request):
    """
    Request body as dict with db keys, floats are parsed to Decimal
    Raise ValidationException if the body is not a json object
    """
    request_raw_body = chalice_request.raw_body
    if not request_raw_body:
        return {}
    try:
        item = json.loads(request_raw_body, parse_float=Decimal)
    except ValueError as error:
        raise ValidationException(f'Request body is not a valid json: {error}')
    if not isinstance(item, dict):
        raise ValidationException('Request body should be a json object')
    item = fix_values_from_ui(item)
    substitute_keys(dict_to_process=item, base_keys=substitute_keys_maps.to_db)
    return item


def fix_values_from_ui(item):
    """
    Remove keys with empty or None values
    """
    if item.get('_values_from_ui_strategy') == 'delete_empty':
        list_to_cleanup = ['', None]
    else:
        list_to_cleanup = [None]
    item = cleanup_dict(item, list_to_cleanup)
    item.pop('_values_from_ui_strategy', None)
    return item


def cleanup_dict(item: dict, list_of_values: list):
    """ Remove None fields in dict with. Supports one nesting.  """

    def sub_clean(sub_item):
        return {
            key: value
            for key, value in sub_item.items()
            if value not in list_of_values
        }

    clean = {}
    for k, v in item.items():
        if isinstance(v, dict):
            nested = sub_clean(v)
            if len(nested.keys()) > 0:
                clean[k] = nested
        elif v not in list_of_values:
            clean[k] = v
    return clean


def to_price(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool) or type(value) not in [int, float, Decimal]:
        return None
    price = Decimal(str(value))
    if not price.is_finite():
        return None
    try:
        return price.quantize(Decimal('1.00'))
    except InvalidOperation:
        return None
