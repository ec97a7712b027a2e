# api key -> db key
to_db = {
    'id': 'id_',
    'name': 'name_',
    'photoURL': 'photo_url',
    'menuItemId': 'menu_item_id',
    'menuItemIds': 'menu_item_ids',
    'cartItemIds': 'cart_item_ids',
    'transactionId': 'transaction_id'
}

# db key -> api key, None means the key is not exposed
from_db = {
    'id_': 'id',
    'name_': 'name',
    'partkey': None,
    'sortkey': None,
    'record_type': None
}
