import os
from typing import Optional

from chalice import Chalice, Response

from chalicelib import carts, menu_items, payments, reports, reviews, users
from chalicelib.constants.constants import LIVENESS_MESSAGE
from chalicelib.constants.status_codes import http200
from chalicelib.utils.services import Services

app = Chalice(app_name='bistro-boss')

app.debug = os.environ.get('DEBUG', 'false').lower() == 'true'

_services: Optional[Services] = None


def get_services() -> Services:
    """
    Services are opened on the first request and kept for the process lifetime
    """
    global _services
    if _services is None:
        _services = Services.from_environ().open()
    return _services


def set_services(services: Optional[Services]) -> None:
    global _services
    if _services is not None and _services is not services:
        _services.close()
    _services = services.open() if services is not None else None


@app.route('/', methods=['GET'], cors=True)
def index():
    return Response(status_code=http200, body=LIVENESS_MESSAGE, headers={'Content-Type': 'text/plain'})


# TOKENS
@app.route('/jwt', methods=['POST'], cors=True)
def issue_token():
    return users.endpoint_issue_token(app.current_request, get_services())


# USERS
@app.route('/users', methods=['GET'], cors=True)
def get_users():
    """
    admin operation
    """
    return users.endpoint_get_users(app.current_request, get_services())


@app.route('/users', methods=['POST'], cors=True)
def create_user():
    return users.endpoint_create_user(app.current_request, get_services())


@app.route('/users/admin/{user_key}', methods=['GET'], cors=True)
def check_admin(user_key):
    """
    user_key is the email of the caller
    """
    return users.endpoint_check_admin(app.current_request, get_services(), user_key)


@app.route('/users/admin/{user_key}', methods=['PATCH'], cors=True)
def make_admin(user_key):
    """
    admin operation, user_key is the id of the user to promote
    """
    return users.endpoint_make_admin(app.current_request, get_services(), user_key)


@app.route('/users/{user_id}', methods=['DELETE'], cors=True)
def delete_user(user_id):
    """
    admin operation
    """
    return users.endpoint_delete_user(app.current_request, get_services(), user_id)


# MENU ITEMS
@app.route('/menu', methods=['GET'], cors=True)
def get_menu():
    return menu_items.endpoint_get_menu_items(app.current_request, get_services())


@app.route('/menu/{menu_item_id}', methods=['GET'], cors=True)
def get_menu_item(menu_item_id):
    return menu_items.endpoint_get_menu_item(app.current_request, get_services(), menu_item_id)


@app.route('/menu', methods=['POST'], cors=True)
def create_menu_item():
    """
    admin operation
    """
    return menu_items.endpoint_create_menu_item(app.current_request, get_services())


@app.route('/menu/{menu_item_id}', methods=['PATCH'], cors=True)
def update_menu_item(menu_item_id):
    """
    admin operation
    """
    return menu_items.endpoint_update_menu_item(app.current_request, get_services(), menu_item_id)


@app.route('/menu/{menu_item_id}', methods=['DELETE'], cors=True)
def delete_menu_item(menu_item_id):
    """
    admin operation
    """
    return menu_items.endpoint_delete_menu_item(app.current_request, get_services(), menu_item_id)


# REVIEWS
@app.route('/reviews', methods=['GET'], cors=True)
def get_reviews():
    return reviews.endpoint_get_reviews(app.current_request, get_services())


@app.route('/reviews', methods=['POST'], cors=True)
def create_review():
    """
    admin operation
    """
    return reviews.endpoint_create_review(app.current_request, get_services())


@app.route('/reviews/{review_id}', methods=['DELETE'], cors=True)
def delete_review(review_id):
    """
    admin operation
    """
    return reviews.endpoint_delete_review(app.current_request, get_services(), review_id)


# CART
@app.route('/carts', methods=['GET'], cors=True)
def get_cart():
    """
    users can get only their own cart, ?email= should be the caller's email
    """
    return carts.endpoint_get_cart_items(app.current_request, get_services())


@app.route('/carts', methods=['POST'], cors=True)
def add_item_to_cart():
    return carts.endpoint_add_item_to_cart(app.current_request, get_services())


@app.route('/carts/{cart_item_id}', methods=['DELETE'], cors=True)
def remove_item_from_cart(cart_item_id):
    return carts.endpoint_remove_item_from_cart(app.current_request, get_services(), cart_item_id)


# PAYMENTS
@app.route('/create-payment-intent', methods=['POST'], cors=True)
def create_payment_intent():
    return payments.endpoint_create_payment_intent(app.current_request, get_services())


@app.route('/payments', methods=['POST'], cors=True)
def record_payment():
    """
    The paid cart items are deleted after the payment is saved
    """
    return payments.endpoint_record_payment(app.current_request, get_services())


@app.route('/payments/{email}', methods=['GET'], cors=True)
def get_payments(email):
    """
    users can get only their own payments
    """
    return payments.endpoint_get_payments(app.current_request, get_services(), email)


# REPORTS
@app.route('/admin-stats', methods=['GET'], cors=True)
def admin_stats():
    """
    admin operation
    """
    return reports.endpoint_admin_stats(app.current_request, get_services())


@app.route('/order-stats', methods=['GET'], cors=True)
def order_stats():
    return reports.endpoint_order_stats(app.current_request, get_services())
