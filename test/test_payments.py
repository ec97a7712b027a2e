from decimal import Decimal

from chalicelib.constants import keys_structure
from chalicelib.payments import to_minor_units
from test.utils.fixtures import user_email, other_user_email, add_test_cart_item
from test.utils.request_utils import make_request


def test_to_minor_units():
    assert to_minor_units(Decimal('12.50')) == 1250
    assert to_minor_units(Decimal('0.99')) == 99
    assert to_minor_units(Decimal('10')) == 1000


def test_create_payment_intent(chalice_client, services, user_token):
    response = make_request(chalice_client, endpoint='/create-payment-intent', method='POST',
                            json_body={'price': 25.5}, token=user_token)

    assert response.status_code == 200
    assert response.json_body == {'client_secret': 'pi_test_1_secret_test'}
    assert services.payments.intents[0]['amount'] == 2550
    assert services.payments.intents[0]['currency'] == 'usd'


def test_create_payment_intent_requires_token(chalice_client, services):
    response = make_request(chalice_client, endpoint='/create-payment-intent', method='POST',
                            json_body={'price': 25.5})

    assert response.status_code == 401
    assert services.payments.intents == []


def test_create_payment_intent_with_invalid_price(chalice_client, services, user_token):
    for body in ({'price': 0}, {'price': -3}, {'price': 'ten'}, {}):
        response = make_request(chalice_client, endpoint='/create-payment-intent', method='POST',
                                json_body=body, token=user_token)
        assert response.status_code == 400
    assert services.payments.intents == []


def test_record_payment_clears_paid_cart_items(chalice_client, services):
    paid_ids = [add_test_cart_item(chalice_client), add_test_cart_item(chalice_client, menu_item_id='menu-2')]
    kept_id = add_test_cart_item(chalice_client, menu_item_id='menu-3')

    response = make_request(chalice_client, endpoint='/payments', method='POST', json_body={
        'email': user_email,
        'price': 19.98,
        'transactionId': 'pi_123',
        'cartItemIds': paid_ids,
        'menuItemIds': ['menu-1', 'menu-2'],
        'status': 'pending'
    })

    assert response.status_code == 200
    payment_id = response.json_body['payment_result']['id']
    assert response.json_body['delete_result'] == {'deleted_count': 2}
    payment = services.store.get_db_item(keys_structure.payments_pk, payment_id)
    assert payment['transaction_id'] == 'pi_123'
    assert payment['price'] == Decimal('19.98')
    assert [item['id_'] for item in services.store.collection(keys_structure.carts_pk)] == [kept_id]


def test_record_payment_with_missing_cart_items(chalice_client, services):
    response = make_request(chalice_client, endpoint='/payments', method='POST', json_body={
        'email': user_email, 'price': 5, 'cartItemIds': ['gone']})

    assert response.status_code == 200
    assert response.json_body['delete_result'] == {'deleted_count': 0}
    assert len(services.store.collection(keys_structure.payments_pk)) == 1


def test_record_payment_validation(chalice_client, services):
    cart_item_id = add_test_cart_item(chalice_client)

    response = make_request(chalice_client, endpoint='/payments', method='POST', json_body={
        'email': user_email, 'price': 5, 'cartItemIds': 'not-a-list'})

    assert response.status_code == 400
    assert services.store.collection(keys_structure.payments_pk) == []
    assert services.store.find_db_item(keys_structure.carts_pk, cart_item_id) is not None


def test_get_payments(chalice_client, services, user_token):
    for email in (user_email, other_user_email):
        make_request(chalice_client, endpoint='/payments', method='POST', json_body={
            'email': email, 'price': 5, 'cartItemIds': []})

    response = make_request(chalice_client, endpoint=f'/payments/{user_email}', method='GET', token=user_token)
    assert response.status_code == 200
    assert [payment['email'] for payment in response.json_body] == [user_email]

    response = make_request(chalice_client, endpoint=f'/payments/{other_user_email}', method='GET',
                            token=user_token)
    assert response.status_code == 403


def test_create_payment_intent_with_nan_price(chalice_client, services, user_token):
    response = chalice_client.http.post('/create-payment-intent',
                                        headers={'Content-Type': 'application/json',
                                                 'Authorization': f'Bearer {user_token}'},
                                        body=b'{"price": NaN}')

    assert response.status_code == 400
    assert services.payments.intents == []
