from datetime import datetime
from uuid import uuid4

import pytest
from chalice.test import Client

import app as app_module
from chalicelib.constants import keys_structure
from chalicelib.utils.services import Services
from chalicelib.utils.tokens import TokenService
from test.utils.fakes import InMemoryStore, FakePaymentGateway
from test.utils.request_utils import make_request

TEST_TOKEN_SECRET = 'test-access-token-secret-with-enough-length'

admin_email = 'admin@bistro.test'
user_email = 'user@bistro.test'
other_user_email = 'other@bistro.test'


@pytest.fixture
def services() -> Services:
    services = Services(store=InMemoryStore(), payments=FakePaymentGateway(),
                        tokens=TokenService(TEST_TOKEN_SECRET))
    app_module.set_services(services)
    yield services
    app_module.set_services(None)


@pytest.fixture
def chalice_client(services) -> Client:
    with Client(app_module.app) as client:
        yield client


def put_test_user(services: Services, email: str, role=None) -> str:
    user_id = str(uuid4())
    record = {
        'partkey': keys_structure.users_pk,
        'sortkey': keys_structure.users_sk.format(email=email),
        'record_type': 'user',
        'id_': user_id,
        'email': email,
        'name_': email.split('@')[0],
        'date_created': datetime.today().isoformat(timespec='seconds')
    }
    if role:
        record['role'] = role
    services.store.put_db_record(record)
    return user_id


@pytest.fixture
def admin_token(services) -> str:
    put_test_user(services, admin_email, role='admin')
    return services.tokens.issue({'email': admin_email})


@pytest.fixture
def user_token(services) -> str:
    put_test_user(services, user_email)
    return services.tokens.issue({'email': user_email})


def add_test_cart_item(chalice_client, email=user_email, menu_item_id='menu-1', price=9.99) -> str:
    response = make_request(chalice_client, endpoint='/carts', method='POST',
                            json_body={'email': email, 'menuItemId': menu_item_id, 'name': 'Soup', 'price': price})
    assert response.status_code == 200, response.json_body
    return response.json_body['id']
