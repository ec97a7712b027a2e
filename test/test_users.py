from chalicelib.constants import keys_structure
from test.utils.fixtures import admin_email, user_email, other_user_email, put_test_user
from test.utils.request_utils import make_request


def test_create_user(chalice_client, services):
    response = make_request(chalice_client, endpoint='/users', method='POST',
                            json_body={'email': 'new@bistro.test', 'name': 'New', 'photoURL': 'http://img',
                                       'unexpected_field': 'unexpected_value'})

    assert response.status_code == 200
    user_id = response.json_body['id']
    db_record = services.store.get_db_item(keys_structure.users_pk, 'new@bistro.test')
    assert db_record['id_'] == user_id
    assert db_record['name_'] == 'New'
    assert db_record['photo_url'] == 'http://img'
    assert 'role' not in db_record
    assert 'unexpected_field' not in db_record


def test_create_existing_user_is_noop(chalice_client, services):
    existing_id = put_test_user(services, user_email)

    response = make_request(chalice_client, endpoint='/users', method='POST',
                            json_body={'email': user_email, 'name': 'Second'})

    assert response.status_code == 200
    assert response.json_body == {'message': 'user already exists', 'id': None}
    users = services.store.collection(keys_structure.users_pk)
    assert len(users) == 1
    assert users[0]['id_'] == existing_id


def test_create_user_can_not_set_role(chalice_client, services):
    make_request(chalice_client, endpoint='/users', method='POST',
                 json_body={'email': 'sneaky@bistro.test', 'role': 'admin'})

    assert 'role' not in services.store.get_db_item(keys_structure.users_pk, 'sneaky@bistro.test')


def test_create_user_without_email(chalice_client, services):
    response = make_request(chalice_client, endpoint='/users', method='POST', json_body={'name': 'Nobody'})

    assert response.status_code == 400
    assert services.store.collection(keys_structure.users_pk) == []


def test_create_user_with_invalid_json(chalice_client):
    response = chalice_client.http.post('/users', headers={'Content-Type': 'application/json'}, body=b'[1, 2]')

    assert response.status_code == 400


def test_check_admin_for_regular_user(chalice_client, services):
    token_response = make_request(chalice_client, endpoint='/jwt', method='POST', json_body={'email': user_email})
    put_test_user(services, user_email)

    response = make_request(chalice_client, endpoint=f'/users/admin/{user_email}', method='GET',
                            token=token_response.json_body['token'])

    assert response.status_code == 200
    assert response.json_body == {'admin': False}


def test_check_admin_for_admin(chalice_client, admin_token):
    response = make_request(chalice_client, endpoint=f'/users/admin/{admin_email}', method='GET', token=admin_token)

    assert response.json_body == {'admin': True}


def test_check_admin_of_somebody_else(chalice_client, user_token):
    response = make_request(chalice_client, endpoint=f'/users/admin/{admin_email}', method='GET', token=user_token)

    assert response.status_code == 200
    assert response.json_body == {'admin': False}


def test_check_admin_requires_token(chalice_client):
    response = make_request(chalice_client, endpoint=f'/users/admin/{user_email}', method='GET')

    assert response.status_code == 401


def test_promote_then_check_admin(chalice_client, services, admin_token):
    user_id = put_test_user(services, other_user_email)
    other_token = services.tokens.issue({'email': other_user_email})

    response = make_request(chalice_client, endpoint=f'/users/admin/{user_id}', method='PATCH', token=admin_token)
    assert response.status_code == 200
    assert response.json_body['modified_count'] == 1

    response = make_request(chalice_client, endpoint=f'/users/admin/{other_user_email}', method='GET',
                            token=other_token)
    assert response.json_body == {'admin': True}


def test_promote_unknown_user(chalice_client, admin_token):
    response = make_request(chalice_client, endpoint='/users/admin/unknown-id', method='PATCH', token=admin_token)

    assert response.status_code == 404


def test_get_users(chalice_client, services, admin_token):
    put_test_user(services, user_email)

    response = make_request(chalice_client, endpoint='/users', method='GET', token=admin_token)

    assert response.status_code == 200
    assert sorted(user['email'] for user in response.json_body) == [admin_email, user_email]
    for user in response.json_body:
        assert 'id' in user and 'name' in user
        assert 'partkey' not in user and 'sortkey' not in user and 'id_' not in user


def test_delete_user(chalice_client, services, admin_token):
    user_id = put_test_user(services, user_email)

    response = make_request(chalice_client, endpoint=f'/users/{user_id}', method='DELETE', token=admin_token)
    assert response.json_body == {'deleted_count': 1}
    assert services.store.find_db_item(keys_structure.users_pk, user_email) is None

    response = make_request(chalice_client, endpoint=f'/users/{user_id}', method='DELETE', token=admin_token)
    assert response.json_body == {'deleted_count': 0}
