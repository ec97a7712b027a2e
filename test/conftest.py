from test.utils.fixtures import services, chalice_client, admin_token, user_token  # noqa: F401
