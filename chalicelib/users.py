from datetime import datetime
from typing import Tuple, List, Dict
from uuid import uuid4

from chalice import Response
from chalice.app import Request

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import ADMIN_ROLE
from chalicelib.constants.status_codes import http200
from chalicelib.utils import app as utils_app, data as utils_data, exceptions
from chalicelib.utils.auth import authorize, authenticated, admin_only, get_auth_email
from chalicelib.utils.logger import logger


def is_email(value) -> bool:
    return isinstance(value, str) and '@' in value and len(value) <= 320


class User(EntityBase):
    pk = keys_structure.users_pk
    sk = keys_structure.users_sk
    record_type = 'user'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'email': is_email,
        'date_created': lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'name_': lambda x: isinstance(x, str),
        'photo_url': lambda x: isinstance(x, str),
        'role': lambda x: x == ADMIN_ROLE
    }

    def __init__(self, store, id_, **kwargs):
        EntityBase.__init__(self, store, id_)

        self.email: str = kwargs.get('email')
        self.name_: str = kwargs.get('name_')
        self.photo_url: str = kwargs.get('photo_url')
        self.role: str = kwargs.get('role')
        self.date_created: str = kwargs.get('date_created') or datetime.now().isoformat(timespec='seconds')

    @classmethod
    def init_request_create(cls, request: Request, store) -> 'User':
        request_body = cls.whitelist_body(utils_data.parse_raw_body(request))
        # role is granted only by an admin, ids and dates are ours
        for key in ('role', 'id_', 'date_created'):
            request_body.pop(key, None)
        return cls(store, str(uuid4()), **request_body)

    @classmethod
    def init_by_email(cls, store, email: str) -> 'User':
        return cls(store, **store.get_db_item(cls.pk, cls.sk.format(email=email)))

    @classmethod
    def init_by_id(cls, store, user_id: str) -> 'User':
        records = store.query_items_paged(cls.pk, filters={'id_': user_id})
        if not records:
            raise exceptions.RecordNotFound(f'user {user_id} not found')
        return cls(store, **records[0])

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    def create_if_absent(self) -> bool:
        """
        Atomic insert keyed by email
        :return:
        False if a user with the same email already exists
        """
        self._init_db_record()
        self._validate_mandatory_fields()
        self._validate_optional_fields()
        created = self.store.put_db_record_if_absent(self.db_record)
        logger.info(f"create_if_absent ::: user {self.email=} {created=}")
        return created

    def promote_to_admin(self) -> Dict:
        updated = self._update_db_record({'role': ADMIN_ROLE})
        self.role = ADMIN_ROLE
        return updated

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(email=self.email)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'email': self.email,
            'name_': self.name_,
            'photo_url': self.photo_url,
            'role': self.role,
            'date_created': self.date_created
        }


@utils_app.request_exception_handler
@authorize(authenticated, admin_only)
@utils_app.log_start_finish
def endpoint_get_users(request: Request, services) -> Response:
    user_records: List[Dict] = services.store.query_items_paged(User.pk)
    return Response(status_code=http200, body=[utils_data.record_to_ui(record) for record in user_records])


@utils_app.request_exception_handler
@authorize()
@utils_app.log_start_finish
def endpoint_create_user(request: Request, services) -> Response:
    user = User.init_request_create(request, services.store)
    if not user.create_if_absent():
        return Response(status_code=http200, body={'message': 'user already exists', 'id': None})
    return Response(status_code=http200, body={'message': 'User was successfully created', 'id': user.id_})


@utils_app.request_exception_handler
@authorize(authenticated)
@utils_app.log_start_finish
def endpoint_check_admin(request: Request, services, email: str) -> Response:
    """
    Tells the caller whether it is an admin, asking about somebody else always gives False
    """
    if email != get_auth_email(request):
        logger.warning(f'endpoint_check_admin ::: {email=} is not the caller')
        return Response(status_code=http200, body={'admin': False})
    try:
        user = User.init_by_email(services.store, email)
    except exceptions.RecordNotFound:
        return Response(status_code=http200, body={'admin': False})
    return Response(status_code=http200, body={'admin': user.is_admin})


@utils_app.request_exception_handler
@authorize(authenticated, admin_only)
@utils_app.log_start_finish
def endpoint_make_admin(request: Request, services, user_id: str) -> Response:
    user = User.init_by_id(services.store, user_id)
    user.promote_to_admin()
    return Response(status_code=http200, body={'message': 'User was successfully promoted', 'id': user.id_,
                                               'modified_count': 1})


@utils_app.request_exception_handler
@authorize(authenticated, admin_only)
@utils_app.log_start_finish
def endpoint_delete_user(request: Request, services, user_id: str) -> Response:
    try:
        user = User.init_by_id(services.store, user_id)
    except exceptions.RecordNotFound:
        return Response(status_code=http200, body={'deleted_count': 0})
    return Response(status_code=http200, body={'deleted_count': user._delete_db_record()})


@utils_app.request_exception_handler
@authorize()
@utils_app.log_start_finish
def endpoint_issue_token(request: Request, services) -> Response:
    email = utils_data.parse_raw_body(request).get('email')
    if not is_email(email):
        raise exceptions.ValidationException('email is required to issue a token')
    return Response(status_code=http200, body={'token': services.tokens.issue({'email': email})})
