import functools
from typing import Callable, NamedTuple, Optional, Type

from chalice.app import Request

from chalicelib.constants import keys_structure
from chalicelib.constants.constants import ADMIN_ROLE
from chalicelib.utils import exceptions as utils_exceptions
from chalicelib.utils.logger import log_request, logger, set_request_id
from chalicelib.utils.tokens import token_from_header


class Decision(NamedTuple):
    allowed: bool
    reason: str = ''
    denial: Optional[Type[Exception]] = None


ALLOW = Decision(allowed=True)


def deny_unauthorized(reason: str) -> Decision:
    return Decision(allowed=False, reason=reason, denial=utils_exceptions.NotAuthorizedException)


def deny_forbidden(reason: str) -> Decision:
    return Decision(allowed=False, reason=reason, denial=utils_exceptions.AccessDenied)


def authenticated(request: Request, services) -> Decision:
    """
    Bearer token check, on success request.auth_result has the caller's email
    """
    try:
        claims = services.tokens.verify(token_from_header(request.headers.get('authorization')))
    except utils_exceptions.NotAuthorizedException as error:
        return Decision(allowed=False, reason=str(error), denial=type(error))
    setattr(request, 'auth_result', {'email': claims['email']})
    return ALLOW


def admin_only(request: Request, services) -> Decision:
    """
    Should go after authenticated
    """
    email = get_auth_email(request)
    if email is None:
        return deny_unauthorized('caller is not authenticated')
    user_item = services.store.find_db_item(keys_structure.users_pk, keys_structure.users_sk.format(email=email))
    if user_item is None or user_item.get('role') != ADMIN_ROLE:
        return deny_forbidden(f'user {email} is not an admin')
    return ALLOW


def owner_of(param_name: str, source: str = 'query') -> Callable:
    """
    The caller may only access resources of its own email,
    the email is taken from the query string or from the uri params
    """

    def check(request: Request, services) -> Decision:
        params = request.query_params if source == 'query' else request.uri_params
        value = (params or {}).get(param_name)
        if not value:
            return Decision(allowed=False, reason=f'{param_name} parameter is required',
                            denial=utils_exceptions.ValidationException)
        email = get_auth_email(request)
        if email is None:
            return deny_unauthorized('caller is not authenticated')
        if value != email:
            return deny_forbidden(f'{param_name}={value} does not belong to the caller')
        return ALLOW

    check.__name__ = f'owner_of_{source}_{param_name}'
    return check


def get_auth_email(request: Request) -> Optional[str]:
    return (getattr(request, 'auth_result', None) or {}).get('email')


def run_checks(request: Request, services, checks) -> None:
    for check in checks:
        decision: Decision = check(request, services)
        if not decision.allowed:
            logger.warning(f'authorize ::: {check.__name__} denied, reason={decision.reason}')
            raise decision.denial(decision.reason)
        logger.debug(f'authorize ::: {check.__name__} allowed')


def authorize(*checks: Callable):
    """
    Wrapper for endpoints with signature (request, services, ...).
    Checks are run in the given order, the first denial stops the request
    """

    def decorator(func):
        @functools.wraps(func)
        def result_auth(request: Request, services, *args, **kwargs):
            set_request_id(request)
            log_request(request)
            run_checks(request, services, checks)
            return func(request, services, *args, **kwargs)

        return result_auth

    return decorator
