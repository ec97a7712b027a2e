import functools
from typing import Callable

from chalice import Response

from chalicelib.constants.status_codes import http400, http401, http403, http404, http500
from chalicelib.utils.exceptions import MandatoryFieldsAreNotFilled, AccessDenied, NotAuthorizedException, \
    RecordNotFound, ValidationException
from chalicelib.utils.logger import logger, log_exception


def error_response(error: Exception, msg: str = "", status_code: int = 400, *args, **kwargs):
    log_exception(error=error, msg=msg, status_code=status_code, *args, **kwargs)
    return Response(
        body={
            'error': str(error),
            'exception': error.__class__.__name__,
            "message": str(msg),
            'error_id': getattr(logger, 'current_request_id', None),
            'level': getattr(error, 'LEVEL', 'exception')
        },
        status_code=status_code,
        headers={'Content-Type': 'application/json'}
    )


def request_exception_handler(func: Callable):
    @functools.wraps(func)
    def result(*args, **kwargs):
        try:
            logger.info(f'Calling function {func.__name__}')
            return func(*args, **kwargs)
        except (MandatoryFieldsAreNotFilled, ValidationException) as validation_error:
            return error_response(
                error=validation_error,
                msg=f'function = {func.__name__} , error = {validation_error}',
                status_code=http400)
        except NotAuthorizedException as not_authorized:
            setattr(not_authorized, 'LEVEL', 'warning')
            return error_response(
                error=not_authorized,
                msg='unauthorized access',
                status_code=http401)
        except AccessDenied as access_denied:
            setattr(access_denied, 'LEVEL', 'warning')
            return error_response(
                error=access_denied,
                msg='forbidden access',
                status_code=http403)
        except RecordNotFound as record_not_found:
            setattr(record_not_found, 'LEVEL', 'info')
            return error_response(
                error=record_not_found,
                msg=f'function = {func.__name__} , error = {record_not_found}',
                status_code=http404)
        except Exception as exception:
            return error_response(
                error=exception,
                msg=f'function = {func.__name__}, error = {exception}',
                status_code=http500)
    return result


def log_start_finish(func: Callable):
    @functools.wraps(func)
    def result(*args, **kwargs):
        logger.info(f'{func.__name__} ::: started')
        response = func(*args, **kwargs)
        logger.info(f'{func.__name__} ::: finished')
        return response
    return result
