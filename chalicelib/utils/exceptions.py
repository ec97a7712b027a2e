__all__ = ["NotAuthorizedException", "InvalidToken", "ExpiredToken", "BadSignature", "AccessDenied",
           "RecordNotFound", "MandatoryFieldsAreNotFilled", "ValidationException"]


# Authentication exceptions, all of them are reported as 401
class NotAuthorizedException(Exception):
    pass


class InvalidToken(NotAuthorizedException):
    pass


class ExpiredToken(NotAuthorizedException):
    pass


class BadSignature(NotAuthorizedException):
    pass


# Generic Exceptions
class AccessDenied(Exception):
    pass


class MandatoryFieldsAreNotFilled(Exception):
    pass


# DynamoDB exceptions
class RecordNotFound(Exception):
    pass


# Validations exceptions
class ValidationException(Exception):
    pass
