from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import jwt

from chalicelib.constants.constants import ACCESS_TOKEN_TTL_SECONDS, ACCESS_TOKEN_ALGORITHM
from chalicelib.utils.exceptions import InvalidToken, ExpiredToken, BadSignature, ValidationException
from chalicelib.utils.logger import logger


def token_from_header(header_value: Optional[str]) -> str:
    """
    Extract the token from an `Authorization: Bearer <token>` header value
    """
    if not header_value:
        raise InvalidToken('Authorization header is missing')
    parts = header_value.split()
    if len(parts) != 2 or parts[0].lower() != 'bearer' or not parts[1]:
        raise InvalidToken('Authorization header should be "Bearer <token>"')
    return parts[1]


class TokenService:
    """
    Issues and verifies signed access tokens with the user's email claim
    """

    def __init__(self, secret: str, ttl_seconds: int = ACCESS_TOKEN_TTL_SECONDS,
                 algorithm: str = ACCESS_TOKEN_ALGORITHM):
        if not secret:
            raise ValueError('Access token secret is not configured')
        self.secret = secret
        self.ttl_seconds = ttl_seconds
        self.algorithm = algorithm

    def issue(self, claims: Dict) -> str:
        email = claims.get('email')
        if not isinstance(email, str) or not email:
            raise ValidationException('email claim is required to issue a token')
        now = datetime.now(tz=timezone.utc)
        payload = {**claims, 'iat': now, 'exp': now + timedelta(seconds=self.ttl_seconds)}
        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)
        logger.info(f'TokenService.issue ::: token issued for {email=}')
        return token

    def verify(self, token: str) -> Dict:
        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as error:
            raise ExpiredToken(f'Token has expired: {error}')
        except jwt.InvalidSignatureError as error:
            raise BadSignature(f'Token signature is not valid: {error}')
        except jwt.InvalidTokenError as error:
            raise InvalidToken(f'Token is not valid: {error}')
        if not claims.get('email'):
            raise InvalidToken('Token has no email claim')
        return claims
