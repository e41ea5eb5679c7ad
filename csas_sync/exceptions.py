"""Exceptions raised by the CSAS synchronization engine."""

from authlib.integrations.base_client import OAuthError


class CSASError(Exception):
    """Base exception for all CSAS sync failures"""

    pass


class AuthError(CSASError, OAuthError):
    """Token endpoint unreachable, rejected the request or returned no access token"""

    def __init__(self, message: str):
        super().__init__(error='token_refresh_failed', description=message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class RequestError(CSASError):
    """Authenticated netbanking request failed (transport error or non-2xx status)"""

    def __init__(self, message: str, status: int = 0):
        super().__init__(message)
        self.status = status


class ParseError(CSASError):
    """A single record or response is missing an expected field or has a malformed date"""

    pass


class EntityLookupError(CSASError):
    """Entity id is not known to the entity cache"""

    pass


class BindingConfigError(CSASError, ValueError):
    """Item binding descriptor or bindings file line is invalid"""

    pass
