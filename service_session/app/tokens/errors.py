"""
Session token errors.

Every failure of minting or verifying a token is a ``SessionTokenError``.
Each kind carries the error code the HTTP layer reports for it, a message
naming the failing step and identifiers, and those identifiers in
``details``.
"""

from typing import Any

from shared.error_codes import ErrorCode
from shared.errors import ServiceException


class SessionTokenError(ServiceException):
    """Base class for session token failures."""

    default_err_no = ErrorCode.INVALID_SESSION

    def __init__(self, message: str, **details: Any):
        super().__init__(self.default_err_no, message, details)


class UnknownOriginError(SessionTokenError):
    """Origin tag outside the supported set."""

    default_err_no = ErrorCode.INVALID_PARAMETER


class SecretResolutionError(SessionTokenError):
    """The secret resolver failed for a (source, manager) pair."""

    default_err_no = ErrorCode.SYSTEM_ERROR


class SessionEncodingError(SessionTokenError):
    """Claims could not be serialized."""

    default_err_no = ErrorCode.SYSTEM_ERROR


class InvalidLifetimeError(SessionTokenError):
    """Lifetime puts the expiry outside the representable date range."""

    default_err_no = ErrorCode.INVALID_PARAMETER


class SessionDecodingError(SessionTokenError):
    """Token text could not be turned back into claims."""


class SessionDecodeError(SessionDecodingError):
    """Token is not valid URL-safe base64."""


class SessionParseError(SessionDecodingError):
    """Decoded token is not a well-formed claims object."""


class OriginMismatchError(SessionTokenError):
    """Token was issued for a different origin than the one expected."""


class ExpiryParseError(SessionTokenError):
    """Expiry field is not a timestamp in the token time format."""


class SessionExpiredError(SessionTokenError):
    """Token expiry is at or before now."""

    default_err_no = ErrorCode.SESSION_EXPIRED


class UnauthorizedError(SessionTokenError):
    """Recomputed signature does not match the token's signature."""

    default_err_no = ErrorCode.INVALID_SIGNATURE
