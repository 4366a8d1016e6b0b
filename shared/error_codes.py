"""
Numeric error codes and their client-facing messages.

The table is built once at import time and exposed read-only, so it can be
shared freely between requests and threads.
"""

from enum import IntEnum
from types import MappingProxyType
from typing import Mapping


UNKNOWN_ERROR_CODE = -1


class ErrorCode(IntEnum):
    """Known error codes. 4xxx are client errors, 5xxx server errors."""

    # Client error
    INVALID_PARAMETER = 4001
    VERIFICATION_CODE_EXISTS = 4002
    VERIFICATION_CODE_INCORRECT = 4003
    USER_NOT_FOUND = 4004
    INVALID_SIGNATURE = 4005
    EMPTY_PASSWORD = 4006
    DUPLICATE_SUBMISSION = 4007
    INVALID_SESSION = 4008
    SESSION_EXPIRED = 4009

    # Server error
    SYSTEM_ERROR = 5001


ERROR_MESSAGES: Mapping[int, str] = MappingProxyType({
    int(ErrorCode.INVALID_PARAMETER): "Invalid parameter",
    int(ErrorCode.VERIFICATION_CODE_EXISTS): "Verification code already exists",
    int(ErrorCode.VERIFICATION_CODE_INCORRECT): "Verification code incorrect",
    int(ErrorCode.USER_NOT_FOUND): "User does not exist",
    int(ErrorCode.INVALID_SIGNATURE): "Invalid signature",
    int(ErrorCode.EMPTY_PASSWORD): "User password must not be empty",
    int(ErrorCode.DUPLICATE_SUBMISSION): "Duplicate submission",
    int(ErrorCode.INVALID_SESSION): "Invalid session",
    int(ErrorCode.SESSION_EXPIRED): "Session expired",
    int(ErrorCode.SYSTEM_ERROR): "System error",
})


def error_message(code: int) -> str:
    """Return the message for an error code, or a placeholder for unknown codes."""
    message = ERROR_MESSAGES.get(int(code))
    if message is None:
        return f"undefined err msg code {int(code)}"
    return message
