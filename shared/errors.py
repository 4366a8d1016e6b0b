"""
Shared error handling for the session service layer.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel

from shared.error_codes import error_message


class ErrorEnvelope(BaseModel):
    """Standard error response format."""

    err_no: int
    err_msg: str

    def __str__(self) -> str:
        return f"errNo:{self.err_no} errMsg:{self.err_msg}"


class ServiceException(Exception):
    """Base exception for services.

    ``err_msg`` is looked up from the error-code table and is what clients
    see. ``log_message`` is the internal diagnostic; it is what ``str()``
    returns and what the error handler logs.
    """

    def __init__(self, err_no: int, log_message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.err_no = int(err_no)
        self.err_msg = error_message(self.err_no)
        self.log_message = log_message or self.err_msg
        self.details = details or {}
        super().__init__(self.log_message)

    def to_response(self) -> ErrorEnvelope:
        """Convert to error response."""
        return ErrorEnvelope(err_no=self.err_no, err_msg=self.err_msg)


def wrap_error(err: Optional[BaseException], err_no: int, *msg: str) -> Optional[ServiceException]:
    """Attach an error code to ``err``.

    Returns ``None`` when there is no error. The log message reads
    ``"<err_msg> - <err>"``, followed by the extra messages joined with
    spaces when any are given.
    """
    if err is None:
        return None

    err_msg = error_message(err_no)
    log_message = f"{err_msg} - {err}"
    if msg:
        log_message += " - " + " ".join(msg)

    return ServiceException(err_no, log_message)
