"""
HTTP error handling for services.

Every error leaving a route is turned into an ``ErrorEnvelope`` and sent with
status 200; clients tell success from failure by the body, not the status.
"""

from typing import Any, Optional, Tuple

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.error_codes import ErrorCode, UNKNOWN_ERROR_CODE
from shared.errors import ErrorEnvelope, ServiceException, wrap_error
from shared.metrics import MetricsCollector


def request_uri(request: Request) -> str:
    """Return the request path with its query string, as sent by the client."""
    uri = request.url.path
    if request.url.query:
        uri += "?" + request.url.query
    return uri


def describe_error(exc: BaseException) -> Tuple[ErrorEnvelope, str]:
    """Map an exception to the envelope sent to the client and the message logged."""
    if isinstance(exc, ServiceException):
        return exc.to_response(), exc.log_message

    if isinstance(exc, StarletteHTTPException):
        message = str(exc.detail)
        return ErrorEnvelope(err_no=UNKNOWN_ERROR_CODE, err_msg=message), message

    message = str(exc)
    return ErrorEnvelope(err_no=UNKNOWN_ERROR_CODE, err_msg=message), message


def install_error_handlers(app: FastAPI, logger: Any, metrics: Optional[MetricsCollector] = None) -> None:
    """Register exception handlers that render every error as an envelope."""

    def render(request: Request, exc: BaseException) -> Response:
        envelope, log_message = describe_error(exc)

        logger.warning(
            "Request failed",
            uri=request_uri(request),
            err=str(envelope),
            info=log_message
        )
        if metrics is not None:
            metrics.record_error(type(exc).__name__)

        if request.method == "HEAD":
            return Response(status_code=200)
        return JSONResponse(status_code=200, content=envelope.model_dump())

    @app.exception_handler(ServiceException)
    async def service_exception_handler(request: Request, exc: ServiceException):
        """Handle coded service errors."""
        return render(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle malformed request bodies and parameters."""
        return render(request, wrap_error(exc, ErrorCode.INVALID_PARAMETER))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle framework HTTP errors such as unknown routes."""
        return render(request, exc)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        return render(request, exc)
