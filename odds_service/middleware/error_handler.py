# odds_service/middleware/error_handler.py

from typing import Optional

import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.exceptions import FetchError
from ..core.exceptions import NoOddsExtractedError
from ..core.exceptions import OddsServiceError
from ..core.exceptions import SinkError
from ..user_friendly_errors import ERROR_MAP

log = structlog.get_logger(__name__)

# Most specific first.
SERVICE_ERROR_RESPONSES = (
    (NoOddsExtractedError, "NoOddsExtractedError", 400),
    (FetchError, "FetchHttpError", 502),
    (SinkError, "SinkError", 500),
)


class UserFriendlyException(Exception):
    def __init__(self, error_key: str, status_code: int = 500, details: Optional[str] = None):
        self.error_key = error_key
        self.status_code = status_code
        self.details = details
        error_info = ERROR_MAP.get(error_key, ERROR_MAP["default"])
        self.message = error_info["message"]
        self.suggestion = error_info["suggestion"]
        super().__init__(self.message)

    @classmethod
    def from_service_error(cls, exc: OddsServiceError) -> "UserFriendlyException":
        for error_type, error_key, status_code in SERVICE_ERROR_RESPONSES:
            if isinstance(exc, error_type):
                return cls(error_key, status_code=status_code, details=str(exc))
        return cls("default", status_code=500, details=str(exc))


async def user_friendly_exception_handler(request: Request, exc: UserFriendlyException):
    log.warning(
        "Request failed",
        path=request.url.path,
        error_key=exc.error_key,
        status_code=exc.status_code,
        details=exc.details,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "message": exc.message,
                "suggestion": exc.suggestion,
                "details": exc.details,
            }
        },
    )


async def service_exception_handler(request: Request, exc: OddsServiceError):
    """Catches pipeline errors that escaped a route without being mapped."""
    return await user_friendly_exception_handler(request, UserFriendlyException.from_service_error(exc))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Field-level 422 response for malformed request bodies."""
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"][1:]) or "body",
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    log.info("Rejected invalid request", path=request.url.path, errors=errors)
    return JSONResponse(
        status_code=422,
        content={"detail": "Invalid request parameters", "errors": errors},
    )
