"""
Global exception handlers.

Maps domain exception codes to HTTP status codes and renders every
error as {"error": code, "message": ..., "errors": [...]}.
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cineshare.domain.exceptions import (
    AuthenticationError,
    CineShareException,
    FieldError,
    ValidationError,
)

STATUS_CODE_MAP = {
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "TOKEN_MALFORMED": status.HTTP_401_UNAUTHORIZED,
    "TOKEN_SIGNATURE_INVALID": status.HTTP_401_UNAUTHORIZED,
    "TOKEN_EXPIRED": status.HTTP_401_UNAUTHORIZED,
    "TOKEN_INVALID": status.HTTP_401_UNAUTHORIZED,
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "VALIDATION_ERROR": status.HTTP_422_UNPROCESSABLE_CONTENT,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CONFLICT": status.HTTP_409_CONFLICT,
}


async def cineshare_exception_handler(
    request: Request, exc: CineShareException
) -> JSONResponse:
    """
    Handle CineShare domain exceptions.

    Converts domain exceptions to appropriate HTTP responses.
    """
    status_code = STATUS_CODE_MAP.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    content = {"error": exc.code, "message": exc.message}
    if isinstance(exc, ValidationError):
        content["errors"] = exc.to_list()

    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render FastAPI request validation errors in the domain error shape."""
    errors = []
    for item in exc.errors():
        loc = [str(part) for part in item["loc"]]
        # Drop the "body"/"query"/"path" prefix
        if len(loc) > 1:
            loc = loc[1:]
        errors.append(FieldError(field=".".join(loc) or "body", message=item["msg"]))

    return await cineshare_exception_handler(request, ValidationError(errors))
