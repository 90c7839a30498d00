import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from restaurant.services.exceptions import (
    EmptyCartError,
    ForbiddenError,
    NotAuthenticatedError,
    NotFoundError,
    PersistenceError,
    ServiceException,
    ValidationError,
)

log = logging.getLogger(__name__)

STATUS_BY_EXCEPTION = [
    (ValidationError, 400),
    (EmptyCartError, 400),
    (NotAuthenticatedError, 401),
    (ForbiddenError, 403),
    (NotFoundError, 404),
    (PersistenceError, 500),
]


def ok(data=None, message: str = "OK") -> dict:
    return {"success": True, "message": message, "data": data}


def fail(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "data": None},
    )


def status_for(exc: ServiceException) -> int:
    for cls, code in STATUS_BY_EXCEPTION:
        if isinstance(exc, cls):
            return code
    return 400


def install_error_handlers(app: FastAPI):
    @app.exception_handler(ServiceException)
    async def _service_exception(request: Request, exc: ServiceException):
        return fail(status_for(exc), exc.message)

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError):
        parts = []
        for err in exc.errors():
            loc = [str(p) for p in err.get("loc", ()) if p != "body"]
            parts.append(f"{'.'.join(loc)}: {err.get('msg')}" if loc else err.get("msg"))
        return fail(400, "Invalid data: " + "; ".join(parts))

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        log.exception("unhandled error on %s %s", request.method, request.url.path)
        return fail(500, "Internal server error")
