import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gamification.core.database import serialize_mongo
from gamification.core.errors import AppError, ErrorType, ValidationFailed

logger = logging.getLogger(__name__)


# ==================== ENVELOPES ====================

def success(data: Any = None, message: str = "Success", status_code: int = 200, meta: Optional[dict] = None) -> JSONResponse:
    body = {
        "success": True,
        "message": message,
        "data": serialize_mongo(data),
    }
    if meta is not None:
        body["meta"] = serialize_mongo(meta)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def failure(
    message: str,
    status_code: int,
    error_type: ErrorType = ErrorType.BAD_REQUEST,
    details: Any = None
) -> JSONResponse:
    body = {
        "success": False,
        "message": message,
        "error": {
            "type": error_type.value,
            "message": message,
            "details": serialize_mongo(details),
        },
    }
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def validation_failure(errors: List[Dict[str, str]]) -> JSONResponse:
    return JSONResponse(status_code=422, content={"success": False, "errors": errors})


# ==================== ERROR HANDLERS ====================

_STATUS_TYPES = {
    400: ErrorType.BAD_REQUEST,
    401: ErrorType.UNAUTHORIZED,
    403: ErrorType.FORBIDDEN,
    404: ErrorType.NOT_FOUND,
    409: ErrorType.CONFLICT,
}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, ValidationFailed):
        return validation_failure(exc.errors)

    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.details)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)

    return failure(exc.message, exc.status_code, exc.type, exc.details)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    seen = set()
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "path", "query")]
        field = ".".join(loc) or "body"
        if field in seen:
            continue
        seen.add(field)
        errors.append({"field": field, "message": err.get("msg", "Invalid value")})
    return validation_failure(errors)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    error_type = _STATUS_TYPES.get(exc.status_code, ErrorType.BAD_REQUEST)
    return failure(str(exc.detail), exc.status_code, error_type)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return failure("An unexpected error occurred.", 500, ErrorType.INTERNAL_SERVER)


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
