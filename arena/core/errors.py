"""
Errores HTTP de la API

Todas las respuestas de error tienen la forma {"error": mensaje, "code": CODIGO}.
Los controladores lanzan `api_error(...)` y los handlers de `main.py` se
encargan de aplanar el body.
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def api_error(status_code: int, code: str, message: str) -> HTTPException:
    """HTTPException con el body estándar de error"""
    return HTTPException(status_code=status_code, detail={"error": message, "code": code})


def _error_body(message: str, code: str, **extra) -> dict:
    return {"error": message, "code": code, **extra}


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc.detail, dict) and "code" in exc.detail:
        body = exc.detail
    elif exc.status_code == status.HTTP_404_NOT_FOUND:
        body = _error_body("Endpoint not found", "NOT_FOUND", path=request.url.path)
    else:
        body = _error_body(str(exc.detail), "HTTP_ERROR")

    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Los errores de validación de FastAPI (422) se devuelven como 400
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("Invalid request", "VALIDATION_ERROR", details=jsonable_errors(exc)),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal server error", "INTERNAL_ERROR"),
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
