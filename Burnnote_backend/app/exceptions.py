"""
错误类型及其 FastAPI 处理器。

所有错误响应体统一为 ``{"error": <message>}``，消息只包含可公开的内容，
不会带出凭证或原始异常文本。
"""
import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

log = logging.getLogger("burnnote.errors")


class NoteServiceError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None, *, details: Dict[str, Any] | None = None):
        if message:
            self.message = message
        self.details = details
        super().__init__(self.message)


class Unauthorized(NoteServiceError):
    status_code = 401
    message = "Unauthorized"


class NotFound(NoteServiceError):
    status_code = 404
    message = "Not found"


class BadConfiguration(NoteServiceError):
    status_code = 500
    message = "Service is not configured"


def error_body(message: str, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": message}
    body.update({k: v for k, v in extra.items() if v is not None})
    return body


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(NoteServiceError)
    async def _service_error_handler(request: Request, exc: NoteServiceError):
        if isinstance(exc, BadConfiguration):
            log.error("bad configuration path=%s: %s", request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.message, details=exc.details),
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail or "HTTP error")),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
            for err in exc.errors()
        ]
        return JSONResponse(status_code=422, content=error_body("Validation error", errors=errors))
