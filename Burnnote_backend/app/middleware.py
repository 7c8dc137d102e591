"""
中间件：跨域头、请求日志、未处理异常兜底。
"""
import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.exceptions import error_body

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS, DELETE",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


class CorsHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        # 任意路径的预检请求直接返回空响应
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response


class FaultBarrierMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: FastAPI) -> None:
        super().__init__(app)
        self.log = logging.getLogger("burnnote.request")

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        status = 0
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        except Exception:
            status = 500
            self.log.exception("unhandled error method=%s path=%s", request.method, request.url.path)
            return JSONResponse(status_code=500, content=error_body("Internal server error"))
        finally:
            dt_ms = int((time.perf_counter() - start) * 1000)
            self.log.info("method=%s path=%s status=%s latency_ms=%s", request.method, request.url.path, status, dt_ms)


def add_middlewares(app: FastAPI) -> None:
    # 后添加的在外层，CORS 头需要覆盖到 500 响应
    app.add_middleware(FaultBarrierMiddleware)
    app.add_middleware(CorsHeadersMiddleware)
