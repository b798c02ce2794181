"""リクエストログミドルウェア"""
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from formbuilder.core.logging import get_logger

logger = get_logger("formbuilder.request")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """1リクエスト1行でメソッド・パス・ステータス・処理時間を出力"""

    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 1)

        logger.info(
            f"{request.method} {request.url.path} {response.status_code} {elapsed_ms}ms",
            extra={
                "extra_data": {
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "duration_ms": elapsed_ms,
                }
            },
        )
        return response
