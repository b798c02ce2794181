"""ログイン・会員登録のレート制限 (slowapi)"""
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from formbuilder.core.config import settings

LOGIN_RATE_LIMIT = settings.LOGIN_RATE_LIMIT
REGISTER_RATE_LIMIT = settings.REGISTER_RATE_LIMIT


def get_client_ip(request: Request) -> str:
    """リバースプロキシ配下ではX-Forwarded-Forの先頭が実クライアント"""
    forwarded_for = request.headers.get("X-Forwarded-For", "")
    first_hop = forwarded_for.split(",", 1)[0].strip()
    return first_hop or get_remote_address(request)


# 状態はプロセス内メモリに保持 (複数プロセス構成では各プロセスで別カウント)
limiter = Limiter(
    key_func=get_client_ip,
    storage_uri="memory://",
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 を共通エラー形式で返す"""
    body = {
        "statusCode": 429,
        "message": f"Too many requests, limit is {exc.detail}",
        "error": "Too Many Requests",
    }
    return JSONResponse(status_code=429, content=body)
