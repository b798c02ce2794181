"""セキュリティヘッダーミドルウェア"""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# APIドキュメント画面はCSPを付けない (インラインスクリプトを使うため)
DOCS_PATH_PREFIXES = ("/api/docs", "/api/redoc", "/api/openapi.json")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    セキュリティ関連のHTTPヘッダーを付与するミドルウェア
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        # クリックジャッキング対策
        response.headers["X-Frame-Options"] = "DENY"

        # MIMEタイプスニッフィング対策
        response.headers["X-Content-Type-Options"] = "nosniff"

        # HTTPS強制（HSTS）
        response.headers["Strict-Transport-Security"] = (
            "max-age=31536000; includeSubDomains"
        )

        # JSON APIなので外部リソースは一切許可しない
        if not request.url.path.startswith(DOCS_PATH_PREFIXES):
            response.headers["Content-Security-Policy"] = (
                "default-src 'none'; frame-ancestors 'none'"
            )

        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["Cross-Origin-Opener-Policy"] = "same-origin"
        response.headers["Cross-Origin-Resource-Policy"] = "same-origin"

        return response
