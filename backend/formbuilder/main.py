from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from formbuilder.core.config import settings
from formbuilder.core.database import Database
from formbuilder.core.errors import register_exception_handlers
from formbuilder.core.logging import setup_logging, get_logger
from formbuilder.core.rate_limit import limiter
from formbuilder.core.request_logging import RequestLoggingMiddleware
from formbuilder.core.security_headers import SecurityHeadersMiddleware
from formbuilder.routers import auth, forms, health, questions

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """アプリケーションライフサイクル管理: DBハンドルの開閉"""
    setup_logging(debug=settings.DEBUG)
    db: Database = app.state.db
    db.connect()
    logger.info("アプリケーション起動", extra={"extra_data": {"env": settings.ENV}})
    try:
        yield
    finally:
        db.dispose()
        logger.info("アプリケーション終了")


def create_app(database: Optional[Database] = None) -> FastAPI:
    """アプリケーション生成。database を渡さなければ設定値から作成する"""
    app = FastAPI(
        title=settings.SITE_NAME,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
        openapi_url="/api/openapi.json" if settings.DEBUG else None,
    )
    app.state.db = database or Database.from_settings(settings)

    # レート制限設定
    app.state.limiter = limiter

    register_exception_handlers(app)

    # ミドルウェア (登録順序: 後に登録したものが先に実行される)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    # ルーター登録
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(forms.router)
    app.include_router(questions.router)
    return app


app = create_app()
