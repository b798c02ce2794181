"""プロセスレベルの致命的エラー処理とグレースフルシャットダウン"""
import asyncio
import os
import sys
import threading
import traceback
from typing import Optional

from formbuilder.core.config import settings
from formbuilder.core.logging import get_logger

logger = get_logger("formbuilder.fatal")


class FatalErrorHandler:
    """
    未捕捉例外・未処理の非同期エラーを検知したらログを残してサーバーを停止する。

    server には uvicorn.Server を想定 (should_exit を立てると新規受付を止め、
    処理中リクエストを捌いてから lifespan の終了処理を実行する)。
    """

    def __init__(self, server=None, timeout_seconds: Optional[int] = None):
        self.server = server
        self.timeout_seconds = settings.SHUTDOWN_TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds
        self.exit_code = 0
        self.shutting_down = False
        self._force_timer: Optional[threading.Timer] = None

    def install(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """例外フックを登録 (SIGINT/SIGTERMはuvicorn側で同じ停止処理になる)"""
        sys.excepthook = self.handle_uncaught_exception
        threading.excepthook = self.handle_thread_exception
        if loop is not None:
            loop.set_exception_handler(self.handle_async_exception)
        logger.info("致命的エラーハンドラ登録完了")

    def handle_uncaught_exception(self, exc_type, exc, tb) -> None:
        logger.critical(
            f"UNCAUGHT EXCEPTION: {exc_type.__name__}: {exc}",
            exc_info=(exc_type, exc, tb) if not settings.is_production else None,
        )
        self.shutdown("UNCAUGHT_EXCEPTION", exit_code=1)

    def handle_thread_exception(self, args) -> None:
        self.handle_uncaught_exception(args.exc_type, args.exc_value, args.exc_traceback)

    def handle_async_exception(self, loop: asyncio.AbstractEventLoop, context: dict) -> None:
        exc = context.get("exception")
        message = context.get("message", "")
        detail = f"{type(exc).__name__}: {exc}" if exc else message
        logger.critical(f"UNHANDLED ASYNC ERROR: {detail}")
        if exc is not None and not settings.is_production:
            logger.critical("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
        self.shutdown("UNHANDLED_REJECTION", exit_code=1)

    def shutdown(self, reason: str, exit_code: int = 0) -> None:
        """グレースフルシャットダウン開始 (二重呼び出しは無視、終了コードは悪い方を保持)"""
        self.exit_code = max(self.exit_code, exit_code)
        if self.shutting_down:
            return
        self.shutting_down = True
        logger.info(f"{reason} 受信: グレースフルシャットダウン開始")

        if self.server is None:
            self._exit(self.exit_code)
            return

        self.server.should_exit = True
        self._force_timer = threading.Timer(self.timeout_seconds, self._force_exit)
        self._force_timer.daemon = True
        self._force_timer.start()

    def cancel_force_exit(self) -> None:
        if self._force_timer is not None:
            self._force_timer.cancel()
            self._force_timer = None

    def _force_exit(self) -> None:
        logger.error("シャットダウンがタイムアウトしたため強制終了")
        self._exit(1)

    def _exit(self, code: int) -> None:
        os._exit(code)
