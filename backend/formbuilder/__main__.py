"""サーバーエントリポイント: python -m formbuilder で起動"""
import asyncio
import sys

import uvicorn

from formbuilder.core.config import settings
from formbuilder.core.fatal import FatalErrorHandler
from formbuilder.core.logging import setup_logging, get_logger

logger = get_logger("formbuilder.server")


async def serve() -> int:
    config = uvicorn.Config(
        "formbuilder.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
        timeout_graceful_shutdown=settings.SHUTDOWN_TIMEOUT_SECONDS,
    )
    server = uvicorn.Server(config)
    fatal = FatalErrorHandler(server)
    fatal.install(asyncio.get_running_loop())

    logger.info(f"サーバー起動: http://{settings.HOST}:{settings.PORT}/api ({settings.ENV})")
    await server.serve()
    fatal.cancel_force_exit()
    logger.info("サーバー停止")
    return fatal.exit_code


def main():
    setup_logging(debug=settings.DEBUG)
    sys.exit(asyncio.run(serve()))


if __name__ == "__main__":
    main()
