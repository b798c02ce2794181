import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional, TextIO

# 1リクエストごとに大量に出るロガーはWARNING以上のみ
# (アクセスログはRequestLoggingMiddlewareが1行で出力する)
_QUIET_LOGGERS = ("sqlalchemy.engine", "uvicorn.access", "httpx")


class JSONFormatter(logging.Formatter):
    """1レコード1行のJSONログ"""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data = getattr(record, "extra_data", None)
        if data:
            entry["data"] = data
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        # id (UUID) や datetime は文字列化
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(debug: bool = False, stream: Optional[TextIO] = None) -> None:
    """ルートロガーをJSON出力に差し替える (二重登録しないよう既存ハンドラは外す)"""
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JSONFormatter())

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
