from typing import Optional

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session, DeclarativeBase

from formbuilder.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """DBハンドル: エンジンとセッションファクトリを保持し、起動/終了時に明示的に開閉する"""

    def __init__(self, url: str, echo: bool = False, **engine_kwargs):
        self.url = url
        self.echo = echo
        self.engine_kwargs = engine_kwargs
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @classmethod
    def from_settings(cls, settings) -> "Database":
        """設定値からDBハンドルを作成 (MySQL等のプール設定付き)"""
        kwargs = {}
        if not settings.DATABASE_URL.startswith("sqlite"):
            kwargs = {
                "pool_size": 10,
                "max_overflow": 20,
                "pool_recycle": 3600,
                "pool_pre_ping": True,
            }
        return cls(settings.DATABASE_URL, echo=settings.DEBUG and not settings.is_production, **kwargs)

    @property
    def is_connected(self) -> bool:
        return self.engine is not None

    def connect(self) -> None:
        """エンジン生成"""
        if self.engine is not None:
            return
        self.engine = create_engine(self.url, echo=self.echo, **self.engine_kwargs)
        if self.engine.dialect.name == "sqlite":
            # SQLiteは外部キー制約 (ON DELETE CASCADE含む) がデフォルト無効
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        logger.info("DB接続プール作成")

    def dispose(self) -> None:
        """接続プールを破棄"""
        if self.engine is None:
            return
        self.engine.dispose()
        self.engine = None
        self._session_factory = None
        logger.info("DB接続プール破棄")

    def create_all(self) -> None:
        """テーブル作成 (テスト・ローカル開発用。本番はAlembicを使用)"""
        import formbuilder.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not connected")
        return self._session_factory()

    def check_connection(self) -> bool:
        """DB接続チェック"""
        if self.engine is None:
            return False
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.warning("DB接続チェック失敗", exc_info=True)
            return False


def get_database(request: Request) -> Database:
    """FastAPI依存関数: アプリに紐づくDBハンドル取得"""
    return request.app.state.db


def get_db(request: Request):
    """FastAPI依存関数: DBセッション取得"""
    db = get_database(request).session()
    try:
        yield db
    finally:
        db.close()
