"""Alembic環境: 接続先は settings.DATABASE_URL、対象メタデータは formbuilder.models"""
import os
import sys
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool

# backend/ をパスに追加
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from formbuilder.core.config import settings
from formbuilder.core.database import Base, Database
import formbuilder.models  # noqa: F401

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def run_offline() -> None:
    """SQL出力のみ (本番DBへ適用するSQLのレビュー用)"""
    context.configure(
        url=settings.DATABASE_URL,
        target_metadata=Base.metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online() -> None:
    """アプリと同じDatabaseハンドルで接続 (マイグレーション中はプールを使わない)"""
    database = Database(settings.DATABASE_URL, poolclass=pool.NullPool)
    database.connect()
    try:
        with database.engine.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=Base.metadata,
                # SQLiteはALTER TABLEの制限があるためバッチモード
                render_as_batch=connection.dialect.name == "sqlite",
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        database.dispose()


if context.is_offline_mode():
    run_offline()
else:
    run_online()
