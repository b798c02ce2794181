from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from formbuilder.core.database import Database, get_database

router = APIRouter()


@router.get("/api/health")
async def health_check(db: Database = Depends(get_database)):
    """ヘルスチェックエンドポイント"""
    db_ok = db.check_connection()

    return {
        "status": "ok" if db_ok else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "db": "connected" if db_ok else "disconnected",
    }
