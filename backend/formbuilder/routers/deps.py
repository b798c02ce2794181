"""共通依存関数: 認証コンテキスト・サービス生成"""
from dataclasses import dataclass

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from formbuilder.core.config import settings
from formbuilder.core.database import get_db
from formbuilder.core.exceptions import Unauthorized
from formbuilder.core.security import verify_token
from formbuilder.services.auth_service import AuthService
from formbuilder.services.form_service import FormService
from formbuilder.services.question_service import QuestionService

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class AuthContext:
    """認証済みリクエストの呼び出し元"""

    id: str
    email: str
    role: str


def extract_token(request: Request) -> str:
    """Cookie → Authorizationヘッダーの順でトークンを取り出す"""
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if token:
        return token

    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise Unauthorized("No authorization header provided")
    if not auth_header.startswith(BEARER_PREFIX):
        raise Unauthorized("Invalid authorization format. Use: Bearer <token>")
    token = auth_header[len(BEARER_PREFIX):].strip()
    if not token:
        raise Unauthorized("No token provided")
    return token


async def require_login(request: Request) -> AuthContext:
    """ログイン必須。トークンが無い・不正・期限切れなら401"""
    claims = verify_token(extract_token(request))
    return AuthContext(id=claims.id, email=claims.email, role=claims.role)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_form_service(db: Session = Depends(get_db)) -> FormService:
    return FormService(db)


def get_question_service(db: Session = Depends(get_db)) -> QuestionService:
    return QuestionService(db)
