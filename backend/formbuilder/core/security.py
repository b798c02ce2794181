"""パスワードハッシュとアクセストークン (JWT) の発行・検証"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from formbuilder.core.config import settings
from formbuilder.core.exceptions import Unauthorized


@dataclass(frozen=True)
class TokenClaims:
    """トークンに含めるクレーム"""

    id: str
    email: str
    role: str


def hash_password(password: str) -> str:
    """パスワードをbcryptでハッシュ化"""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """パスワードを検証"""
    return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))


def sign_token(claims: TokenClaims, expires_minutes: int = None) -> str:
    """クレームに署名してJWTを発行"""
    minutes = settings.JWT_EXPIRES_MINUTES if expires_minutes is None else expires_minutes
    now = datetime.now(timezone.utc)
    payload = {
        "id": claims.id,
        "email": claims.email,
        "role": claims.role,
        "iat": now,
        "exp": now + timedelta(minutes=minutes),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> TokenClaims:
    """JWTを検証してクレームを返す。失敗時はUnauthorized"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        raise Unauthorized("Token expired") from e
    except jwt.PyJWTError as e:
        raise Unauthorized("Invalid token") from e

    try:
        return TokenClaims(id=str(payload["id"]), email=payload["email"], role=payload["role"])
    except KeyError as e:
        raise Unauthorized("Invalid token") from e
