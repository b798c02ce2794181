"""認証ビジネスロジック"""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from formbuilder.core.exceptions import Conflict, Unauthorized
from formbuilder.core.logging import get_logger
from formbuilder.core.security import TokenClaims, hash_password, sign_token, verify_password
from formbuilder.models.user import User
from formbuilder.schemas.auth import UserInfo

logger = get_logger(__name__)

# メールアドレス不一致・パスワード不一致で同じ文言を返す (存在確認に使わせない)
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


@dataclass
class AuthResult:
    user: UserInfo
    token: str


def issue_token(user: User) -> str:
    return sign_token(TokenClaims(id=user.id, email=user.email, role=user.role))


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def register(self, email: str, password: str, name: str) -> AuthResult:
        """会員登録。登録済みメールアドレスならConflict"""
        if self.get_user_by_email(email):
            raise Conflict("User with this email already exists")

        user = User(
            email=email,
            password_hash=hash_password(password),
            name=name,
            role="USER",
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info("ユーザー登録", extra={"extra_data": {"user_id": user.id}})
        return AuthResult(user=UserInfo.model_validate(user), token=issue_token(user))

    def login(self, email: str, password: str) -> AuthResult:
        """ログイン"""
        user = self.get_user_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.warning("ログイン失敗")
            raise Unauthorized(INVALID_CREDENTIALS_MESSAGE)
        return AuthResult(user=UserInfo.model_validate(user), token=issue_token(user))

    def find_by_id(self, user_id: str) -> Optional[UserInfo]:
        """パスワードを除いたユーザー情報。存在しなければNone"""
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            return None
        return UserInfo.model_validate(user)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()
