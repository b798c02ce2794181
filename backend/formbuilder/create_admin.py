"""初期管理者アカウント作成スクリプト: python -m formbuilder.create_admin"""
import os

from formbuilder.core.config import settings
from formbuilder.core.database import Database
from formbuilder.core.security import hash_password
from formbuilder.models.user import User

ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin123")
ADMIN_NAME = os.environ.get("ADMIN_NAME", "Administrator")


def create_admin(database: Database, email: str = ADMIN_EMAIL, password: str = ADMIN_PASSWORD, name: str = ADMIN_NAME) -> bool:
    """管理者を作成。既に存在すれば何もせずFalse"""
    db = database.session()
    try:
        existing = db.query(User).filter(User.email == email).first()
        if existing:
            print(f"既に存在します: {email}")
            return False

        user = User(
            email=email,
            password_hash=hash_password(password),
            name=name,
            role="ADMIN",
        )
        db.add(user)
        db.commit()
        print(f"管理者作成完了: email={email}")
        return True
    finally:
        db.close()


def main():
    database = Database.from_settings(settings)
    database.connect()
    try:
        create_admin(database)
    finally:
        database.dispose()


if __name__ == "__main__":
    main()
