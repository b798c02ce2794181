from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """アプリケーション設定"""

    # データベース
    DATABASE_URL: str = "mysql+pymysql://formuser:formpassword@db:3306/form_builder?charset=utf8mb4"

    # 認証トークン
    JWT_SECRET: str = "dev-secret-change-me-please-32-chars"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_MINUTES: int = 60 * 24 * 7  # 7日
    AUTH_COOKIE_NAME: str = "access_token"

    # サーバー
    SITE_NAME: str = "Form Builder"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5173"
    SHUTDOWN_TIMEOUT_SECONDS: int = 10

    # レート制限
    RATE_LIMIT_ENABLED: bool = True
    LOGIN_RATE_LIMIT: str = "10/minute"
    REGISTER_RATE_LIMIT: str = "5/minute"

    # 環境
    ENV: str = "development"
    DEBUG: bool = True

    @field_validator("JWT_SECRET")
    @classmethod
    def check_jwt_secret(cls, v: str) -> str:
        if len(v) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters long")
        return v

    @field_validator("ENV")
    @classmethod
    def check_env(cls, v: str) -> str:
        if v not in ("development", "production", "test"):
            raise ValueError("ENV must be one of development, production, test")
        return v

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"

    @property
    def cookie_secure(self) -> bool:
        # 本番のみSecure属性を付与
        return self.is_production

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
