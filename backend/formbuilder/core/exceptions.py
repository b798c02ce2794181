"""ドメイン例外: サービス層が送出し、例外ハンドラがステータスコードへ1:1で変換する"""


class AppError(Exception):
    """全ドメイン例外の基底クラス"""

    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, message: str = None):
        self.message = message or self.error
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            "statusCode": self.status_code,
            "message": self.message,
            "error": self.error,
        }


class BadRequest(AppError):
    status_code = 400
    error = "Bad Request"


class Unauthorized(AppError):
    status_code = 401
    error = "Unauthorized"


class Forbidden(AppError):
    status_code = 403
    error = "Forbidden"


class NotFound(AppError):
    status_code = 404
    error = "Not Found"


class Conflict(AppError):
    status_code = 409
    error = "Conflict"
