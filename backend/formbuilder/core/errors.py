"""例外ハンドラ: バリデーションエラー、DBエラー変換、ドメイン例外、想定外エラー"""
import re
import traceback
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError
from starlette.exceptions import HTTPException as StarletteHTTPException

from formbuilder.core.config import settings
from formbuilder.core.exceptions import AppError, BadRequest, Conflict, NotFound
from formbuilder.core.logging import get_logger
from formbuilder.core.rate_limit import rate_limit_exceeded_handler

logger = get_logger(__name__)

# --- バリデーションエラーのメッセージ化 ---
_FIELD_LABELS = {
    "email": "Email",
    "password": "Password",
    "name": "Name",
    "title": "Title",
    "description": "Description",
    "isActive": "isActive",
    "text": "Question text",
    "type": "Question type",
    "required": "required",
    "options": "Options",
    "choices": "Choices",
    "questions": "Questions",
    "id": "Question ID",
    "order": "Order",
}

_HTTP_ERROR_NAMES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    409: "Conflict",
    422: "Unprocessable Entity",
    429: "Too Many Requests",
}


def _translate_error(err: dict) -> str:
    t = err.get("type", "")
    ctx = err.get("ctx", {}) or {}
    loc = [part for part in err.get("loc", []) if not isinstance(part, int)]
    field = str(loc[-1]) if loc else ""
    label = _FIELD_LABELS.get(field, field)

    if t == "json_invalid":
        return "Invalid JSON body"
    if t == "missing" and field == "body":
        return "Request body is required"
    if t == "null_not_allowed":
        return f"{label} must not be null"
    if field == "email" and t != "missing":
        return "Invalid email address"
    if t == "value_error":
        # field_validator / model_validator で送出したメッセージをそのまま返す
        msg = err.get("msg", "")
        return msg.removeprefix("Value error, ")
    if t == "missing":
        return f"{label} is required"
    if t == "string_too_short" and field == "choices":
        return "Choices must not be empty"
    if t == "string_too_short":
        min_length = ctx.get("min_length", 1)
        if min_length <= 1:
            return f"{label} is required"
        return f"{label} must be at least {min_length} characters"
    if t == "string_too_long":
        return f"{label} must be at most {ctx.get('max_length', '')} characters"
    if t == "too_short":
        if field == "choices":
            return f"At least {ctx.get('min_length', 2)} choices required"
        return f"{label} must contain at least {ctx.get('min_length', 1)} item(s)"
    if t == "enum" or t == "literal_error":
        return f"{label} must be one of: {ctx.get('expected', '')}"
    if t == "uuid_parsing" or t == "uuid_type":
        return f"{label} must be a valid UUID"
    if t in ("int_parsing", "int_type", "int_from_float"):
        return f"{label} must be an integer"
    if t == "greater_than_equal":
        return f"{label} must be greater than or equal to {ctx.get('ge', '')}"
    if t in ("string_type",):
        return f"{label} must be a string"
    if t in ("bool_parsing", "bool_type"):
        return f"{label} must be a boolean"
    if t in ("list_type",):
        return f"{label} must be a list"
    if t in ("dict_type", "model_type", "model_attributes_type"):
        return f"{label} must be an object"
    return f"{label}: {err.get('msg', 'invalid value')}"


def first_validation_message(exc: RequestValidationError) -> str:
    """最初に違反したルールのメッセージのみを返す"""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    return _translate_error(errors[0])


# --- DBエラー変換 ---
_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: ([\w.,\s]+)")
_MYSQL_UNIQUE = re.compile(r"Duplicate entry .* for key '([\w.]+)'")
_PG_UNIQUE = re.compile(r"Key \(([\w, ]+)\)=")


def _unique_field(message: str) -> str:
    m = _SQLITE_UNIQUE.search(message)
    if m:
        return ", ".join(col.strip().split(".")[-1] for col in m.group(1).split(","))
    m = _MYSQL_UNIQUE.search(message)
    if m:
        key = m.group(1).split(".")[-1]
        return key.removeprefix("ix_").split("_", 1)[-1] if key.startswith("ix_") else key
    m = _PG_UNIQUE.search(message)
    if m:
        return m.group(1)
    return "field"


def translate_db_error(exc: SQLAlchemyError) -> Optional[AppError]:
    """DB層の例外をドメイン例外へ変換。対象外ならNone"""
    if isinstance(exc, IntegrityError):
        message = str(exc.orig) if exc.orig is not None else str(exc)
        lowered = message.lower()
        if "unique" in lowered or "duplicate" in lowered:
            return Conflict(f"{_unique_field(message)} already exists")
        if "foreign key" in lowered:
            return BadRequest("Invalid reference")
        return BadRequest("Invalid data provided")
    if isinstance(exc, (NoResultFound, StaleDataError)):
        return NotFound("Record not found")
    return None


# --- ハンドラ ---
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.error}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return await app_error_handler(request, BadRequest(first_validation_message(exc)))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """ルーティング由来のHTTPException (404/405等) も共通形式で返す"""
    error = _HTTP_ERROR_NAMES.get(exc.status_code, "Error")
    return JSONResponse(
        status_code=exc.status_code,
        content={"statusCode": exc.status_code, "message": str(exc.detail), "error": error},
        headers=getattr(exc, "headers", None),
    )


async def db_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    translated = translate_db_error(exc)
    if translated is None:
        return await unhandled_error_handler(request, exc)
    logger.warning(
        f"DBエラー変換: {type(exc).__name__} -> {translated.status_code}",
        extra={"extra_data": {"path": request.url.path}},
    )
    return await app_error_handler(request, translated)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """想定外エラー: 本番では詳細を隠す"""
    logger.error(
        f"想定外エラー: {type(exc).__name__}: {exc}",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"extra_data": {"method": request.method, "path": request.url.path}},
    )
    content = {
        "statusCode": 500,
        "message": "Internal Server Error" if settings.is_production else str(exc),
        "error": "Internal Server Error",
    }
    if not settings.is_production:
        content["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=500, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """例外ハンドラを登録"""
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, db_error_handler)
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
