"""認証ルーター: 登録、ログイン、ログアウト、ログインユーザー情報"""
from fastapi import APIRouter, Depends, Request, Response

from formbuilder.core.config import settings
from formbuilder.core.exceptions import Unauthorized
from formbuilder.core.rate_limit import limiter, LOGIN_RATE_LIMIT, REGISTER_RATE_LIMIT
from formbuilder.routers.deps import AuthContext, get_auth_service, require_login
from formbuilder.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserInfo
from formbuilder.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        max_age=settings.JWT_EXPIRES_MINUTES * 60,
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
@limiter.limit(REGISTER_RATE_LIMIT)
async def register(
    request: Request,
    req: RegisterRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
):
    """会員登録 (登録後はログイン状態になる)"""
    result = service.register(req.email, req.password, req.name)
    set_auth_cookie(response, result.token)
    return AuthResponse(user=result.user)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    req: LoginRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
):
    """ログイン"""
    result = service.login(req.email, req.password)
    set_auth_cookie(response, result.token)
    return AuthResponse(user=result.user)


@router.get("/me", response_model=UserInfo)
async def get_me(
    user: AuthContext = Depends(require_login),
    service: AuthService = Depends(get_auth_service),
):
    """現在のログインユーザー情報"""
    info = service.find_by_id(user.id)
    if info is None:
        # トークンは有効だがユーザーが存在しない
        raise Unauthorized("User not found")
    return info


@router.post("/logout", status_code=204)
async def logout(response: Response, _: AuthContext = Depends(require_login)):
    """ログアウト (Cookie削除)"""
    response.delete_cookie(
        settings.AUTH_COOKIE_NAME,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    return None
