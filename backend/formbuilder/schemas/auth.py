from datetime import datetime

from pydantic import EmailStr, Field

from formbuilder.schemas.base import RequestModel, ResponseModel


class RegisterRequest(RequestModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    name: str = Field(min_length=1, max_length=100)


class LoginRequest(RequestModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserInfo(ResponseModel):
    id: str
    email: str
    name: str
    role: str
    created_at: datetime
    updated_at: datetime


class AuthResponse(ResponseModel):
    user: UserInfo
