from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from formbuilder.schemas.base import RequestModel, ResponseModel, reject_null
from formbuilder.schemas.question import QuestionOut


class CreateFormRequest(RequestModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None


class UpdateFormRequest(RequestModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("title", "is_active", mode="before")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)


class FormOut(ResponseModel):
    id: str
    title: str
    description: Optional[str] = None
    user_id: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    questions: list[QuestionOut] = []
