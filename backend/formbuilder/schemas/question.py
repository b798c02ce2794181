import enum
from datetime import datetime
from typing import Annotated, Optional
from uuid import UUID

from pydantic import ConfigDict, Field, field_validator, model_validator

from formbuilder.models.question import CHOICE_TYPES, QUESTION_TYPES
from formbuilder.schemas.base import RequestModel, ResponseModel, reject_null

CHOICES_REQUIRED_MESSAGE = "RADIO, CHECKBOX, and SELECT questions require at least 2 choices"

QuestionType = enum.Enum("QuestionType", {t: t for t in QUESTION_TYPES}, type=str)

Choice = Annotated[str, Field(min_length=1)]


class QuestionOptions(RequestModel):
    """選択肢など。choices以外のキー (placeholder等) もそのまま保持する"""

    model_config = ConfigDict(extra="allow")

    choices: list[Choice] = Field(min_length=2)


def has_enough_choices(options) -> bool:
    """options.choices が2件以上あるか (dict / QuestionOptions どちらも可)"""
    if options is None:
        return False
    choices = options.get("choices") if isinstance(options, dict) else options.choices
    return bool(choices) and len(choices) >= 2


class CreateQuestionRequest(RequestModel):
    text: str = Field(min_length=1, max_length=500)
    type: QuestionType
    required: bool = False
    options: Optional[QuestionOptions] = None

    @model_validator(mode="after")
    def check_choices(self):
        if self.type.value in CHOICE_TYPES and not has_enough_choices(self.options):
            raise ValueError(CHOICES_REQUIRED_MESSAGE)
        return self


class UpdateQuestionRequest(RequestModel):
    text: Optional[str] = Field(default=None, min_length=1, max_length=500)
    type: Optional[QuestionType] = None
    required: Optional[bool] = None
    options: Optional[QuestionOptions] = None

    @field_validator("text", "type", "required", mode="before")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)

    @model_validator(mode="after")
    def check_choices(self):
        if self.type is not None and self.type.value in CHOICE_TYPES and not has_enough_choices(self.options):
            raise ValueError(CHOICES_REQUIRED_MESSAGE)
        return self


class ReorderItem(RequestModel):
    id: UUID
    order: int = Field(ge=0)


class ReorderQuestionsRequest(RequestModel):
    questions: list[ReorderItem] = Field(min_length=1)


class QuestionOut(ResponseModel):
    id: str
    form_id: str
    text: str
    type: str
    order: int
    required: bool
    options: Optional[dict] = None
    created_at: datetime
    updated_at: datetime
