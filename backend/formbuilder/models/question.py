import uuid

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum as SAEnum, JSON, ForeignKey, Index, func
from sqlalchemy.orm import relationship
from formbuilder.core.database import Base

QUESTION_TYPES = ("TEXT", "TEXTAREA", "NUMBER", "EMAIL", "RADIO", "CHECKBOX", "SELECT", "DATE")

# 選択肢 (options.choices) が必須の質問タイプ
CHOICE_TYPES = frozenset({"RADIO", "CHECKBOX", "SELECT"})


class Question(Base):
    __tablename__ = "questions"
    __table_args__ = (
        Index("ix_questions_form_id_order", "form_id", "order"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    form_id = Column(String(36), ForeignKey("forms.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(String(500), nullable=False, comment="質問文")
    type = Column(SAEnum(*QUESTION_TYPES, name="question_type"), nullable=False, default="TEXT")
    order = Column(Integer, nullable=False, default=0, comment="表示順 (0始まり、削除後は歯抜けを許容)")
    required = Column(Boolean, nullable=False, default=False)
    options = Column(JSON, nullable=True, comment="選択肢など ({choices: [...]})")
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    form = relationship("Form", back_populates="questions")
