import uuid

from sqlalchemy import Column, String, Boolean, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from formbuilder.core.database import Base


class Form(Base):
    __tablename__ = "forms"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(200), nullable=False, comment="フォーム名")
    description = Column(Text, nullable=True, comment="フォーム説明")
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True, comment="所有者 (作成後変更不可)")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="forms")
    questions = relationship(
        "Question",
        back_populates="form",
        order_by="Question.order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
