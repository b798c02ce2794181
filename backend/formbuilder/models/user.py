import uuid

from sqlalchemy import Column, String, DateTime, Enum as SAEnum, func
from sqlalchemy.orm import relationship
from formbuilder.core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False, comment="表示名")
    role = Column(SAEnum("USER", "ADMIN", name="user_role"), nullable=False, default="USER")
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    forms = relationship("Form", back_populates="owner", passive_deletes=True)
