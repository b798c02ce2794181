# 全モデルをインポート (Alembic autogenerate用)
from formbuilder.models.user import User
from formbuilder.models.form import Form
from formbuilder.models.question import Question

__all__ = [
    "User",
    "Form",
    "Question",
]
