"""質問のDBアクセス"""
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.exc import NoResultFound
from sqlalchemy.orm import Session

from formbuilder.models.question import Question


class QuestionRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_by_form_id(self, form_id: str) -> list[Question]:
        """フォームの質問一覧 (表示順)"""
        return (
            self.db.query(Question)
            .filter(Question.form_id == form_id)
            .order_by(Question.order.asc())
            .all()
        )

    def find_by_id(self, question_id: str) -> Optional[Question]:
        return self.db.query(Question).filter(Question.id == question_id).first()

    def get_max_order(self, form_id: str) -> int:
        """フォーム内の最大表示順。質問が無ければ -1"""
        result = self.db.query(func.max(Question.order)).filter(Question.form_id == form_id).scalar()
        return -1 if result is None else result

    def create(self, form_id: str, data: dict, order: int) -> Question:
        question = Question(form_id=form_id, order=order, **data)
        self.db.add(question)
        self.db.commit()
        self.db.refresh(question)
        return question

    def update(self, question: Question, data: dict) -> Question:
        for key, value in data.items():
            setattr(question, key, value)
        self.db.commit()
        self.db.refresh(question)
        return question

    def delete(self, question: Question) -> None:
        """質問削除 (他の質問の表示順は詰めない)"""
        self.db.delete(question)
        self.db.commit()

    def update_orders(self, updates: Iterable[tuple[str, int]]) -> None:
        """
        表示順を一括更新。1トランザクションで全件適用し、
        1件でも失敗すればロールバックして何も変更しない。
        """
        try:
            for question_id, order in updates:
                updated = (
                    self.db.query(Question)
                    .filter(Question.id == question_id)
                    .update({Question.order: order}, synchronize_session="fetch")
                )
                if updated == 0:
                    raise NoResultFound(f"Question {question_id} not found")
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
