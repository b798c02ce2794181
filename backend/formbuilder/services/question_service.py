"""
質問のビジネスロジック

全ての公開メソッドは、質問テーブルを読み書きする前に親フォームの所有者ゲートを通す。
他ユーザーのフォームに属する質問IDを推測されても中身は返さない。
"""
from typing import Optional

from sqlalchemy.orm import Session

from formbuilder.core.exceptions import BadRequest, NotFound
from formbuilder.core.logging import get_logger
from formbuilder.models.question import CHOICE_TYPES, Question
from formbuilder.repositories.question_repository import QuestionRepository
from formbuilder.schemas.question import CHOICES_REQUIRED_MESSAGE, has_enough_choices
from formbuilder.services.form_service import FormService

logger = get_logger(__name__)


class QuestionService:
    def __init__(
        self,
        db: Session,
        repository: Optional[QuestionRepository] = None,
        form_service: Optional[FormService] = None,
    ):
        self.repository = repository or QuestionRepository(db)
        self.form_service = form_service or FormService(db)

    def get_form_questions(self, form_id: str, user_id: str) -> list[Question]:
        self.form_service.get_owned_form(form_id, user_id)
        return self.repository.find_by_form_id(form_id)

    def get_question_by_id(self, form_id: str, question_id: str, user_id: str) -> Question:
        """質問取得。存在しなければNotFound、別フォームの質問ならBadRequest"""
        self.form_service.get_owned_form(form_id, user_id)

        question = self.repository.find_by_id(question_id)
        if not question:
            raise NotFound(f"Question with ID {question_id} not found")
        if question.form_id != form_id:
            raise BadRequest("Question does not belong to this form")
        return question

    def create_question(self, form_id: str, user_id: str, data: dict) -> Question:
        """質問作成。表示順は既存の最大値+1 (最初の質問は0)"""
        self.form_service.get_owned_form(form_id, user_id)

        order = self.repository.get_max_order(form_id) + 1
        question = self.repository.create(form_id, data, order)
        logger.info(
            "質問作成",
            extra={"extra_data": {"form_id": form_id, "question_id": question.id, "order": order}},
        )
        return question

    def update_question(self, form_id: str, question_id: str, user_id: str, data: dict) -> Question:
        """指定されたフィールドのみ更新"""
        question = self.get_question_by_id(form_id, question_id, user_id)

        # 更新後のタイプが選択式なら、更新後の選択肢が2件以上必要
        new_type = data.get("type", question.type)
        new_options = data["options"] if "options" in data else question.options
        if new_type in CHOICE_TYPES and not has_enough_choices(new_options):
            raise BadRequest(CHOICES_REQUIRED_MESSAGE)

        return self.repository.update(question, data)

    def delete_question(self, form_id: str, question_id: str, user_id: str) -> None:
        """質問削除。残りの質問の表示順は詰めない"""
        question = self.get_question_by_id(form_id, question_id, user_id)
        self.repository.delete(question)
        logger.info("質問削除", extra={"extra_data": {"form_id": form_id, "question_id": question_id}})

    def reorder_questions(self, form_id: str, user_id: str, items: list[tuple[str, int]]) -> list[Question]:
        """
        表示順の一括変更。

        items は (question_id, order) のリスト。フォーム外の質問IDが1件でも含まれていれば
        何も更新せずBadRequest。成功時は全件を1トランザクションで適用し、
        並べ替え後の質問一覧を返す。歯抜けの補正は行わない (呼び出し側が全体の順序を指定する)。
        """
        # 親フォームを行ロックして同一フォームへの並べ替えを直列化する
        self.form_service.get_owned_form(form_id, user_id, lock=True)

        form_question_ids = {q.id for q in self.repository.find_by_form_id(form_id)}
        for question_id, _ in items:
            if question_id not in form_question_ids:
                self.repository.db.rollback()
                raise BadRequest(f"Question with ID {question_id} does not belong to this form")

        self.repository.update_orders(items)
        logger.info("質問並べ替え", extra={"extra_data": {"form_id": form_id, "count": len(items)}})
        return self.repository.find_by_form_id(form_id)
