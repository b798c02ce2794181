"""フォームのビジネスロジック: 存在確認と所有者チェック"""
from typing import Optional

from sqlalchemy.orm import Session

from formbuilder.core.exceptions import Forbidden, NotFound
from formbuilder.core.logging import get_logger
from formbuilder.models.form import Form
from formbuilder.repositories.form_repository import FormRepository

logger = get_logger(__name__)

FORBIDDEN_MESSAGE = "You do not have access to this form"


class FormService:
    def __init__(self, db: Session, repository: Optional[FormRepository] = None):
        self.repository = repository or FormRepository(db)

    def get_user_forms(self, user_id: str) -> list[Form]:
        return self.repository.find_by_user_id(user_id)

    def create_form(self, user_id: str, data: dict) -> Form:
        form = self.repository.create(user_id, title=data["title"], description=data.get("description"))
        logger.info("フォーム作成", extra={"extra_data": {"form_id": form.id, "user_id": user_id}})
        return form

    def get_form_by_id(self, form_id: str, lock: bool = False) -> Form:
        """フォーム取得。存在しなければNotFound (所有者チェックは行わない)"""
        form = self.repository.find_by_id(form_id, lock=lock)
        if not form:
            raise NotFound(f"Form with ID {form_id} not found")
        return form

    def get_owned_form(self, form_id: str, requester_id: str, lock: bool = False) -> Form:
        """所有者ゲート: 存在しなければNotFound、所有者でなければForbidden"""
        form = self.get_form_by_id(form_id, lock=lock)
        if form.user_id != requester_id:
            logger.warning(
                "他ユーザーのフォームへのアクセス拒否",
                extra={"extra_data": {"form_id": form_id, "user_id": requester_id}},
            )
            raise Forbidden(FORBIDDEN_MESSAGE)
        return form

    def update_form(self, form_id: str, requester_id: str, data: dict) -> Form:
        form = self.get_owned_form(form_id, requester_id)
        return self.repository.update(form, data)

    def delete_form(self, form_id: str, requester_id: str) -> None:
        form = self.get_owned_form(form_id, requester_id)
        self.repository.delete(form)
        logger.info("フォーム削除", extra={"extra_data": {"form_id": form_id, "user_id": requester_id}})
