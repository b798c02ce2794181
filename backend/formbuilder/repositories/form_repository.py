"""フォームのDBアクセス"""
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from formbuilder.models.form import Form


class FormRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_by_user_id(self, user_id: str) -> list[Form]:
        """所有フォーム一覧 (新しい順、質問は表示順で同時取得)"""
        return (
            self.db.query(Form)
            .options(selectinload(Form.questions))
            .filter(Form.user_id == user_id)
            .order_by(Form.created_at.desc())
            .all()
        )

    def find_by_id(self, form_id: str, lock: bool = False) -> Optional[Form]:
        """
        フォーム取得。lock=True の場合は行ロック (SELECT ... FOR UPDATE) を取り、
        質問は読み込まない。ロックは現在のトランザクション終了まで保持される。
        """
        query = self.db.query(Form).filter(Form.id == form_id)
        if lock:
            query = query.with_for_update()
        else:
            query = query.options(selectinload(Form.questions))
        return query.first()

    def create(self, user_id: str, title: str, description: Optional[str] = None) -> Form:
        form = Form(user_id=user_id, title=title, description=description, is_active=True)
        self.db.add(form)
        self.db.commit()
        self.db.refresh(form)
        return form

    def update(self, form: Form, data: dict) -> Form:
        for key, value in data.items():
            setattr(form, key, value)
        self.db.commit()
        self.db.refresh(form)
        return form

    def delete(self, form: Form) -> None:
        """フォーム削除 (質問はON DELETE CASCADEで削除)"""
        self.db.delete(form)
        self.db.commit()
