"""質問ルーター: /api/forms/{form_id}/questions 配下"""
from fastapi import APIRouter, Depends, Response

from formbuilder.routers.deps import AuthContext, get_question_service, require_login
from formbuilder.schemas.question import (
    CreateQuestionRequest,
    QuestionOut,
    ReorderQuestionsRequest,
    UpdateQuestionRequest,
)
from formbuilder.services.question_service import QuestionService

router = APIRouter(prefix="/api/forms/{form_id}/questions", tags=["questions"])


@router.get("", response_model=list[QuestionOut])
async def list_questions(
    form_id: str,
    user: AuthContext = Depends(require_login),
    service: QuestionService = Depends(get_question_service),
):
    """質問一覧 (表示順)"""
    return service.get_form_questions(form_id, user.id)


@router.post("", response_model=QuestionOut, status_code=201)
async def create_question(
    form_id: str,
    req: CreateQuestionRequest,
    user: AuthContext = Depends(require_login),
    service: QuestionService = Depends(get_question_service),
):
    """質問追加 (末尾に追加)"""
    return service.create_question(form_id, user.id, req.model_dump(mode="json"))


# /reorder は /{question_id} より先に登録する
@router.patch("/reorder", response_model=list[QuestionOut])
async def reorder_questions(
    form_id: str,
    req: ReorderQuestionsRequest,
    user: AuthContext = Depends(require_login),
    service: QuestionService = Depends(get_question_service),
):
    """表示順の一括変更"""
    items = [(str(item.id), item.order) for item in req.questions]
    return service.reorder_questions(form_id, user.id, items)


@router.get("/{question_id}", response_model=QuestionOut)
async def get_question(
    form_id: str,
    question_id: str,
    user: AuthContext = Depends(require_login),
    service: QuestionService = Depends(get_question_service),
):
    """質問詳細"""
    return service.get_question_by_id(form_id, question_id, user.id)


@router.put("/{question_id}", response_model=QuestionOut)
async def update_question(
    form_id: str,
    question_id: str,
    req: UpdateQuestionRequest,
    user: AuthContext = Depends(require_login),
    service: QuestionService = Depends(get_question_service),
):
    """質問更新 (指定フィールドのみ)"""
    data = req.model_dump(mode="json", exclude_unset=True)
    return service.update_question(form_id, question_id, user.id, data)


@router.delete("/{question_id}", status_code=204)
async def delete_question(
    form_id: str,
    question_id: str,
    user: AuthContext = Depends(require_login),
    service: QuestionService = Depends(get_question_service),
):
    """質問削除"""
    service.delete_question(form_id, question_id, user.id)
    return Response(status_code=204)
