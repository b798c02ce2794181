"""フォームルーター"""
from fastapi import APIRouter, Depends, Response

from formbuilder.routers.deps import AuthContext, get_form_service, require_login
from formbuilder.schemas.form import CreateFormRequest, FormOut, UpdateFormRequest
from formbuilder.services.form_service import FormService

router = APIRouter(prefix="/api/forms", tags=["forms"])


@router.get("", response_model=list[FormOut])
async def list_forms(
    user: AuthContext = Depends(require_login),
    service: FormService = Depends(get_form_service),
):
    """自分のフォーム一覧"""
    return service.get_user_forms(user.id)


@router.post("", response_model=FormOut, status_code=201)
async def create_form(
    req: CreateFormRequest,
    user: AuthContext = Depends(require_login),
    service: FormService = Depends(get_form_service),
):
    """フォーム作成"""
    return service.create_form(user.id, req.model_dump())


@router.get("/{form_id}", response_model=FormOut)
async def get_form(
    form_id: str,
    user: AuthContext = Depends(require_login),
    service: FormService = Depends(get_form_service),
):
    """フォーム詳細 (質問含む)"""
    return service.get_owned_form(form_id, user.id)


@router.put("/{form_id}", response_model=FormOut)
async def update_form(
    form_id: str,
    req: UpdateFormRequest,
    user: AuthContext = Depends(require_login),
    service: FormService = Depends(get_form_service),
):
    """フォーム更新 (指定フィールドのみ)"""
    return service.update_form(form_id, user.id, req.model_dump(exclude_unset=True))


@router.delete("/{form_id}", status_code=204)
async def delete_form(
    form_id: str,
    user: AuthContext = Depends(require_login),
    service: FormService = Depends(get_form_service),
):
    """フォーム削除 (質問も削除される)"""
    service.delete_form(form_id, user.id)
    return Response(status_code=204)
