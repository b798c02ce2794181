"""Form Builder API クライアント"""
from __future__ import annotations

from typing import Any, Optional

import httpx

from formbuilder.client.cache import QueryCache
from formbuilder.core.logging import get_logger

logger = get_logger(__name__)

USER_KEY = ("auth", "user")
FORMS_KEY = ("forms",)

# ログインユーザー情報は5分間キャッシュを使う
USER_STALE_SECONDS = 5 * 60

# 401でもログイン画面へ誘導しないエンドポイント
AUTH_PATHS = ("/api/auth/login", "/api/auth/register", "/api/auth/me")


class ApiError(Exception):
    """APIが2xx以外を返した"""

    def __init__(self, status_code: int, message: str, error: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.error = error
        super().__init__(f"{status_code} {message}")


class AuthenticationRequired(ApiError):
    """未ログイン・トークン期限切れ (再ログインが必要)"""


def form_key(form_id: str) -> tuple:
    return ("forms", form_id)


def questions_key(form_id: str) -> tuple:
    return ("forms", form_id, "questions")


class FormBuilderClient:
    """
    REST API呼び出しとクエリキャッシュをまとめたクライアント。

    認証はサーバーが発行するhttp-only Cookieを httpx.Client のCookieJarで保持する。
    書き込み系の呼び出しは成功後に関連キーを無効化するので、次の読み込みで最新を取得する。
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        http: Optional[httpx.Client] = None,
        cache: Optional[QueryCache] = None,
        timeout: float = 10.0,
    ):
        self._owns_http = http is None
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.cache = cache or QueryCache()

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "FormBuilderClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # --- 共通 ---
    def _request(self, method: str, path: str, json: Any = None) -> Any:
        response = self.http.request(method, path, json=json)
        if response.is_success:
            if response.status_code == 204 or not response.content:
                return None
            return response.json()

        try:
            body = response.json()
        except ValueError:
            body = {}
        message = body.get("message") or response.reason_phrase
        error = body.get("error")
        logger.debug(f"API error: {method} {path} -> {response.status_code} {message}")

        if response.status_code == 401 and path not in AUTH_PATHS:
            self.cache.set(USER_KEY, None)
            raise AuthenticationRequired(401, message, error)
        raise ApiError(response.status_code, message, error)

    # --- 認証 ---
    def register(self, email: str, password: str, name: str) -> dict:
        data = self._request("POST", "/api/auth/register", {"email": email, "password": password, "name": name})
        self.cache.set(USER_KEY, data["user"])
        return data["user"]

    def login(self, email: str, password: str) -> dict:
        data = self._request("POST", "/api/auth/login", {"email": email, "password": password})
        self.cache.set(USER_KEY, data["user"])
        return data["user"]

    def me(self) -> Optional[dict]:
        """ログインユーザー。未ログインならNone"""

        def load():
            try:
                return self._request("GET", "/api/auth/me")
            except ApiError as e:
                if e.status_code == 401:
                    return None
                raise

        return self.cache.fetch(USER_KEY, load, stale_after=USER_STALE_SECONDS)

    @property
    def is_authenticated(self) -> bool:
        return self.me() is not None

    def logout(self) -> None:
        self._request("POST", "/api/auth/logout")
        self.http.cookies.clear()
        self.cache.clear()
        self.cache.set(USER_KEY, None)

    # --- フォーム ---
    def list_forms(self) -> list[dict]:
        return self.cache.fetch(FORMS_KEY, lambda: self._request("GET", "/api/forms"))

    def get_form(self, form_id: str) -> dict:
        return self.cache.fetch(form_key(form_id), lambda: self._request("GET", f"/api/forms/{form_id}"))

    def create_form(self, title: str, description: Optional[str] = None) -> dict:
        body = {"title": title}
        if description is not None:
            body["description"] = description
        form = self._request("POST", "/api/forms", body)
        self.cache.invalidate(FORMS_KEY)
        return form

    def update_form(self, form_id: str, **changes: Any) -> dict:
        """changes: title / description / isActive"""
        form = self._request("PUT", f"/api/forms/{form_id}", changes)
        self.cache.invalidate(FORMS_KEY)
        return form

    def delete_form(self, form_id: str) -> None:
        self._request("DELETE", f"/api/forms/{form_id}")
        self.cache.invalidate(FORMS_KEY)

    # --- 質問 ---
    # フォーム一覧も各フォームの質問を含むため、質問の書き込み後は ("forms",) 以下を全て無効化する
    def list_questions(self, form_id: str) -> list[dict]:
        return self.cache.fetch(
            questions_key(form_id),
            lambda: self._request("GET", f"/api/forms/{form_id}/questions"),
        )

    def create_question(
        self,
        form_id: str,
        text: str,
        type: str,
        required: bool = False,
        choices: Optional[list[str]] = None,
    ) -> dict:
        body: dict[str, Any] = {"text": text, "type": type, "required": required}
        if choices is not None:
            body["options"] = {"choices": choices}
        question = self._request("POST", f"/api/forms/{form_id}/questions", body)
        self.cache.invalidate(FORMS_KEY)
        return question

    def update_question(self, form_id: str, question_id: str, **changes: Any) -> dict:
        """changes: text / type / required / options"""
        question = self._request("PUT", f"/api/forms/{form_id}/questions/{question_id}", changes)
        self.cache.invalidate(FORMS_KEY)
        return question

    def delete_question(self, form_id: str, question_id: str) -> None:
        self._request("DELETE", f"/api/forms/{form_id}/questions/{question_id}")
        self.cache.invalidate(FORMS_KEY)

    def reorder_questions(self, form_id: str, question_ids: list[str]) -> list[dict]:
        """question_ids の並び順をそのまま 0 始まりの表示順として送る"""
        body = {"questions": [{"id": qid, "order": i} for i, qid in enumerate(question_ids)]}
        questions = self._request("PATCH", f"/api/forms/{form_id}/questions/reorder", body)
        self.cache.invalidate(FORMS_KEY)
        self.cache.set(questions_key(form_id), questions)
        return questions
