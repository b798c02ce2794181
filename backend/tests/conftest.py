import os

# 設定は import 時に読み込まれるため、アプリより先に環境変数を上書きする
os.environ["ENV"] = "test"
os.environ["DEBUG"] = "false"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-at-least-32-characters"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from formbuilder.core.database import Database
from formbuilder.main import create_app

DEFAULT_PASSWORD = "password123"


@pytest.fixture
def database():
    """テストごとに空のインメモリSQLite"""
    db = Database(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    db.connect()
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    s = database.session()
    yield s
    s.close()


@pytest.fixture
def app(database):
    return create_app(database=database)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def register_user(client, email="alice@example.com", password=DEFAULT_PASSWORD, name="Alice"):
    return client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "name": name},
    )


@pytest.fixture
def make_client(app, client):
    """登録済み (ログイン状態) のユーザーごとにクライアントを作る"""
    created = []

    def _make(email, name="User", password=DEFAULT_PASSWORD):
        c = TestClient(app)
        res = register_user(c, email=email, password=password, name=name)
        assert res.status_code == 201, res.text
        created.append(c)
        return c

    yield _make
    for c in created:
        c.close()


@pytest.fixture
def alice(make_client):
    return make_client("alice@example.com", name="Alice")


@pytest.fixture
def bob(make_client):
    return make_client("bob@example.com", name="Bob")


def create_form(c, title="Survey", description=None):
    body = {"title": title}
    if description is not None:
        body["description"] = description
    res = c.post("/api/forms", json=body)
    assert res.status_code == 201, res.text
    return res.json()


def create_question(c, form_id, text="Your name?", type="TEXT", **extra):
    res = c.post(f"/api/forms/{form_id}/questions", json={"text": text, "type": type, **extra})
    assert res.status_code == 201, res.text
    return res.json()
