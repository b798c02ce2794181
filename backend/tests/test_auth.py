from formbuilder.core.security import TokenClaims, sign_token
from formbuilder.models.user import User

from conftest import DEFAULT_PASSWORD, register_user


def test_register_returns_user_and_sets_cookie(client):
    res = register_user(client)
    assert res.status_code == 201

    user = res.json()["user"]
    assert user["email"] == "alice@example.com"
    assert user["name"] == "Alice"
    assert user["role"] == "USER"
    assert "createdAt" in user and "updatedAt" in user
    assert "password" not in user and "passwordHash" not in user
    assert "token" not in res.json()

    cookie = res.headers["set-cookie"]
    assert cookie.startswith("access_token=")
    attributes = [part.strip().lower() for part in cookie.split(";")[1:]]
    assert "httponly" in attributes
    assert "samesite=lax" in attributes
    assert "max-age=604800" in attributes
    assert "secure" not in attributes


def test_register_stores_hashed_password(client, session):
    register_user(client)
    user = session.query(User).filter(User.email == "alice@example.com").one()
    assert user.password_hash != DEFAULT_PASSWORD
    assert user.password_hash.startswith("$2")


def test_register_duplicate_email_conflicts(client, session):
    register_user(client, name="Alice")
    res = register_user(client, name="Someone Else")

    assert res.status_code == 409
    assert res.json() == {
        "statusCode": 409,
        "message": "User with this email already exists",
        "error": "Conflict",
    }
    users = session.query(User).filter(User.email == "alice@example.com").all()
    assert len(users) == 1
    assert users[0].name == "Alice"


def test_register_validation_messages(client):
    res = client.post("/api/auth/register", json={"email": "not-an-email", "password": "secret1", "name": "A"})
    assert res.status_code == 400
    assert res.json()["message"] == "Invalid email address"

    res = client.post("/api/auth/register", json={"email": "a@example.com", "password": "short", "name": "A"})
    assert res.status_code == 400
    assert res.json()["message"] == "Password must be at least 6 characters"

    res = client.post("/api/auth/register", json={"email": "a@example.com", "password": "secret1"})
    assert res.status_code == 400
    assert res.json()["message"] == "Name is required"


def test_login_sets_cookie(client):
    register_user(client)
    client.cookies.clear()

    res = client.post("/api/auth/login", json={"email": "alice@example.com", "password": DEFAULT_PASSWORD})
    assert res.status_code == 200
    assert res.json()["user"]["email"] == "alice@example.com"
    assert "access_token=" in res.headers["set-cookie"]


def test_login_errors_are_indistinguishable(client):
    register_user(client)
    client.cookies.clear()

    unknown = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": DEFAULT_PASSWORD})
    wrong = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong-password"})

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json() == {
        "statusCode": 401,
        "message": "Invalid email or password",
        "error": "Unauthorized",
    }


def test_me_with_cookie(alice):
    res = alice.get("/api/auth/me")
    assert res.status_code == 200
    assert res.json()["email"] == "alice@example.com"
    assert "passwordHash" not in res.json()


def test_me_with_bearer_header(client):
    token = register_user(client).cookies["access_token"]
    client.cookies.clear()

    res = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 200
    assert res.json()["name"] == "Alice"


def test_me_without_credentials(client):
    res = client.get("/api/auth/me")
    assert res.status_code == 401
    assert res.json()["message"] == "No authorization header provided"


def test_me_with_malformed_header(client):
    res = client.get("/api/auth/me", headers={"Authorization": "Token abc"})
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid authorization format. Use: Bearer <token>"


def test_me_with_invalid_token(client):
    res = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid token"


def test_me_with_expired_token(client):
    token = sign_token(TokenClaims(id="x", email="x@example.com", role="USER"), expires_minutes=-1)
    res = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401
    assert res.json()["message"] == "Token expired"


def test_me_for_deleted_user(alice, session):
    session.query(User).delete()
    session.commit()

    res = alice.get("/api/auth/me")
    assert res.status_code == 401
    assert res.json()["message"] == "User not found"


def test_logout_clears_cookie(alice):
    res = alice.post("/api/auth/logout")
    assert res.status_code == 204
    assert "access_token=" in res.headers["set-cookie"]

    assert alice.get("/api/auth/me").status_code == 401


def test_logout_requires_login(client):
    assert client.post("/api/auth/logout").status_code == 401
