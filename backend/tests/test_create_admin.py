from formbuilder.core.security import verify_password
from formbuilder.create_admin import create_admin
from formbuilder.models.user import User


def test_create_admin_once(database, session):
    assert create_admin(database, "root@example.com", "rootpass1", "Root") is True
    assert create_admin(database, "root@example.com", "other", "Other") is False

    admins = session.query(User).filter(User.email == "root@example.com").all()
    assert len(admins) == 1
    assert admins[0].role == "ADMIN"
    assert admins[0].name == "Root"
    assert verify_password("rootpass1", admins[0].password_hash)


def test_admin_can_log_in(database, client):
    create_admin(database, "root@example.com", "rootpass1", "Root")

    res = client.post("/api/auth/login", json={"email": "root@example.com", "password": "rootpass1"})
    assert res.status_code == 200
    assert res.json()["user"]["role"] == "ADMIN"
