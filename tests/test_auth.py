from ticketpro.core.security import get_password_hash
from ticketpro.db.session import SessionLocal
from ticketpro.models.user import User


def ensure_user(email: str, password: str = "testpass", role: str = "staff", is_active: bool = True):
    db = SessionLocal()
    try:
        u = User(
            email=email,
            full_name=email.split("@")[0],
            hashed_password=get_password_hash(password),
            role=role,
            is_active=is_active,
        )
        db.add(u)
        db.commit()
    finally:
        db.close()


def test_health(client):
    r = client.get("/health/")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "env": "test"}


def test_login_json_and_me(client):
    ensure_user("manager1@example.com", role="manager")
    r = client.post("/auth/login-json", json={"email": "Manager1@example.com", "password": "testpass"})
    assert r.status_code == 200, r.text
    token = r.json()["access_token"]

    r = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["role"] == "manager"
    assert r.json()["email"] == "manager1@example.com"


def test_login_form(client):
    ensure_user("staff1@example.com")
    r = client.post("/auth/login", data={"username": "staff1@example.com", "password": "testpass"})
    assert r.status_code == 200, r.text
    assert r.json()["token_type"] == "bearer"


def test_login_failures(client):
    ensure_user("blocked@example.com", is_active=False)
    ensure_user("staff2@example.com")
    assert client.post("/auth/login-json", json={"email": "nobody@example.com", "password": "x"}).status_code == 401
    assert client.post("/auth/login-json", json={"email": "staff2@example.com", "password": "wrong"}).status_code == 401
    assert client.post("/auth/login-json", json={"email": "blocked@example.com", "password": "testpass"}).status_code == 403


def test_token_roles_drive_permissions(client):
    ensure_user("staff3@example.com")
    token = client.post("/auth/login-json", json={"email": "staff3@example.com", "password": "testpass"}).json()["access_token"]
    r = client.post(
        "/umrah/group-tickets",
        json={"groupName": "X"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert r.status_code == 403


def test_invalid_token(client):
    r = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401
