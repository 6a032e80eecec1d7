from sqlalchemy import select

from med1.auth.models import UserAccount
from med1.storage.db import db


def test_register_login_and_me(client):
    register = client.post(
        "/api/v1/auth/register",
        json={"email": "Jane@Example.com", "password": "Sup3r-secret", "name": "Dr. Jane"},
    )
    assert register.status_code == 201
    assert register.json()["user"]["email"] == "jane@example.com"
    assert register.json()["user"]["slug"].startswith("dr-jane-")

    login = client.post("/api/v1/auth/login", json={"email": "jane@example.com", "password": "Sup3r-secret"})
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["name"] == "Dr. Jane"


def test_duplicate_email_is_rejected(client):
    payload = {"email": "jane@example.com", "password": "Sup3r-secret"}

    assert client.post("/api/v1/auth/register", json=payload).status_code == 201
    duplicate = client.post("/api/v1/auth/register", json=payload)

    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "Email already registered"


def test_wrong_password_is_unauthorized(client):
    client.post("/api/v1/auth/register", json={"email": "jane@example.com", "password": "Sup3r-secret"})

    response = client.post("/api/v1/auth/login", json={"email": "jane@example.com", "password": "wrong-password"})

    assert response.status_code == 401


def test_me_rejects_missing_or_bad_token(client):
    assert client.get("/api/v1/auth/me").status_code == 401
    assert client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401


def test_login_records_time_and_skips_inactive_accounts(client):
    client.post("/api/v1/auth/register", json={"email": "jane@example.com", "password": "Sup3r-secret"})

    assert client.post("/api/v1/auth/login", json={"email": "jane@example.com", "password": "Sup3r-secret"}).status_code == 200
    with db.session() as session:
        user = session.scalar(select(UserAccount).where(UserAccount.email == "jane@example.com"))
        assert user.last_login_at is not None
        user.is_active = False

    response = client.post("/api/v1/auth/login", json={"email": "jane@example.com", "password": "Sup3r-secret"})

    assert response.status_code == 401
