from med1.auth.models import UserAccount
from med1.referral.service import lead_registration_service
from med1.storage.db import db


def test_get_own_profile_with_counts(client, make_user, auth_headers, seed_referral):
    user = make_user(email="jane@example.com", name="Dr. Jane", slug="dr-jane", specialty="Dentistry")
    seed_referral(slug="abc123", owner_id=user.id)
    lead_registration_service.register_lead("abc123", name="Lead A", phone="555-0100")
    lead_registration_service.register_lead("abc123", name="Lead B", phone="555-0101")

    response = client.get("/api/v1/users/profile", params={"userId": user.id}, headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json() == {
        "id": user.id,
        "name": "Dr. Jane",
        "email": "jane@example.com",
        "image": None,
        "specialty": "Dentistry",
        "slug": "dr-jane",
        "pageTemplate": "default",
        "profileUrl": "https://med1.app/dr-jane",
        "_count": {"leads": 2, "indications": 1},
    }


def test_profile_requires_authentication(client, make_user):
    user = make_user()

    response = client.get("/api/v1/users/profile", params={"userId": user.id})

    assert response.status_code == 401


def test_cannot_read_someone_elses_profile(client, make_user, auth_headers):
    jane = make_user(email="jane@example.com")
    john = make_user(email="john@example.com")

    response = client.get("/api/v1/users/profile", params={"userId": john.id}, headers=auth_headers(jane))

    assert response.status_code == 403


def test_admin_can_read_any_profile(client, make_user, auth_headers):
    admin = make_user(email="admin@example.com", is_admin=True)
    john = make_user(email="john@example.com", name="Dr. John")

    response = client.get("/api/v1/users/profile", params={"userId": john.id}, headers=auth_headers(admin))
    missing = client.get("/api/v1/users/profile", params={"userId": 9999}, headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.json()["name"] == "Dr. John"
    assert missing.status_code == 404


def test_update_profile_changes_only_submitted_fields(client, make_user, auth_headers):
    user = make_user(name="Dr. Jane", specialty="Dentistry")

    response = client.put(
        "/api/v1/profile",
        json={"name": "Dr. Jane Doe", "image": "/uploads/avatar.png", "pageTemplate": "pro"},
        headers=auth_headers(user),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Dr. Jane Doe"
    assert body["image"] == "/uploads/avatar.png"
    assert body["pageTemplate"] == "pro"
    assert body["specialty"] == "Dentistry"

    with db.session() as session:
        stored = session.get(UserAccount, user.id)
        assert stored.name == "Dr. Jane Doe"
        assert stored.page_template == "pro"
        assert stored.specialty == "Dentistry"


def test_last_write_wins(client, make_user, auth_headers):
    user = make_user()
    headers = auth_headers(user)

    client.put("/api/v1/profile", json={"specialty": "Orthodontics"}, headers=headers)
    client.put("/api/v1/profile", json={"specialty": "Pediatrics"}, headers=headers)

    with db.session() as session:
        assert session.get(UserAccount, user.id).specialty == "Pediatrics"


def test_invalid_page_template_is_rejected(client, make_user, auth_headers):
    user = make_user()

    response = client.put("/api/v1/profile", json={"pageTemplate": "fancy"}, headers=auth_headers(user))

    assert response.status_code == 422
    with db.session() as session:
        assert session.get(UserAccount, user.id).page_template == "default"
