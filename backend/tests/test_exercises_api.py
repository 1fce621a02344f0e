import uuid
from fastapi.testclient import TestClient

from liftlog.main import app

from conftest import auth_headers, new_user_id

client = TestClient(app)
ADMIN = auth_headers(new_user_id(), role="admin")


def uniq_name(prefix="Lunge"):
    return f"{prefix} {uuid.uuid4().hex[:6]}"


def test_non_admin_cannot_create():
    r = client.post("/exercises", headers=auth_headers(new_user_id()), json={"name": uniq_name()})
    assert r.status_code == 403
    assert r.json()["detail"] == "Insufficient role"


def test_admin_create_and_list():
    name = uniq_name()
    r = client.post("/exercises", headers=ADMIN, json={"name": name, "description": "split stance"})
    assert r.status_code == 201
    listed = client.get("/exercises", headers=auth_headers(new_user_id()), params={"limit": 200}).json()
    assert name in [e["name"] for e in listed] or len(listed) == 200


def test_duplicate_name_conflicts():
    name = uniq_name()
    assert client.post("/exercises", headers=ADMIN, json={"name": name}).status_code == 201
    assert client.post("/exercises", headers=ADMIN, json={"name": name.lower()}).status_code == 409


def test_delete_blocked_while_referenced():
    user = auth_headers(new_user_id())
    ex = client.post("/exercises", headers=ADMIN, json={"name": uniq_name()}).json()
    w = client.post("/workouts", headers=user, json={"date": "2025-09-01"}).json()
    assert client.post(f"/workouts/{w['id']}/exercises", headers=user,
                       json={"exercise_id": ex["id"]}).status_code == 201

    r = client.delete(f"/exercises/{ex['id']}", headers=ADMIN)
    assert r.status_code == 409

    client.delete(f"/workouts/{w['id']}", headers=user)
    assert client.delete(f"/exercises/{ex['id']}", headers=ADMIN).status_code == 200
    assert client.delete(f"/exercises/{ex['id']}", headers=ADMIN).status_code == 404


def test_list_requires_auth():
    assert client.get("/exercises").status_code == 401
