from fastapi.testclient import TestClient

from liftlog.main import app
from liftlog.db import get_db
from liftlog import invalidation

from conftest import auth_headers, new_user_id

client = TestClient(app)


def make_workout(headers, **overrides):
    body = {"date": "2025-09-01", "name": "Leg day", "duration_minutes": 50}
    body.update(overrides)
    r = client.post("/workouts", headers=headers, json=body)
    assert r.status_code == 201, r.text
    return r.json()


def test_requires_auth():
    assert client.get("/workouts", params={"date": "2025-09-01"}).status_code == 401
    r = client.post("/workouts", json={"date": "2025-09-01"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Not authenticated"
    assert r.headers["WWW-Authenticate"] == "Bearer"


def test_bad_token_rejected():
    r = client.get("/workouts", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


def test_expired_token_rejected():
    from liftlog.security import create_access_token
    expired = create_access_token(new_user_id(), expires_minutes=-1)
    r = client.get("/workouts", headers={"Authorization": f"Bearer {expired}"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Token expired"


def test_unauthenticated_request_never_opens_storage():
    touched = []

    def tracking_db():
        touched.append(True)
        yield None

    app.dependency_overrides[get_db] = tracking_db
    try:
        assert client.get("/workouts").status_code == 401
        assert client.delete("/workouts/1").status_code == 401
        assert client.post("/workouts/1/exercises", json={"exercise_name": "Squat"}).status_code == 401
    finally:
        app.dependency_overrides.pop(get_db, None)
    assert touched == []


def test_create_then_read_day_view():
    h = auth_headers(new_user_id())
    w = make_workout(h)
    assert w["date"] == "2025-09-01"
    assert w["display_name"] == "Leg day"
    assert "user_id" not in w

    r = client.post(f"/workouts/{w['id']}/exercises", headers=h, json={"exercise_name": "Back Squat", "order": 0})
    assert r.status_code == 201, r.text
    we_id = r.json()["id"]
    for reps in (5, 5, 3):
        r = client.post(f"/workout-exercises/{we_id}/sets", headers=h, json={"reps": reps, "weight": 100, "rpe": 8})
        assert r.status_code == 201, r.text
    r = client.post(f"/workouts/{w['id']}/exercises", headers=h, json={"exercise_name": "Plank", "order": 1})
    assert r.status_code == 201

    r = client.get("/workouts", headers=h, params={"date": "2025-09-01"})
    assert r.status_code == 200
    [day] = r.json()
    assert [e["name"] for e in day["exercises"]] == ["Back Squat", "Plank"]
    assert [s["set_number"] for s in day["exercises"][0]["sets"]] == [1, 2, 3]
    assert day["exercises"][0]["sets"][0]["weight"] == 100.0
    assert day["exercises"][1]["sets"] == []


def test_untitled_workout_display_name():
    h = auth_headers(new_user_id())
    w = make_workout(h, name=None)
    assert w["name"] is None
    assert w["display_name"] == "Untitled Workout"


def test_owner_cannot_be_spoofed_from_payload():
    owner, victim = new_user_id(), new_user_id()
    w = make_workout(auth_headers(owner), user_id=victim)
    assert client.get(f"/workouts/{w['id']}", headers=auth_headers(victim)).status_code == 404
    assert client.get(f"/workouts/{w['id']}", headers=auth_headers(owner)).status_code == 200


def test_other_user_sees_nothing():
    owner, intruder = auth_headers(new_user_id()), auth_headers(new_user_id())
    w = make_workout(owner)

    assert client.get("/workouts", headers=intruder, params={"date": "2025-09-01"}).json() == []
    assert client.get("/workouts/calendar", headers=intruder, params={"year": 2025, "month": 8}).json() == []
    assert client.get(f"/workouts/{w['id']}", headers=intruder).status_code == 404
    assert client.delete(f"/workouts/{w['id']}", headers=intruder).status_code == 404
    assert client.post(f"/workouts/{w['id']}/exercises", headers=intruder,
                       json={"exercise_name": "Curl"}).status_code == 404

    r = client.get(f"/workouts/{w['id']}", headers=owner)
    assert r.status_code == 200
    assert r.json()["name"] == "Leg day"


def test_not_found_and_unauthorized_are_indistinguishable():
    u1, u2 = auth_headers(new_user_id()), auth_headers(new_user_id())
    w1 = make_workout(u1)

    foreign = client.patch(f"/workouts/{w1['id']}", headers=u2, json={"name": "mine now"})
    missing = client.patch("/workouts/9999999", headers=u1, json={"name": "mine now"})
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json() == {"detail": "Workout not found or unauthorized"}


def test_partial_update_keeps_other_fields():
    h = auth_headers(new_user_id())
    w = make_workout(h, notes="felt good")
    r = client.patch(f"/workouts/{w['id']}", headers=h, json={"duration_minutes": 75})
    assert r.status_code == 200
    body = r.json()
    assert body["duration_minutes"] == 75
    assert body["name"] == "Leg day"
    assert body["notes"] == "felt good"


def test_update_cannot_null_date():
    h = auth_headers(new_user_id())
    w = make_workout(h)
    r = client.patch(f"/workouts/{w['id']}", headers=h, json={"date": None})
    assert r.status_code == 422


def test_delete_returns_workout_and_cascades():
    h = auth_headers(new_user_id())
    w = make_workout(h)
    we = client.post(f"/workouts/{w['id']}/exercises", headers=h, json={"exercise_name": "Bench"}).json()
    s = client.post(f"/workout-exercises/{we['id']}/sets", headers=h, json={"reps": 8}).json()

    r = client.delete(f"/workouts/{w['id']}", headers=h)
    assert r.status_code == 200
    assert r.json()["id"] == w["id"]

    assert client.get(f"/workouts/{w['id']}", headers=h).status_code == 404
    assert client.patch(f"/sets/{s['id']}", headers=h, json={"reps": 9}).status_code == 404
    assert client.delete(f"/workout-exercises/{we['id']}", headers=h).status_code == 404


def test_same_day_order_over_http():
    h = auth_headers(new_user_id())
    first = make_workout(h, name="Morning")
    second = make_workout(h, name="Evening")
    r = client.get("/workouts", headers=h, params={"date": "2025-09-01"})
    ids = [w["id"] for w in r.json()]
    assert ids == [second["id"], first["id"]]


def test_calendar_month_boundary():
    h = auth_headers(new_user_id())
    make_workout(h, date="2025-08-31")
    make_workout(h, date="2025-09-01")
    make_workout(h, date="2025-09-01")
    r = client.get("/workouts/calendar", headers=h, params={"year": 2025, "month": 8})
    assert r.status_code == 200
    assert r.json() == ["2025-09-01"]


def test_calendar_rejects_month_twelve():
    h = auth_headers(new_user_id())
    assert client.get("/workouts/calendar", headers=h, params={"year": 2025, "month": 12}).status_code == 422


def test_dates_range_endpoint():
    h = auth_headers(new_user_id())
    for day in ("2025-02-27", "2025-03-01", "2025-03-04"):
        make_workout(h, date=day)
    r = client.get("/workouts/dates", headers=h, params={"start": "2025-02-28", "end": "2025-03-04"})
    assert r.json() == ["2025-03-01", "2025-03-04"]
    bad = client.get("/workouts/dates", headers=h, params={"start": "2025-03-04", "end": "2025-02-28"})
    assert bad.status_code == 422


def test_recent_workouts():
    h = auth_headers(new_user_id())
    for day in ("2025-01-01", "2025-01-05", "2025-01-03"):
        make_workout(h, date=day)
    r = client.get("/workouts/recent", headers=h, params={"limit": 2})
    assert [w["date"] for w in r.json()] == ["2025-01-05", "2025-01-03"]


def test_duplicate_exercise_in_workout_conflicts():
    h = auth_headers(new_user_id())
    w = make_workout(h)
    assert client.post(f"/workouts/{w['id']}/exercises", headers=h, json={"exercise_name": "Row"}).status_code == 201
    r = client.post(f"/workouts/{w['id']}/exercises", headers=h, json={"exercise_name": "row"})
    assert r.status_code == 409


def test_unknown_exercise_id_is_404():
    h = auth_headers(new_user_id())
    w = make_workout(h)
    r = client.post(f"/workouts/{w['id']}/exercises", headers=h, json={"exercise_id": 987654321})
    assert r.status_code == 404
    assert r.json()["detail"] == "Exercise not found"


def test_set_update_and_delete():
    h = auth_headers(new_user_id())
    w = make_workout(h)
    we = client.post(f"/workouts/{w['id']}/exercises", headers=h, json={"exercise_name": "Dip"}).json()
    s = client.post(f"/workout-exercises/{we['id']}/sets", headers=h,
                    json={"reps": 10, "is_bodyweight": True, "weight": 10}).json()
    assert s["is_bodyweight"] is True and s["weight"] == 10.0

    r = client.patch(f"/sets/{s['id']}", headers=h, json={"rpe": 9, "weight": None})
    assert r.status_code == 200
    assert r.json()["rpe"] == 9 and r.json()["weight"] is None

    other = auth_headers(new_user_id())
    assert client.delete(f"/sets/{s['id']}", headers=other).status_code == 404
    assert client.delete(f"/sets/{s['id']}", headers=h).status_code == 200
    assert client.delete(f"/sets/{s['id']}", headers=h).status_code == 404


def test_invalidation_listener_sees_dates():
    seen = []
    invalidation.add_listener(seen.append)
    try:
        user = new_user_id()
        h = auth_headers(user)
        w = make_workout(h, date="2025-09-01")
        client.patch(f"/workouts/{w['id']}", headers=h, json={"date": "2025-09-03"})
        client.delete(f"/workouts/{w['id']}", headers=h)
        client.patch("/workouts/9999999", headers=h, json={"name": "nope"})
    finally:
        invalidation.remove_listener(seen.append)

    mine = [e for e in seen if e.user_id == user]
    assert [[d.isoformat() for d in e.dates] for e in mine] == [
        ["2025-09-01"],
        ["2025-09-01", "2025-09-03"],
        ["2025-09-03"],
    ]
    assert all(e.workout_ids == (w["id"],) for e in mine)


def test_failing_listener_does_not_break_write():
    def broken(event):
        raise RuntimeError("cache down")

    invalidation.add_listener(broken)
    try:
        r = client.post("/workouts", headers=auth_headers(new_user_id()), json={"date": "2025-09-01"})
    finally:
        invalidation.remove_listener(broken)
    assert r.status_code == 201
