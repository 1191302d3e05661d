from __future__ import annotations

import pytest

from src.event_portal.event_portal.container import assemble
from src.event_portal.event_portal.main import create_app
from src.event_portal.event_portal.users.session import FlaskSessionStore


@pytest.fixture
def client(monkeypatch, users_repo, events_repo, attendance_repo, fixed_now):
    monkeypatch.setenv("APP_ENV", "testing")
    container = assemble(
        users_repo=users_repo,
        events_repo=events_repo,
        attendance_repo=attendance_repo,
        sessions=FlaskSessionStore(),
        clock=lambda: fixed_now,
    )
    app = create_app(container)
    return app.test_client()


def _signup(client, email, role, password="secret123"):
    return client.post(
        "/auth/signup",
        json={"name": email.split("@")[0], "email": email, "role": role, "password": password},
    )


def _login(client, email, role, password="secret123"):
    return client.post("/auth/login", json={"email": email, "role": role, "password": password})


def test_signup_login_logout(client):
    resp = _signup(client, "fac@campus.edu", "faculty")
    assert resp.status_code == 201
    assert client.get("/auth/me").get_json()["user"]["role"] == "faculty"

    assert _signup(client, "fac@campus.edu", "student").status_code == 409

    client.post("/auth/logout")
    assert client.get("/auth/me").status_code == 401

    bad = _login(client, "fac@campus.edu", "student")
    assert bad.status_code == 401
    assert bad.get_json()["message"] == "Invalid credentials"
    assert _login(client, "fac@campus.edu", "faculty").status_code == 200


def test_login_session_cookie_expires_after_session_days(client):
    resp = _signup(client, "stu@campus.edu", "student")
    cookie = resp.headers["Set-Cookie"]
    assert "Expires=" in cookie

    client.post("/auth/logout")
    resp = _login(client, "stu@campus.edu", "student")
    assert "Expires=" in resp.headers["Set-Cookie"]


def test_event_lifecycle_over_http(client):
    _signup(client, "fac@campus.edu", "faculty")
    resp = client.post(
        "/events",
        json={
            "title": "Assembly",
            "venue": "Gym",
            "date": "2026-03-05",
            "time": "09:00",
            "is_required": True,
            "penalty_amount": "150",
        },
    )
    assert resp.status_code == 201
    event = resp.get_json()["event"]
    assert event["status"] == "upcoming"
    assert event["penalty_amount"] == "150.00"

    qr = client.get(f"/events/{event['id']}/qr.png")
    assert qr.status_code == 200
    assert qr.mimetype == "image/png"

    client.post("/auth/logout")
    _signup(client, "a@campus.edu", "student")
    assert client.post("/events", json={"title": "x"}).status_code == 403
    checkin = client.post("/checkin", json={"qr_code": event["qr_code_data"]})
    assert checkin.status_code == 200
    assert checkin.get_json()["record"]["status"] == "present"
    assert client.post("/checkin", json={"qr_code": "EVENT-unknown"}).status_code == 404

    client.post("/auth/logout")
    _signup(client, "b@campus.edu", "student")
    assert client.get("/events/upcoming").get_json()["events"][0]["id"] == event["id"]
    assert "qr_code_data" not in client.get("/events").get_json()["events"][0]

    client.post("/auth/logout")
    _login(client, "fac@campus.edu", "faculty")
    fin = client.post(f"/events/{event['id']}/finalize")
    assert fin.get_json()["absences_created"] == 1
    assert fin.get_json()["event"]["status"] == "completed"
    assert client.post(f"/events/{event['id']}/finalize").get_json()["absences_created"] == 0
    roster = client.get(f"/events/{event['id']}/attendance").get_json()["attendance"]
    assert sorted(r["record"]["status"] for r in roster) == ["absent", "present"]

    client.post("/auth/logout")
    _login(client, "b@campus.edu", "student")
    fines = client.get("/me/fines").get_json()["fines"]
    assert [f["amount"] for f in fines] == ["150.00"]
    assert client.get("/me/summary").get_json()["outstanding_total"] == "150.00"

    paid = client.post(f"/fines/{fines[0]['record']['id']}/pay")
    assert paid.get_json()["record"]["penalty_paid"] is True
    assert client.get("/me/fines").get_json()["fines"] == []
    assert client.get("/me/attendance").get_json()["records"][0]["penalty_paid"] is True


def test_create_event_rejects_bad_input(client):
    _signup(client, "fac@campus.edu", "faculty")

    neg = client.post("/events", json={"title": "T", "venue": "V", "start_time": "2026-03-05T09:00", "penalty_amount": -5})
    bad_date = client.post("/events", json={"title": "T", "venue": "V", "date": "05/03/2026"})

    assert neg.status_code == 400
    assert bad_date.status_code == 400


def test_unknown_event_is_404(client):
    _signup(client, "fac@campus.edu", "faculty")

    assert client.post("/events/nope/finalize").status_code == 404
    assert client.get("/events/nope/attendance").status_code == 404
