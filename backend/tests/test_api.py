"""End-to-end tests through the HTTP API."""

from datetime import timedelta

import httpx
import pytest

from conftest import STRONG_PASSWORD
from planner.database import utcnow
from planner.main import app
from planner.services.email_sender import EmailSender, get_email_sender
from planner.services.weather_service import OpenWeatherMapService, get_weather_service


class RecordingSender(EmailSender):
    def __init__(self):
        self.sent = []

    def send(self, to_address, subject, body):
        self.sent.append((to_address, subject, body))
        return True


@pytest.fixture
def sender():
    recording = RecordingSender()
    app.dependency_overrides[get_email_sender] = lambda: recording
    return recording


@pytest.fixture
def alice(register_and_login):
    return register_and_login("alice@example.edu", first_name="Alice", last_name="Ng")


@pytest.fixture
def bob(register_and_login):
    return register_and_login("bob@example.edu", first_name="Bob", last_name="Osei")


def _create_course(client, headers, code="CS101", name="Intro to CS"):
    resp = client.post("/api/courses", headers=headers, json={
        "name": name, "course_code": code, "semester": "Fall 2030",
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def _create_assignment(client, headers, course_id, name="Essay", due=None, **extra):
    due = due or utcnow() + timedelta(days=3)
    resp = client.post("/api/assignments", headers=headers, json={
        "course_id": course_id, "name": name, "due_date": due.isoformat(), **extra,
    })
    return resp


def _me(client, headers):
    return client.get("/api/auth/me", headers=headers).json()


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"


class TestAuth:
    def test_register_and_me(self, client, alice):
        me = _me(client, alice)
        assert me["email"] == "alice@example.edu"
        assert me["full_name"] == "Alice Ng"

    def test_duplicate_email(self, client, alice):
        resp = client.post("/api/auth/register", json={
            "email": "ALICE@example.edu", "password": STRONG_PASSWORD,
            "first_name": "A", "last_name": "N",
        })
        assert resp.status_code == 409

    def test_weak_password_rejected(self, client):
        resp = client.post("/api/auth/register", json={
            "email": "weak@example.edu", "password": "password",
            "first_name": "W", "last_name": "K",
        })
        assert resp.status_code == 422

    def test_wrong_password(self, client, alice):
        resp = client.post("/api/auth/login", json={"email": "alice@example.edu", "password": "Wr0ng!Pass"})
        assert resp.status_code == 401

    def test_requires_token(self, client):
        assert client.get("/api/courses").status_code in (401, 403)

    def test_delete_account(self, client, alice):
        _create_course(client, alice)
        assert client.delete("/api/auth/me", headers=alice).status_code == 204
        assert client.get("/api/auth/me", headers=alice).status_code == 401


class TestPasswordReset:
    def test_reset_flow(self, client, alice, sender):
        resp = client.post("/api/auth/forgot-password", json={"email": "alice@example.edu"})
        assert resp.status_code == 202

        to_address, _, body = sender.sent[0]
        assert to_address == "alice@example.edu"
        token = body.split("token=")[1].split()[0]

        # Reset tokens are not access tokens
        assert client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"}).status_code == 401

        new_password = "N3w!Password"
        resp = client.post("/api/auth/reset-password", json={"token": token, "new_password": new_password})
        assert resp.status_code == 200

        login = client.post("/api/auth/login", json={"email": "alice@example.edu", "password": new_password})
        assert login.status_code == 200

    def test_unknown_email_looks_the_same(self, client, sender):
        resp = client.post("/api/auth/forgot-password", json={"email": "nobody@example.edu"})
        assert resp.status_code == 202
        assert sender.sent == []

    def test_failed_delivery_looks_like_unknown_email(self, client, alice):
        class FailingSender(EmailSender):
            def send(self, to_address, subject, body):
                return False

        app.dependency_overrides[get_email_sender] = FailingSender

        registered = client.post("/api/auth/forgot-password", json={"email": "alice@example.edu"})
        unknown = client.post("/api/auth/forgot-password", json={"email": "nobody@example.edu"})

        assert registered.status_code == unknown.status_code == 202
        assert registered.json() == unknown.json()

    def test_access_token_cannot_reset(self, client, alice):
        access_token = alice["Authorization"].split()[1]
        resp = client.post("/api/auth/reset-password", json={"token": access_token, "new_password": "N3w!Password"})
        assert resp.status_code == 400


class TestCourses:
    def test_duplicate_code_conflicts_per_owner(self, client, alice, bob):
        _create_course(client, alice, code="MA201")

        resp = client.post("/api/courses", headers=alice, json={
            "name": "Again", "course_code": "MA201", "semester": "Spring",
        })
        assert resp.status_code == 409

        # Another user may reuse the code
        _create_course(client, bob, code="MA201")

    def test_other_users_course_is_not_found(self, client, alice, bob):
        course = _create_course(client, alice)

        assert client.get(f"/api/courses/{course['id']}", headers=bob).status_code == 404
        assert client.put(f"/api/courses/{course['id']}", headers=bob, json={"name": "Mine"}).status_code == 404
        assert client.delete(f"/api/courses/{course['id']}", headers=bob).status_code == 404
        assert client.get("/api/courses", headers=bob).json()["total"] == 0

    def test_update_and_detail(self, client, alice):
        course = _create_course(client, alice)
        resp = client.put(f"/api/courses/{course['id']}", headers=alice, json={"color": "#ff0000"})
        assert resp.status_code == 200
        assert resp.json()["color"] == "#ff0000"
        assert resp.json()["name"] == "Intro to CS"

        _create_assignment(client, alice, course["id"])
        detail = client.get(f"/api/courses/{course['id']}", headers=alice).json()
        assert len(detail["assignments"]) == 1

    def test_invalid_color(self, client, alice):
        resp = client.post("/api/courses", headers=alice, json={
            "name": "Art", "course_code": "AR1", "semester": "Fall", "color": "red",
        })
        assert resp.status_code == 422


class TestAssignments:
    def test_create_in_foreign_course(self, client, alice, bob):
        course = _create_course(client, alice)
        resp = _create_assignment(client, bob, course["id"])
        assert resp.status_code == 400

    def test_status_patch_sets_completed_at(self, client, alice):
        course = _create_course(client, alice)
        assignment = _create_assignment(client, alice, course["id"]).json()
        assert assignment["completed_at"] is None

        resp = client.patch(f"/api/assignments/{assignment['id']}/status", headers=alice, json={"status": "Completed"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "Completed"
        assert resp.json()["completed_at"] is not None

    def test_upcoming_and_overdue(self, client, alice):
        course = _create_course(client, alice)
        now = utcnow()
        _create_assignment(client, alice, course["id"], name="soon", due=now + timedelta(days=2))
        _create_assignment(client, alice, course["id"], name="late", due=now - timedelta(days=2))
        _create_assignment(client, alice, course["id"], name="far", due=now + timedelta(days=30))

        upcoming = client.get("/api/assignments/upcoming", headers=alice).json()
        overdue = client.get("/api/assignments/overdue", headers=alice).json()
        assert [a["name"] for a in upcoming["assignments"]] == ["soon"]
        assert [a["name"] for a in overdue["assignments"]] == ["late"]
        assert overdue["assignments"][0]["is_overdue"] is True

        wide = client.get("/api/assignments/upcoming?days=60", headers=alice).json()
        assert {a["name"] for a in wide["assignments"]} == {"soon", "far"}

    def test_other_users_assignment_is_not_found(self, client, alice, bob):
        course = _create_course(client, alice)
        assignment = _create_assignment(client, alice, course["id"]).json()

        assert client.get(f"/api/assignments/{assignment['id']}", headers=bob).status_code == 404
        assert client.delete(f"/api/assignments/{assignment['id']}", headers=bob).status_code == 404
        assert client.get(f"/api/courses/{course['id']}/assignments", headers=bob).json()["total"] == 0


class TestProjects:
    def test_creator_is_owner(self, client, alice):
        resp = client.post("/api/projects", headers=alice, json={"name": "Capstone"})
        assert resp.status_code == 201
        members = resp.json()["members"]
        assert len(members) == 1
        assert members[0]["role"] == "Owner"
        assert members[0]["email"] == "alice@example.edu"

    def test_non_member_gets_404(self, client, alice, bob):
        project = client.post("/api/projects", headers=alice, json={"name": "Capstone"}).json()
        assert client.get(f"/api/projects/{project['id']}", headers=bob).status_code == 404
        assert client.post(f"/api/projects/{project['id']}/tasks", headers=bob, json={"name": "x"}).status_code == 404

    def test_membership_and_last_owner(self, client, alice, bob):
        project = client.post("/api/projects", headers=alice, json={"name": "Capstone"}).json()
        alice_id = _me(client, alice)["id"]
        bob_id = _me(client, bob)["id"]

        resp = client.post(f"/api/projects/{project['id']}/members", headers=alice, json={"email": "bob@example.edu"})
        assert resp.status_code == 201
        assert len(resp.json()["members"]) == 2

        again = client.post(f"/api/projects/{project['id']}/members", headers=alice, json={"email": "bob@example.edu"})
        assert again.status_code == 409

        unknown = client.post(f"/api/projects/{project['id']}/members", headers=alice, json={"email": "ghost@example.edu"})
        assert unknown.status_code == 409

        # Bob can see the project now
        assert client.get(f"/api/projects/{project['id']}", headers=bob).status_code == 200

        resp = client.delete(f"/api/projects/{project['id']}/members/{alice_id}", headers=bob)
        assert resp.status_code == 409

        resp = client.delete(f"/api/projects/{project['id']}/members/{bob_id}", headers=alice)
        assert resp.status_code == 204
        assert client.get(f"/api/projects/{project['id']}", headers=bob).status_code == 404

    def test_tasks(self, client, alice):
        project = client.post("/api/projects", headers=alice, json={"name": "Capstone"}).json()
        alice_id = _me(client, alice)["id"]

        resp = client.post(f"/api/projects/{project['id']}/tasks", headers=alice, json={
            "name": "Write report", "assigned_user_id": alice_id,
        })
        assert resp.status_code == 201
        task = resp.json()
        assert task["status"] == "NotStarted"
        assert task["assigned_user_name"] == "Alice Ng"

        resp = client.patch(
            f"/api/projects/{project['id']}/tasks/{task['id']}/status",
            headers=alice,
            json={"status": "Completed"},
        )
        assert resp.status_code == 204

        detail = client.get(f"/api/projects/{project['id']}", headers=alice).json()
        assert detail["completed_tasks"] == 1
        assert detail["completion_percentage"] == 100.0

        assert client.delete(f"/api/projects/{project['id']}/tasks/{task['id']}", headers=alice).status_code == 204
        assert client.get(f"/api/projects/{project['id']}", headers=alice).json()["total_tasks"] == 0

    def test_assignee_must_be_member(self, client, alice, bob):
        project = client.post("/api/projects", headers=alice, json={"name": "Capstone"}).json()
        bob_id = _me(client, bob)["id"]
        resp = client.post(f"/api/projects/{project['id']}/tasks", headers=alice, json={
            "name": "Slides", "assigned_user_id": bob_id,
        })
        assert resp.status_code == 400


class TestDashboard:
    def test_empty_dashboard(self, client, alice):
        data = client.get("/api/dashboard", headers=alice).json()
        assert data["total_assignments"] == 0
        assert data["completion_percentage"] == 0.0
        assert data["upcoming_window_days"] == 7

    def test_counts(self, client, alice):
        course = _create_course(client, alice)
        now = utcnow()
        _create_assignment(client, alice, course["id"], name="a", due=now + timedelta(days=1))
        _create_assignment(client, alice, course["id"], name="b", due=now - timedelta(days=1))
        _create_assignment(client, alice, course["id"], name="c", due=now + timedelta(days=1), status="Completed")
        client.post("/api/projects", headers=alice, json={"name": "Capstone"})

        data = client.get("/api/dashboard", headers=alice).json()
        assert data["total_courses"] == 1
        assert data["total_assignments"] == 3
        assert data["completed_assignments"] == 1
        assert data["upcoming_assignments"] == 1
        assert data["overdue_assignments"] == 1
        assert data["total_group_projects"] == 1
        assert data["completion_percentage"] == 33.3

    def test_reminder(self, client, alice, sender):
        course = _create_course(client, alice)
        _create_assignment(client, alice, course["id"], name="Lab report")

        resp = client.post("/api/dashboard/reminders", headers=alice)
        assert resp.json() == {"sent": True, "message": "Reminder sent."}
        assert "Lab report" in sender.sent[0][2]


class TestWeather:
    def test_not_configured(self, client, alice):
        assert client.get("/api/dashboard/weather", headers=alice).status_code == 503

    def test_with_service(self, client, alice):
        def handler(request):
            return httpx.Response(200, json={
                "name": request.url.params["q"],
                "main": {"temp": 18.0},
                "weather": [{"description": "light rain", "icon": "10d"}],
            })

        service = OpenWeatherMapService(
            api_key="test-key",
            base_url="https://api.example.test/data/2.5/",
            client=httpx.Client(transport=httpx.MockTransport(handler)),
        )
        app.dependency_overrides[get_weather_service] = lambda: service

        resp = client.get("/api/dashboard/weather?city=Kumasi", headers=alice)
        assert resp.status_code == 200
        assert resp.json()["city"] == "Kumasi"
        assert resp.json()["temperature_c"] == 18.0
