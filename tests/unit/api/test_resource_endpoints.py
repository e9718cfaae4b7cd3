"""
Name: Resource & Time Entry Endpoint Tests

Responsibilities:
  - CRUD over HTTP with owner isolation (404 for other users)
  - Validation errors -> 400 with field messages
  - Pagination and counts
  - Timer lifecycle (start, running, stop-and-replace, stop)
  - Health check
"""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from timetracker.api.main import create_app

pytestmark = pytest.mark.unit


class TestClients:
    def test_crud(self, client, register):
        _, headers = register()

        created = client.post("/clients", json={"name": "ACME"}, headers=headers)
        assert created.status_code == 201
        client_id = created.json()["id"]
        assert created.json()["color"] == "#e74c3c"

        patched = client.patch(
            f"/clients/{client_id}", json={"contact_info": "ops@acme.test"}, headers=headers
        )
        assert patched.json()["contact_info"] == "ops@acme.test"
        assert patched.json()["name"] == "ACME"

        assert client.get(f"/clients/{client_id}", headers=headers).status_code == 200
        deleted = client.delete(f"/clients/{client_id}", headers=headers)
        assert deleted.json() == {"deleted": True}
        assert client.get(f"/clients/{client_id}", headers=headers).status_code == 404

    def test_other_users_resources_are_404(self, client, register):
        _, owner = register(email="owner@example.com")
        _, intruder = register(email="intruder@example.com")
        client_id = client.post("/clients", json={"name": "ACME"}, headers=owner).json()["id"]

        assert client.get(f"/clients/{client_id}", headers=intruder).status_code == 404
        assert (
            client.patch(f"/clients/{client_id}", json={"name": "x"}, headers=intruder).status_code
            == 404
        )
        assert client.delete(f"/clients/{client_id}", headers=intruder).status_code == 404
        assert client.get("/clients", headers=intruder).json() == []

    def test_validation_error(self, client, register):
        _, headers = register()
        response = client.post(
            "/clients", json={"name": "", "color": "blue"}, headers=headers
        )
        assert response.status_code == 400
        assert response.json()["detail"] == (
            "name: Name is required, color: Invalid color format (should be hex)"
        )

    def test_pagination_and_count(self, client, register):
        _, headers = register()
        for i in range(3):
            client.post("/tags", json={"name": f"tag-{i}"}, headers=headers)

        page_1 = client.get("/tags?page=1&limit=2", headers=headers).json()
        page_2 = client.get("/tags?page=2&limit=2", headers=headers).json()

        assert len(page_1) == 2
        assert len(page_2) == 1
        assert {t["id"] for t in page_1}.isdisjoint({t["id"] for t in page_2})
        assert client.get("/tags/count", headers=headers).json() == {"count": 3}
        assert client.get("/tags?page=0", headers=headers).status_code == 400

    def test_requires_auth(self, client):
        assert client.get("/clients").status_code == 401


class TestProjectsAndTasks:
    def test_project_by_client_and_tasks_by_project(self, client, register):
        _, headers = register()
        acme = client.post("/clients", json={"name": "ACME"}, headers=headers).json()
        project = client.post(
            "/projects", json={"name": "Web", "client_id": acme["id"]}, headers=headers
        ).json()
        client.post(
            "/tasks", json={"name": "Spec", "project_id": project["id"]}, headers=headers
        )

        by_client = client.get(f"/projects/by-client/{acme['id']}", headers=headers).json()
        tasks = client.get(f"/tasks/by-project/{project['id']}", headers=headers).json()
        count = client.get(f"/tasks/by-project/{project['id']}/count", headers=headers).json()

        assert [p["id"] for p in by_client] == [project["id"]]
        assert [t["name"] for t in tasks] == ["Spec"]
        assert tasks[0]["status"] == "pending"
        assert count == {"count": 1}

    def test_foreign_reference_is_400(self, client, register):
        _, owner = register(email="owner@example.com")
        _, other = register(email="other@example.com")
        acme = client.post("/clients", json={"name": "ACME"}, headers=owner).json()

        response = client.post(
            "/projects", json={"name": "Web", "client_id": acme["id"]}, headers=other
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "client_id: Client not found"

    def test_malformed_id_is_400(self, client, register):
        _, headers = register()
        assert client.get("/projects/not-a-uuid", headers=headers).status_code == 400


class TestTimeEntries:
    def _project_id(self, client, headers):
        return client.post("/projects", json={"name": "Web"}, headers=headers).json()["id"]

    def test_create_with_bounds_computes_duration(self, client, register):
        _, headers = register()
        project_id = self._project_id(client, headers)

        response = client.post(
            "/time-entries",
            json={
                "project_id": project_id,
                "start_time": "2024-01-01T10:00:00Z",
                "end_time": "2024-01-01T10:01:30Z",
            },
            headers=headers,
        )

        assert response.status_code == 201
        assert response.json()["duration"] == 90_000
        assert response.json()["is_running"] is False

    def test_timer_lifecycle(self, client, register):
        _, headers = register()
        project_id = self._project_id(client, headers)

        assert client.get("/time-entries/running", headers=headers).json() is None

        first = client.post(
            "/time-entries/start", json={"project_id": project_id}, headers=headers
        ).json()
        second = client.post(
            "/time-entries/start", json={"project_id": project_id}, headers=headers
        ).json()

        running = client.get("/time-entries/running", headers=headers).json()
        assert running["id"] == second["id"]
        assert client.get(f"/time-entries/{first['id']}", headers=headers).json()[
            "is_running"
        ] is False

        stopped = client.post(f"/time-entries/{second['id']}/stop", headers=headers)
        assert stopped.status_code == 200
        assert stopped.json()["is_running"] is False
        assert stopped.json()["end_time"] is not None

        again = client.post(f"/time-entries/{second['id']}/stop", headers=headers)
        assert again.status_code == 400
        assert client.get("/time-entries/count", headers=headers).json() == {"count": 2}

    def test_by_project_and_date_range(self, client, register):
        _, headers = register()
        project_id = self._project_id(client, headers)
        for hour in ("09", "11", "15"):
            client.post(
                "/time-entries",
                json={"project_id": project_id, "start_time": f"2024-01-01T{hour}:00:00Z"},
                headers=headers,
            )

        in_range = client.get(
            "/time-entries/by-date-range",
            params={"start": "2024-01-01T09:00:00Z", "end": "2024-01-01T11:00:00Z"},
            headers=headers,
        ).json()
        inverted = client.get(
            "/time-entries/by-date-range",
            params={"start": "2024-01-02T00:00:00Z", "end": "2024-01-01T00:00:00Z"},
            headers=headers,
        )

        assert [e["start_time"][:13] for e in in_range] == ["2024-01-01T11", "2024-01-01T09"]
        assert inverted.status_code == 400
        assert client.get(
            f"/time-entries/by-project/{project_id}/count", headers=headers
        ).json() == {"count": 3}

    def test_other_users_entry_is_404(self, client, register):
        _, owner = register(email="owner@example.com")
        _, other = register(email="other@example.com")
        project_id = self._project_id(client, owner)
        entry = client.post(
            "/time-entries/start", json={"project_id": project_id}, headers=owner
        ).json()

        assert client.get(f"/time-entries/{entry['id']}", headers=other).status_code == 404
        assert client.post(f"/time-entries/{entry['id']}/stop", headers=other).status_code == 404
        assert client.delete(f"/time-entries/{uuid4()}", headers=owner).status_code == 404


def test_healthz_skips_db_in_test_env():
    with TestClient(create_app()) as client:
        response = client.get("/healthz")

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["db"] == "skipped"
    assert body["request_id"]
    assert response.headers["x-request-id"] == body["request_id"]
