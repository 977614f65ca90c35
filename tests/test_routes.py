"""Tests for the task list HTTP routes."""

import inspect
import json

from fastapi.routing import APIRoute

from tasklist.routes.tasks import router


def create(client, data):
    response = client.post("/tasks/", json=data)
    assert response.status_code == 201
    return response.json()


class TestTaskRoutes:
    """Test task API routes."""

    def test_handlers_run_in_threadpool(self):
        """Task handlers are plain functions, so storage I/O runs off the event loop."""
        endpoints = [route.endpoint for route in router.routes if isinstance(route, APIRoute)]

        assert endpoints
        assert not any(inspect.iscoroutinefunction(endpoint) for endpoint in endpoints)

    def test_root_and_health(self, client):
        assert client.get("/").json()["name"] == "Task List API"

        response = client.get("/healthz")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_create_task_success(self, client, sample_task_data):
        """Test successful task creation via API."""
        response = client.post("/tasks/", json=sample_task_data)

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Buy milk"
        assert data["completed"] is False
        assert isinstance(data["id"], int)
        assert "createdAt" in data

    def test_create_task_validation_error(self, client):
        """Missing fields come back as an ordered list of messages."""
        response = client.post("/tasks/", json={"title": ""})

        assert response.status_code == 400
        body = response.json()
        assert body["errors"] == [
            "Title is required",
            "Description is required",
            "Date is required",
            "Time is required",
        ]
        assert client.get("/tasks/counts").json()["total"] == 0

    def test_list_tasks_with_filters(self, client, sample_task_data, other_task_data):
        first = create(client, sample_task_data)
        second = create(client, other_task_data)
        client.post(f"/tasks/{second['id']}/toggle")

        all_tasks = client.get("/tasks/").json()
        active = client.get("/tasks/?filter=active").json()
        completed = client.get("/tasks/?filter=completed").json()

        assert [t["id"] for t in all_tasks["tasks"]] == [first["id"], second["id"]]
        assert [t["id"] for t in active["tasks"]] == [first["id"]]
        assert [t["id"] for t in completed["tasks"]] == [second["id"]]
        assert active["filter"] == "active"
        assert all_tasks["counts"] == {"total": 2, "active": 1, "completed": 1}

    def test_list_tasks_invalid_filter(self, client):
        response = client.get("/tasks/?filter=done")

        assert response.status_code == 422

    def test_get_task(self, client, sample_task_data):
        created = create(client, sample_task_data)

        response = client.get(f"/tasks/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_get_task_not_found(self, client):
        response = client.get("/tasks/1")

        assert response.status_code == 404
        assert response.json()["error"] == "Task 1 not found"

    def test_edit_task(self, client, sample_task_data):
        created = create(client, sample_task_data)

        response = client.put(f"/tasks/{created['id']}", json=dict(sample_task_data, title="Buy bread"))

        assert response.status_code == 200
        assert response.json()["title"] == "Buy bread"
        assert response.json()["id"] == created["id"]

    def test_edit_task_validation_error(self, client, sample_task_data):
        created = create(client, sample_task_data)

        response = client.put(f"/tasks/{created['id']}", json=dict(sample_task_data, time=""))

        assert response.status_code == 400
        assert response.json()["errors"] == ["Time is required"]

    def test_edit_task_not_found(self, client, sample_task_data):
        response = client.put("/tasks/1", json=sample_task_data)

        assert response.status_code == 404

    def test_toggle_scenario(self, client, sample_task_data):
        created = create(client, sample_task_data)
        assert client.get("/tasks/counts").json() == {"total": 1, "active": 1, "completed": 0}

        response = client.post(f"/tasks/{created['id']}/toggle")
        assert response.json()["completed"] is True
        assert client.get("/tasks/counts").json() == {"total": 1, "active": 0, "completed": 1}

        response = client.post("/tasks/clear-completed")
        assert response.json() == {"removed": 1, "counts": {"total": 0, "active": 0, "completed": 0}}

    def test_toggle_not_found(self, client):
        assert client.post("/tasks/1/toggle").status_code == 404

    def test_delete_requires_confirmation(self, client, sample_task_data):
        created = create(client, sample_task_data)

        response = client.delete(f"/tasks/{created['id']}")

        assert response.status_code == 409
        assert client.get(f"/tasks/{created['id']}").status_code == 200

    def test_delete_confirmed(self, client, sample_task_data, other_task_data):
        first = create(client, sample_task_data)
        second = create(client, other_task_data)

        response = client.delete(f"/tasks/{second['id']}?confirm=true")

        assert response.status_code == 204
        remaining = client.get("/tasks/").json()["tasks"]
        assert [t["id"] for t in remaining] == [first["id"]]

    def test_delete_not_found(self, client):
        assert client.delete("/tasks/1?confirm=true").status_code == 404

    def test_edit_session_via_form(self, client, sample_task_data, other_task_data):
        first = create(client, sample_task_data)
        second = create(client, other_task_data)

        assert client.post(f"/tasks/{first['id']}/edit").json()["title"] == "Buy milk"
        client.post(f"/tasks/{second['id']}/edit")

        response = client.post("/tasks/submit", json=dict(other_task_data, title="Call electrician"))

        assert response.status_code == 200
        assert response.json()["id"] == second["id"]
        titles = [t["title"] for t in client.get("/tasks/").json()["tasks"]]
        assert titles == ["Buy milk", "Call electrician"]

    def test_cancel_edit_then_submit_creates(self, client, sample_task_data):
        first = create(client, sample_task_data)
        client.post(f"/tasks/{first['id']}/edit")

        assert client.delete("/tasks/edit").status_code == 204

        response = client.post("/tasks/submit", json=sample_task_data)
        assert response.json()["id"] != first["id"]
        assert client.get("/tasks/counts").json()["total"] == 2

    def test_begin_edit_not_found(self, client):
        assert client.post("/tasks/1/edit").status_code == 404

    def test_tasks_written_to_storage_file(self, client, test_settings, sample_task_data):
        created = create(client, sample_task_data)

        with open(test_settings.storage_file, "r", encoding="utf-8") as f:
            stored = json.load(f)

        records = json.loads(stored["taskList"])
        assert records[0]["id"] == created["id"]
        assert records[0]["createdAt"] == created["createdAt"]

    def test_tasks_survive_restart(self, test_settings, sample_task_data):
        from fastapi.testclient import TestClient

        from tasklist.main import create_app

        with TestClient(create_app(test_settings)) as first_client:
            created = create(first_client, sample_task_data)
            first_client.post(f"/tasks/{created['id']}/toggle")

        with TestClient(create_app(test_settings)) as second_client:
            tasks = second_client.get("/tasks/").json()["tasks"]

        assert len(tasks) == 1
        assert tasks[0]["id"] == created["id"]
        assert tasks[0]["completed"] is True
