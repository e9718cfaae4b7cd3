"""
Name: Owned Resource Service Tests

Responsibilities:
  - Validate CRUD with ownership guard (missing == foreign -> NOT_FOUND)
  - Validate input messages and domain defaults
  - Validate cross-owner reference checks (client_id / project_id)
  - Validate owner-scoped list/count and unscoped task-by-project queries
"""

from uuid import uuid4

import pytest

from timetracker.application.usecases.resources import (
    ClientService,
    ProjectService,
    TagService,
    TaskService,
    TimerPresetService,
)
from timetracker.application.usecases.results import ServiceErrorCode
from timetracker.domain.entities import ProjectStatus, TaskStatus

pytestmark = pytest.mark.unit


@pytest.fixture
def client_service(clients):
    return ClientService(clients)


@pytest.fixture
def project_service(projects, clients):
    return ProjectService(projects, clients)


@pytest.fixture
def task_service(tasks, projects):
    return TaskService(tasks, projects)


class TestCreate:
    def test_create_applies_defaults_and_owner(self, project_service):
        owner = uuid4()
        result = project_service.create(owner, {"name": "  Website  "})

        assert result.error is None
        project = result.item
        assert project.user_id == owner
        assert project.name == "Website"
        assert project.color == "#3498db"
        assert project.status is ProjectStatus.ACTIVE
        assert project.created_at is not None

    def test_invalid_fields_are_reported_in_one_message(self, client_service):
        result = client_service.create(uuid4(), {"name": "   ", "color": "red"})

        assert result.item is None
        assert result.error.code is ServiceErrorCode.BAD_REQUEST
        assert result.error.message == (
            "name: Name is required, color: Invalid color format (should be hex)"
        )

    def test_short_hex_color_is_accepted(self):
        from timetracker.infrastructure.repositories.in_memory import (
            InMemoryOwnedResourceRepository,
        )

        result = TagService(InMemoryOwnedResourceRepository()).create(
            uuid4(), {"name": "deep", "color": "#abc"}
        )
        assert result.item.color == "#abc"

    def test_timer_preset_requires_positive_minutes(self, presets):
        result = TimerPresetService(presets).create(
            uuid4(), {"name": "Bad", "work_duration": 0, "break_duration": 5}
        )
        assert result.error.code is ServiceErrorCode.BAD_REQUEST
        assert result.error.message.startswith("work_duration:")

    def test_project_with_foreign_client_is_rejected(self, project_service, client_service):
        other_client = client_service.create(uuid4(), {"name": "Theirs"}).item

        result = project_service.create(
            uuid4(), {"name": "Mine", "client_id": str(other_client.id)}
        )

        assert result.error.code is ServiceErrorCode.BAD_REQUEST
        assert result.error.message == "client_id: Client not found"

    def test_task_requires_owned_project(self, task_service, project_service):
        owner = uuid4()
        project = project_service.create(owner, {"name": "Mine"}).item

        ok = task_service.create(owner, {"name": "Write", "project_id": project.id})
        foreign = task_service.create(uuid4(), {"name": "Write", "project_id": project.id})

        assert ok.item.status is TaskStatus.PENDING
        assert foreign.error.message == "project_id: Project not found"

    def test_malformed_reference_is_bad_request(self, task_service):
        result = task_service.create(uuid4(), {"name": "Write", "project_id": "nope"})
        assert result.error.code is ServiceErrorCode.BAD_REQUEST
        assert result.error.message.startswith("project_id:")


class TestReadUpdateDelete:
    def test_foreign_resource_looks_missing(self, client_service):
        owner, intruder = uuid4(), uuid4()
        client = client_service.create(owner, {"name": "ACME"}).item

        foreign = client_service.get(intruder, client.id)
        missing = client_service.get(owner, uuid4())

        assert foreign.error.code is ServiceErrorCode.NOT_FOUND
        assert foreign.error.message == missing.error.message == "Client not found"

    def test_update_merges_only_sent_fields(self, client_service):
        owner = uuid4()
        client = client_service.create(
            owner, {"name": "ACME", "contact_info": "ops@acme.test"}
        ).item

        updated = client_service.update(owner, client.id, {"color": "#000000"}).item

        assert updated.color == "#000000"
        assert updated.name == "ACME"
        assert updated.contact_info == "ops@acme.test"

    def test_update_by_other_user_is_not_found(self, client_service):
        client = client_service.create(uuid4(), {"name": "ACME"}).item
        result = client_service.update(uuid4(), client.id, {"name": "Hacked"})
        assert result.error.code is ServiceErrorCode.NOT_FOUND

    def test_project_client_can_be_cleared(self, project_service, client_service):
        owner = uuid4()
        client = client_service.create(owner, {"name": "ACME"}).item
        project = project_service.create(
            owner, {"name": "Web", "client_id": client.id}
        ).item

        updated = project_service.update(owner, project.id, {"client_id": None}).item

        assert updated.client_id is None

    def test_null_on_required_field_means_no_change(self, client_service):
        owner = uuid4()
        client = client_service.create(owner, {"name": "ACME"}).item
        updated = client_service.update(owner, client.id, {"name": None}).item
        assert updated.name == "ACME"

    def test_delete(self, client_service):
        owner = uuid4()
        client = client_service.create(owner, {"name": "ACME"}).item

        assert client_service.delete(uuid4(), client.id).error.code is (
            ServiceErrorCode.NOT_FOUND
        )
        assert client_service.delete(owner, client.id).deleted is True
        assert client_service.get(owner, client.id).error is not None


class TestQueries:
    def test_list_and_count_are_owner_scoped(self, client_service):
        owner, other = uuid4(), uuid4()
        for name in ("A", "B", "C"):
            client_service.create(owner, {"name": name})
        client_service.create(other, {"name": "X"})

        assert client_service.count(owner).count == 3
        assert {c.name for c in client_service.list(owner).items} == {"A", "B", "C"}

    def test_pages_are_disjoint(self, client_service):
        owner = uuid4()
        for i in range(5):
            client_service.create(owner, {"name": f"C{i}"})

        first = client_service.list(owner, page=1, limit=2).items
        second = client_service.list(owner, page=2, limit=2).items
        third = client_service.list(owner, page=3, limit=2).items

        ids = [c.id for c in first + second + third]
        assert len(first) == len(second) == 2
        assert len(third) == 1
        assert len(set(ids)) == 5

    def test_invalid_page_is_bad_request(self, client_service):
        result = client_service.list(uuid4(), page=0)
        assert result.error.code is ServiceErrorCode.BAD_REQUEST

    def test_projects_by_client(self, project_service, client_service):
        owner = uuid4()
        acme = client_service.create(owner, {"name": "ACME"}).item
        project_service.create(owner, {"name": "Web", "client_id": acme.id})
        project_service.create(owner, {"name": "Internal"})

        items = project_service.list_by_client(owner, acme.id).items

        assert [p.name for p in items] == ["Web"]
        assert project_service.list_by_client(uuid4(), acme.id).items == []

    def test_tasks_by_project_are_not_owner_scoped(self, task_service, project_service):
        owner = uuid4()
        project = project_service.create(owner, {"name": "Web"}).item
        task_service.create(owner, {"name": "T1", "project_id": project.id})
        task_service.create(owner, {"name": "T2", "project_id": project.id})

        assert task_service.count_by_project(project.id).count == 2
        assert len(task_service.list_by_project(project.id).items) == 2


def _owned_project(owner, projects, clients, tasks, tags, presets):
    return ProjectService(projects, clients), {"name": "Web"}


def _owned_task(owner, projects, clients, tasks, tags, presets):
    project = ProjectService(projects, clients).create(owner, {"name": "Web"}).item
    return TaskService(tasks, projects), {"name": "Ship", "project_id": project.id}


def _owned_tag(owner, projects, clients, tasks, tags, presets):
    return TagService(tags), {"name": "deep"}


def _owned_preset(owner, projects, clients, tasks, tags, presets):
    return TimerPresetService(presets), {
        "name": "Pomodoro",
        "work_duration": 25,
        "break_duration": 5,
    }


@pytest.mark.parametrize(
    "make",
    [_owned_project, _owned_task, _owned_tag, _owned_preset],
    ids=["project", "task", "tag", "timer_preset"],
)
def test_other_caller_cannot_see_or_touch_resource(
    make, projects, clients, tasks, tags, presets
):
    owner, intruder = uuid4(), uuid4()
    service, payload = make(owner, projects, clients, tasks, tags, presets)
    item = service.create(owner, payload).item
    assert item is not None

    got = service.get(intruder, item.id)
    updated = service.update(intruder, item.id, {"name": "Hacked"})
    deleted = service.delete(intruder, item.id)

    assert got.error.code is ServiceErrorCode.NOT_FOUND
    assert updated.error.code is ServiceErrorCode.NOT_FOUND
    assert deleted.error.code is ServiceErrorCode.NOT_FOUND
    assert got.error.message == f"{service.resource_name} not found"

    # R: el recurso sigue intacto para su dueño.
    kept = service.get(owner, item.id).item
    assert kept.name == payload["name"]
