"""
Name: Domain Entities and Ownership Policy Tests

Responsibilities:
  - Validate domain defaults (colors, statuses, repetitions)
  - Validate elapsed_ms / live_duration semantics
  - Validate the ownership rule (missing == foreign)
"""

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from timetracker.domain.entities import (
    CLIENT_DEFAULT_COLOR,
    PROJECT_DEFAULT_COLOR,
    TAG_DEFAULT_COLOR,
    Client,
    Project,
    ProjectStatus,
    Tag,
    Task,
    TaskStatus,
    TimeEntry,
    TimerPreset,
    elapsed_ms,
)
from timetracker.domain.ownership_policy import authorize, is_owner

pytestmark = pytest.mark.unit

T0 = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)


class TestDefaults:
    def test_catalog_defaults(self):
        owner = uuid4()
        assert Client(id=uuid4(), user_id=owner, name="ACME").color == CLIENT_DEFAULT_COLOR
        project = Project(id=uuid4(), user_id=owner, name="Web")
        assert project.color == PROJECT_DEFAULT_COLOR == "#3498db"
        assert project.status is ProjectStatus.ACTIVE
        assert Tag(id=uuid4(), user_id=owner, name="deep").color == TAG_DEFAULT_COLOR
        task = Task(id=uuid4(), user_id=owner, name="Spec", project_id=uuid4())
        assert task.status is TaskStatus.PENDING
        preset = TimerPreset(
            id=uuid4(), user_id=owner, name="P", work_duration=25, break_duration=5
        )
        assert preset.repetitions == 1

    def test_task_status_values_match_wire_format(self):
        assert TaskStatus("in-progress") is TaskStatus.IN_PROGRESS

    def test_entities_are_immutable(self):
        client = Client(id=uuid4(), user_id=uuid4(), name="ACME")
        with pytest.raises(FrozenInstanceError):
            client.name = "Other"  # type: ignore[misc]


class TestDurations:
    def test_elapsed_ms(self):
        assert elapsed_ms(T0, T0 + timedelta(seconds=90)) == 90_000

    def test_elapsed_ms_is_not_clamped(self):
        assert elapsed_ms(T0, T0 - timedelta(seconds=1)) == -1_000

    def test_live_duration_running_uses_now(self):
        entry = TimeEntry(
            id=uuid4(),
            user_id=uuid4(),
            project_id=uuid4(),
            start_time=T0,
            is_running=True,
        )
        assert entry.live_duration(now=T0 + timedelta(minutes=2)) == 120_000

    def test_live_duration_stopped_uses_stored_duration(self):
        entry = TimeEntry(
            id=uuid4(),
            user_id=uuid4(),
            project_id=uuid4(),
            start_time=T0,
            end_time=T0 + timedelta(minutes=1),
            duration=5_000,
        )
        assert entry.live_duration(now=T0 + timedelta(hours=1)) == 5_000


class TestOwnershipPolicy:
    def test_owner_gets_resource(self):
        owner = uuid4()
        tag = Tag(id=uuid4(), user_id=owner, name="x")
        assert is_owner(tag, owner)
        assert authorize(tag, owner) is tag

    @pytest.mark.parametrize("caller", [None, "other"])
    def test_foreign_or_anonymous_is_none(self, caller):
        tag = Tag(id=uuid4(), user_id=uuid4(), name="x")
        caller_id = uuid4() if caller == "other" else None
        assert authorize(tag, caller_id) is None

    def test_missing_resource_is_none(self):
        assert authorize(None, uuid4()) is None
