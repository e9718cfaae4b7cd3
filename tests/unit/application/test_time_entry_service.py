"""
Name: Time Entry Engine Tests

Responsibilities:
  - Validate the duration rule (explicit > end-start > previous/0)
  - Validate the Running/Stopped state machine (start, stop, update)
  - Validate stop-and-replace (at most one running timer per user)
  - Validate owner-scoped queries (by project, by task, by date range)
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from timetracker.application.usecases.results import ServiceErrorCode
from timetracker.application.usecases.time_entries import (
    TimeEntryService,
    derive_duration,
)
from timetracker.crosscutting.locks import KeyedLock
from timetracker.crosscutting.metrics import REGISTRY
from timetracker.domain.entities import Project, Tag, Task

pytestmark = pytest.mark.unit

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def owner():
    return uuid4()


@pytest.fixture
def project(projects, owner):
    return projects.create(Project(id=uuid4(), user_id=owner, name="Web"))


@pytest.fixture
def service(entries, projects, tasks, tags):
    return TimeEntryService(
        entries, projects=projects, tasks=tasks, tags=tags, user_locks=KeyedLock()
    )


def _entry(project, start, **extra):
    return {"project_id": str(project.id), "start_time": start.isoformat(), **extra}


class TestDurationRule:
    def test_explicit_wins(self):
        assert derive_duration(explicit=5_000, start=T0, end=T0 + timedelta(hours=1), previous=7) == 5_000

    def test_falls_back_to_previous(self):
        assert derive_duration(explicit=None, start=T0, end=None, previous=42) == 42

    def test_duration_from_bounds(self, service, owner, project):
        result = service.create(
            owner, _entry(project, T0, end_time=(T0 + timedelta(seconds=90)).isoformat())
        )
        assert result.error is None
        assert result.item.duration == 90_000
        assert result.item.is_running is False

    def test_explicit_duration_on_create(self, service, owner, project):
        result = service.create(
            owner,
            _entry(project, T0, end_time=(T0 + timedelta(hours=1)).isoformat(), duration=5_000),
        )
        assert result.item.duration == 5_000

    def test_inverted_range_gives_negative_duration(self, service, owner, project):
        result = service.create(
            owner, _entry(project, T0, end_time=(T0 - timedelta(seconds=30)).isoformat())
        )
        assert result.error is None
        assert result.item.duration == -30_000

    def test_inverted_range_on_update_is_kept(self, service, owner, project):
        entry = service.create(owner, _entry(project, T0)).item
        updated = service.update(
            owner, entry.id, {"end_time": (T0 - timedelta(minutes=1)).isoformat()}
        )
        assert updated.error is None
        assert updated.item.duration == -60_000

    def test_without_end_duration_is_zero(self, service, owner, project):
        assert service.create(owner, _entry(project, T0)).item.duration == 0

    def test_negative_explicit_duration_is_rejected(self, service, owner, project):
        result = service.create(owner, _entry(project, T0, duration=-1))
        assert result.error.code is ServiceErrorCode.BAD_REQUEST

    def test_naive_datetimes_are_utc(self, service, owner, project):
        result = service.create(
            owner, {"project_id": project.id, "start_time": "2024-03-01T09:00:00"}
        )
        assert result.item.start_time == T0


class TestReferences:
    def test_foreign_project_is_rejected(self, service, project):
        result = service.create(uuid4(), _entry(project, T0))
        assert result.error.message == "project_id: Project not found"

    def test_foreign_task_and_tag_are_rejected(self, service, owner, project, tasks, tags):
        foreign_task = tasks.create(
            Task(id=uuid4(), user_id=uuid4(), name="x", project_id=project.id)
        )
        foreign_tag = tags.create(Tag(id=uuid4(), user_id=uuid4(), name="x"))

        by_task = service.create(owner, _entry(project, T0, task_id=str(foreign_task.id)))
        by_tag = service.create(owner, _entry(project, T0, tag_ids=[str(foreign_tag.id)]))

        assert by_task.error.message == "task_id: Task not found"
        assert by_tag.error.message == "tag_ids: Tag not found"

    def test_owned_tags_are_stored(self, service, owner, project, tags):
        tag = tags.create(Tag(id=uuid4(), user_id=owner, name="deep"))
        result = service.create(owner, _entry(project, T0, tag_ids=[str(tag.id)]))
        assert result.item.tag_ids == (tag.id,)


class TestRunningTimers:
    def test_start_and_stop(self, service, owner, project):
        started = service.start(owner, {"project_id": project.id}).item

        assert started.is_running is True
        assert started.end_time is None
        assert service.find_running(owner).item.id == started.id

        stopped = service.stop(owner, started.id).item

        assert stopped.is_running is False
        assert stopped.end_time is not None
        assert stopped.duration >= 0
        assert service.find_running(owner).item is None

    def test_stop_not_running_is_bad_request(self, service, owner, project):
        entry = service.create(
            owner, _entry(project, T0, end_time=(T0 + timedelta(minutes=1)).isoformat())
        ).item
        result = service.stop(owner, entry.id)
        assert result.error.code is ServiceErrorCode.BAD_REQUEST
        assert result.error.message == "Time entry is not running"

    def test_stop_foreign_entry_is_not_found(self, service, owner, project):
        entry = service.start(owner, {"project_id": project.id}).item
        assert service.stop(uuid4(), entry.id).error.code is ServiceErrorCode.NOT_FOUND

    def test_running_entry_cannot_have_end_time(self, service, owner, project):
        result = service.create(
            owner,
            _entry(project, T0, is_running=True, end_time=(T0 + timedelta(minutes=1)).isoformat()),
        )
        assert result.error.code is ServiceErrorCode.BAD_REQUEST

    def test_new_running_entry_stops_previous(self, service, owner, project):
        first = service.create(owner, _entry(project, T0, is_running=True)).item
        second_start = T0 + timedelta(hours=1)
        second = service.create(owner, _entry(project, second_start, is_running=True)).item

        previous = service.get(owner, first.id).item
        assert previous.is_running is False
        assert previous.end_time == second_start
        assert previous.duration == 3_600_000
        assert service.find_running(owner).item.id == second.id
        assert service.count_by_user(owner).count == 2

    def test_replaced_timer_never_gets_negative_duration(self, service, owner, project):
        first = service.create(owner, _entry(project, T0, is_running=True)).item
        service.create(owner, _entry(project, T0 - timedelta(hours=1), is_running=True))

        previous = service.get(owner, first.id).item
        assert previous.end_time == T0
        assert previous.duration == 0

    def test_concurrent_starts_leave_one_running_entry(self, service, owner, project, entries):
        with ThreadPoolExecutor(max_workers=20) as pool:
            results = list(
                pool.map(
                    lambda _: service.start(owner, {"project_id": project.id}),
                    range(20),
                )
            )

        assert all(r.error is None for r in results)
        running = [
            e
            for e in entries.list(filters={"user_id": owner}, offset=0, limit=50)
            if e.is_running
        ]
        assert len(running) == 1
        assert service.find_running(owner).item.id == running[0].id
        assert service.count_by_user(owner).count == 20

    def test_transitions_are_counted(self, service, owner, project):
        def sample(transition):
            return REGISTRY.get_sample_value(
                "timetracker_timer_transitions_total", {"transition": transition}
            ) or 0.0

        before = {t: sample(t) for t in ("started", "stopped", "replaced")}

        service.start(owner, {"project_id": project.id})
        second = service.start(owner, {"project_id": project.id}).item
        service.stop(owner, second.id)

        assert sample("started") - before["started"] == 2
        assert sample("replaced") - before["replaced"] == 1
        assert sample("stopped") - before["stopped"] == 1

    def test_running_timers_are_per_user(self, service, owner, project, projects):
        other = uuid4()
        other_project = projects.create(Project(id=uuid4(), user_id=other, name="Theirs"))

        mine = service.start(owner, {"project_id": project.id}).item
        service.start(other, {"project_id": other_project.id})

        assert service.get(owner, mine.id).item.is_running is True


class TestUpdate:
    def test_end_time_stops_running_entry(self, service, owner, project):
        entry = service.create(owner, _entry(project, T0, is_running=True)).item
        end = T0 + timedelta(minutes=30)

        updated = service.update(owner, entry.id, {"end_time": end.isoformat()}).item

        assert updated.is_running is False
        assert updated.end_time == end
        assert updated.duration == 1_800_000

    def test_is_running_false_sets_end_time_now(self, service, owner, project):
        entry = service.create(owner, _entry(project, T0, is_running=True)).item
        updated = service.update(owner, entry.id, {"is_running": False}).item
        assert updated.is_running is False
        assert updated.end_time is not None
        assert updated.duration > 0

    def test_notes_only_keeps_duration(self, service, owner, project):
        entry = service.create(
            owner, _entry(project, T0, end_time=(T0 + timedelta(seconds=10)).isoformat())
        ).item
        updated = service.update(owner, entry.id, {"notes": "reviewed"}).item
        assert updated.notes == "reviewed"
        assert updated.duration == 10_000

    def test_explicit_duration_wins_on_update(self, service, owner, project):
        entry = service.create(
            owner, _entry(project, T0, end_time=(T0 + timedelta(seconds=10)).isoformat())
        ).item
        updated = service.update(
            owner,
            entry.id,
            {"end_time": (T0 + timedelta(hours=2)).isoformat(), "duration": 5_000},
        ).item
        assert updated.duration == 5_000

    def test_resuming_stops_other_timer(self, service, owner, project):
        old = service.create(
            owner, _entry(project, T0, end_time=(T0 + timedelta(minutes=5)).isoformat())
        ).item
        running = service.create(
            owner, _entry(project, T0 + timedelta(hours=1), is_running=True)
        ).item

        resumed = service.update(owner, old.id, {"is_running": True}).item

        assert resumed.is_running is True
        assert resumed.end_time is None
        assert service.get(owner, running.id).item.is_running is False
        assert service.find_running(owner).item.id == old.id

    def test_resume_with_end_time_is_bad_request(self, service, owner, project):
        entry = service.create(
            owner, _entry(project, T0, end_time=(T0 + timedelta(minutes=5)).isoformat())
        ).item
        result = service.update(
            owner,
            entry.id,
            {"is_running": True, "end_time": (T0 + timedelta(hours=1)).isoformat()},
        )
        assert result.error.code is ServiceErrorCode.BAD_REQUEST

    def test_update_foreign_entry_is_not_found(self, service, owner, project):
        entry = service.create(owner, _entry(project, T0)).item
        result = service.update(uuid4(), entry.id, {"notes": "x"})
        assert result.error.code is ServiceErrorCode.NOT_FOUND


class TestQueries:
    def test_by_project_and_task_are_owner_scoped(self, service, owner, project, tasks):
        task = tasks.create(Task(id=uuid4(), user_id=owner, name="T", project_id=project.id))
        service.create(owner, _entry(project, T0, task_id=str(task.id)))
        service.create(owner, _entry(project, T0 + timedelta(hours=1)))

        assert service.count_by_project(owner, project.id).count == 2
        assert service.count_by_task(owner, task.id).count == 1
        assert len(service.list_by_project(owner, project.id).items) == 2
        assert len(service.list_by_task(owner, task.id).items) == 1
        assert service.count_by_project(uuid4(), project.id).count == 0
        assert service.list_by_task(uuid4(), task.id).items == []

    def test_date_range_is_inclusive_and_newest_first(self, service, owner, project):
        for hours in (0, 1, 2, 5):
            service.create(owner, _entry(project, T0 + timedelta(hours=hours)))

        items = service.list_by_date_range(
            owner, T0, T0 + timedelta(hours=2)
        ).items

        assert [e.start_time for e in items] == [
            T0 + timedelta(hours=2),
            T0 + timedelta(hours=1),
            T0,
        ]

    def test_date_range_pages(self, service, owner, project):
        for hours in range(4):
            service.create(owner, _entry(project, T0 + timedelta(hours=hours)))

        page_1 = service.list_by_date_range(owner, T0, T0 + timedelta(days=1), page=1, limit=2).items
        page_2 = service.list_by_date_range(owner, T0, T0 + timedelta(days=1), page=2, limit=2).items

        assert {e.id for e in page_1}.isdisjoint({e.id for e in page_2})
        assert page_1[0].start_time > page_2[0].start_time

    def test_inverted_range_is_bad_request(self, service, owner):
        result = service.list_by_date_range(owner, T0 + timedelta(days=1), T0)
        assert result.error.code is ServiceErrorCode.BAD_REQUEST
        assert result.error.message == "start: must not be after end"
