"""Shared fixtures: a fixed clock, an in-memory page store, a recording notifier and a fake TickTick client."""
from datetime import datetime

import pytest

from ticksync.ticktick_api.client import TickTickAPIError
from ticksync.ticktick_api.data_models import Project, Task
from ticksync.utils.config import Settings

# 08:00 local time on Monday 2024-01-15
NOW = datetime(2024, 1, 15, 8, 0).astimezone()

READ_CALLS = {"get_projects", "get_project", "get_project_tasks", "get_task"}


class MemoryDocumentStore:
    def __init__(self, documents=None):
        self.documents = dict(documents or {})
        self.mtimes = {}

    @staticmethod
    def _key(path):
        return path if path.endswith(".md") else path + ".md"

    def read(self, path):
        return self.documents[self._key(path)]

    def write(self, path, text):
        key = self._key(path)
        self.documents[key] = text
        self.mtimes[key] = self.mtimes.get(key, 0) + 1

    def exists(self, path):
        return self._key(path) in self.documents

    def mtime(self, path):
        return self.mtimes.get(self._key(path), 0)


class RecordingNotifier:
    def __init__(self):
        self.infos = []
        self.warnings = []
        self.errors = []

    def info(self, message):
        self.infos.append(message)

    def warning(self, message):
        self.warnings.append(message)

    def error(self, message):
        self.errors.append(message)


class FakeClient:
    """Stands in for TickTickClient; records every call."""

    def __init__(self, projects=(), tasks=None, failing_projects=(), failing_tasks=()):
        self.projects = {p.id: p for p in projects}
        self.tasks = {pid: list(ts) for pid, ts in (tasks or {}).items()}
        self.failing_projects = set(failing_projects)
        self.failing_tasks = set(failing_tasks)
        self.fail_project_listing = False
        self.calls = []

    @property
    def mutations(self):
        return [c for c in self.calls if c[0] not in READ_CALLS]

    def get_projects(self):
        self.calls.append(("get_projects",))
        if self.fail_project_listing:
            raise TickTickAPIError(401, "unauthorized")
        return list(self.projects.values())

    def get_project(self, project_id):
        self.calls.append(("get_project", project_id))
        if project_id in self.failing_projects:
            raise TickTickAPIError(500, "server error")
        return self.projects[project_id]

    def get_project_tasks(self, project_id):
        self.calls.append(("get_project_tasks", project_id))
        if project_id in self.failing_projects:
            raise TickTickAPIError(500, "server error")
        return list(self.tasks.get(project_id, []))

    def get_task(self, project_id, task_id):
        self.calls.append(("get_task", project_id, task_id))
        if task_id in self.failing_tasks:
            raise TickTickAPIError(500, "server error")
        for task in self.tasks.get(project_id, []):
            if task.id == task_id:
                return task
        raise TickTickAPIError(404, "task not found")

    def create_task(self, fields):
        self.calls.append(("create_task", fields))
        return Task.model_validate({"id": "new-task", **fields})

    def update_task(self, task_id, fields):
        self.calls.append(("update_task", task_id, fields))
        return Task.model_validate({"id": task_id, **fields})

    def complete_task(self, project_id, task_id):
        self.calls.append(("complete_task", project_id, task_id))

    def uncomplete_task(self, project_id, task_id):
        self.calls.append(("uncomplete_task", project_id, task_id))


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def settings():
    return Settings(
        access_token="token",
        selected_projects=["p1"],
        include_completed=True,
        completed_days_limit=7,
    )


@pytest.fixture
def store():
    return MemoryDocumentStore()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def work_project():
    return Project(id="p1", name="Work")


@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path, monkeypatch):
    """Never read or write the real ~/.ticksync settings during tests."""
    monkeypatch.setenv("TICKSYNC_SETTINGS", str(tmp_path / "settings.json"))
    for var in ("TICKTICK_CLIENT_ID", "TICKTICK_CLIENT_SECRET", "TICKSYNC_VAULT"):
        monkeypatch.delenv(var, raising=False)
