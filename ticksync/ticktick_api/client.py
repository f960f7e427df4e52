"""HTTP client for the TickTick Open API.

Every call is authenticated with the bearer token supplied by a
:class:`~ticksync.ticktick_api.oauth.CredentialProvider`. A non-2xx response
raises :class:`TickTickAPIError` carrying the status code and body text; an
empty body on success decodes to ``{}``.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import requests

from ..utils.logger import get_logger
from .data_models import Project, Task, TaskStatus

log = get_logger(__name__)

API_BASE = "https://api.dida365.com"


class TickTickAPIError(RuntimeError):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API request failed: {status_code} - {body}")


class TickTickClient:
    def __init__(self, credentials, base_url: str = API_BASE, timeout: int = 30):
        self.credentials = credentials
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _request(self, method: str, endpoint: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{endpoint}"
        headers = {
            "Authorization": f"Bearer {self.credentials.access_token}",
            "Content-Type": "application/json",
        }
        log.debug("%s %s", method, endpoint)
        resp = requests.request(method, url, headers=headers, json=payload, timeout=self.timeout)

        if not 200 <= resp.status_code < 300:
            raise TickTickAPIError(resp.status_code, resp.text)

        # Some endpoints return an empty body
        if not resp.text:
            return {}
        return json.loads(resp.text)

    # --- Projects ---

    def get_projects(self) -> List[Project]:
        return [Project.model_validate(p) for p in self._request("GET", "/open/v1/project") or []]

    def get_project(self, project_id: str) -> Project:
        data = self._request("GET", f"/open/v1/project/{project_id}")
        data.setdefault("id", project_id)
        return Project.model_validate(data)

    def create_project(self, name: str, color: Optional[str] = None,
                       view_mode: Optional[str] = None, kind: Optional[str] = None) -> Project:
        body = {"name": name, "color": color, "viewMode": view_mode, "kind": kind}
        body = {k: v for k, v in body.items() if v is not None}
        return Project.model_validate(self._request("POST", "/open/v1/project", body))

    def update_project(self, project_id: str, **fields) -> Project:
        data = self._request("POST", f"/open/v1/project/{project_id}", fields)
        data.setdefault("id", project_id)
        return Project.model_validate(data)

    def delete_project(self, project_id: str) -> None:
        self._request("DELETE", f"/open/v1/project/{project_id}")

    # --- Tasks ---

    def get_project_tasks(self, project_id: str) -> List[Task]:
        data = self._request("GET", f"/open/v1/project/{project_id}/data")
        return [Task.model_validate(t) for t in data.get("tasks") or []]

    def get_task(self, project_id: str, task_id: str) -> Task:
        return Task.model_validate(self._request("GET", f"/open/v1/project/{project_id}/task/{task_id}"))

    def create_task(self, fields: Dict[str, Any]) -> Task:
        return Task.model_validate(self._request("POST", "/open/v1/task", fields))

    def update_task(self, task_id: str, fields: Dict[str, Any]) -> Task:
        """Partial update; ``fields`` must carry ``projectId``. A ``None`` value clears the field."""
        body = {"id": task_id, **fields}
        return Task.model_validate(self._request("POST", f"/open/v1/task/{task_id}", body))

    def complete_task(self, project_id: str, task_id: str) -> None:
        self._request("POST", f"/open/v1/project/{project_id}/task/{task_id}/complete")

    def uncomplete_task(self, project_id: str, task_id: str) -> Task:
        return self.update_task(task_id, {"projectId": project_id, "status": int(TaskStatus.OPEN)})

    def delete_task(self, project_id: str, task_id: str) -> None:
        self._request("DELETE", f"/open/v1/project/{project_id}/task/{task_id}")
