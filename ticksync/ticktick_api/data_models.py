"""
Data models representing TickTick objects (tasks, subtasks, projects).

Field names follow the service's JSON (camelCase) so payloads validate
without aliases; unknown fields are kept.
"""

from enum import IntEnum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Priority(IntEnum):
    """TickTick priority ordinals. Not contiguous: never use as an index."""

    NONE = 0
    LOW = 1
    MEDIUM = 3
    HIGH = 5


class TaskStatus(IntEnum):
    OPEN = 0
    COMPLETED_ALT = 1
    COMPLETED = 2


class SubTask(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = ""
    title: str = ""
    status: int = 0
    completedTime: Optional[str] = None
    isAllDay: Optional[bool] = None
    sortOrder: Optional[int] = None
    startDate: Optional[str] = None
    timeZone: Optional[str] = None

    @property
    def is_done(self) -> bool:
        return self.status == 1


class Task(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = ""
    projectId: str = ""
    title: str = ""
    content: Optional[str] = None
    desc: Optional[str] = None
    isAllDay: Optional[bool] = None
    startDate: Optional[str] = None  # keep ISO string
    dueDate: Optional[str] = None
    timeZone: Optional[str] = None
    priority: int = Priority.NONE
    status: int = TaskStatus.OPEN
    completedTime: Optional[str] = None
    sortOrder: Optional[int] = None
    repeatFlag: Optional[str] = None
    reminders: Optional[List[str]] = None
    items: List[SubTask] = Field(default_factory=list)
    kind: Optional[str] = None

    @property
    def is_done(self) -> bool:
        """Rendered with a checked box: both completed codes count."""
        return self.status in (TaskStatus.COMPLETED_ALT, TaskStatus.COMPLETED)

    @property
    def is_completed(self) -> bool:
        """Only status 2 counts as completed for filtering and bucketing."""
        return self.status == TaskStatus.COMPLETED


class Project(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: str = ""
    color: Optional[str] = None
    closed: Optional[bool] = None
    groupId: Optional[str] = None
    viewMode: Optional[str] = None
    permission: Optional[str] = None
    kind: Optional[str] = None
