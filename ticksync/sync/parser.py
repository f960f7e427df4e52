"""Parse a synced markdown page back into task records.

Headers classify the tasks below them until the next header. Tasks carry
their project as ``#project:<name>``, optional dates as ``#date(...)`` and,
when a user adds one, the TickTick identifier as ``#id:<id>``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from ..ticktick_api.data_models import Priority
from ..utils.logger import get_logger
from .dates import DayWindow, end_of_day, parse_date
from .formatter import DATE_TAG_PATTERN, ID_TAG_PATTERN, PROJECT_TAG_PATTERN, split_priority, strip_tags

log = get_logger(__name__)

SECTION_PATTERN = re.compile(r"^#{1,3}\s+(\S.*)$")
TASK_PATTERN = re.compile(r"^(\s*)-\s*\[([ xX])\]\s*(.*)$")
DATE_RANGE_SEPARATOR = " - "


class SectionType(str, Enum):
    TODO_TODAY = "todo-today"
    TODO_TOMORROW = "todo-tomorrow"
    TODO_NODATE = "todo-nodate"
    COMPLETED_TODAY = "completed-today"
    COMPLETED_YESTERDAY = "completed-yesterday"
    COMPLETED_EARLIER = "completed-earlier"
    UNKNOWN = "unknown"

    @property
    def is_todo(self) -> bool:
        return self.value.startswith("todo-")

    @property
    def is_completed(self) -> bool:
        return self.value.startswith("completed-")


_SECTION_NAMES = {
    "today": SectionType.TODO_TODAY,
    "tomorrow": SectionType.TODO_TOMORROW,
    "no date": SectionType.TODO_NODATE,
    "yesterday": SectionType.COMPLETED_YESTERDAY,
    "earlier": SectionType.COMPLETED_EARLIER,
}

TODO_GROUP = "to do"
COMPLETED_GROUP = "completed"


@dataclass
class PageSection:
    name: str
    type: SectionType
    start_line: int


@dataclass
class ParsedSubTask:
    title: str
    completed: bool
    ticktick_id: Optional[str] = None


@dataclass
class ParsedTask:
    title: str
    completed: bool
    project_name: Optional[str] = None
    ticktick_id: Optional[str] = None
    priority: Priority = Priority.NONE
    due_date: Optional[datetime] = None
    start_date: Optional[datetime] = None
    # Indented checklist lines are not attached to their parent yet.
    subtasks: List[ParsedSubTask] = field(default_factory=list)
    raw_line: str = ""
    line_number: int = 0
    section: Optional[PageSection] = None

    @property
    def section_type(self) -> SectionType:
        return self.section.type if self.section else SectionType.UNKNOWN


def classify_section(name: str, line_number: int, group: Optional[str] = None) -> PageSection:
    """Map a header name onto the section taxonomy (case-insensitive)."""
    key = name.strip().lower()
    section_type = _SECTION_NAMES.get(key, SectionType.UNKNOWN)
    if section_type is SectionType.TODO_TODAY and group == COMPLETED_GROUP:
        section_type = SectionType.COMPLETED_TODAY
    return PageSection(name=name.strip(), type=section_type, start_line=line_number)


def _parse_dates(tag_content: str) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Return ``(start, due)`` from the content of a ``#date(...)`` tag."""
    parts = tag_content.split(DATE_RANGE_SEPARATOR)
    if len(parts) >= 2:
        return parse_date(parts[0]), parse_date(parts[1])
    # A single date is a due date whatever the section or checkbox state.
    return None, parse_date(parts[0])


def _parse_task_line(line: str, match, section: PageSection, window: DayWindow, line_number: int) -> ParsedTask:
    completed = match.group(2).lower() == "x"
    rest = match.group(3).strip()

    project_match = PROJECT_TAG_PATTERN.search(rest)
    date_match = DATE_TAG_PATTERN.search(rest)
    id_match = ID_TAG_PATTERN.search(rest)

    start_date = due_date = None
    if date_match:
        start_date, due_date = _parse_dates(date_match.group(1))
        if due_date is None:
            log.debug("Ignoring unparseable date tag on line %d: %s", line_number + 1, date_match.group(0))
    elif not completed:
        if section.type is SectionType.TODO_TODAY:
            due_date = end_of_day(window.today)
        elif section.type is SectionType.TODO_TOMORROW:
            due_date = end_of_day(window.tomorrow)

    text, priority = split_priority(rest)
    return ParsedTask(
        title=strip_tags(text),
        completed=completed,
        project_name=project_match.group(1) if project_match else None,
        ticktick_id=id_match.group(1) if id_match else None,
        priority=priority,
        due_date=due_date,
        start_date=start_date,
        raw_line=line,
        line_number=line_number,
        section=section,
    )


def parse_document(content: str, now: Optional[datetime] = None) -> Tuple[List[ParsedTask], List[PageSection]]:
    """Scan ``content`` once, returning the task records and the sections found."""
    window = DayWindow.from_reference(now)
    tasks: List[ParsedTask] = []
    sections: List[PageSection] = []

    current = PageSection(name="Unknown", type=SectionType.UNKNOWN, start_line=0)
    group: Optional[str] = None

    for i, line in enumerate(content.splitlines()):
        header = SECTION_PATTERN.match(line)
        if header:
            name = header.group(1).strip()
            if name.lower() in (TODO_GROUP, COMPLETED_GROUP):
                group = name.lower()
            elif name.lower() not in _SECTION_NAMES:
                group = None
            current = classify_section(name, i, group)
            sections.append(current)
            continue

        if not line.strip():
            continue

        match = TASK_PATTERN.match(line)
        if match:
            tasks.append(_parse_task_line(line, match, current, window, i))

    return tasks, sections
