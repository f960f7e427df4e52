"""Render TickTick tasks as markdown checklist lines, and decode a title line back.

Title line layout (the parser depends on it):

    - [ ] 🔴 Title #project:Name #date(2024-01-15 09:00 - 2024-01-15 18:00)

Project names containing whitespace do not survive the round trip; the tag
ends at the first space.
"""
from __future__ import annotations

import re
from typing import NamedTuple, Optional

from ..ticktick_api.data_models import Priority, SubTask, Task
from .dates import DateLike, format_date_for_display

PRIORITY_GLYPHS = {
    Priority.HIGH: "🔴 ",
    Priority.MEDIUM: "🟡 ",
    Priority.LOW: "🟢 ",
}

CHECKBOX_PATTERN = re.compile(r"^\s*-\s*\[([ xX])\]\s*")
PROJECT_TAG_PATTERN = re.compile(r"#project:([^#\s]+)", re.IGNORECASE)
DATE_TAG_PATTERN = re.compile(r"#date\(([^)]*)\)", re.IGNORECASE)
ID_TAG_PATTERN = re.compile(r"#id:([^#\s]+)", re.IGNORECASE)

_TAG_PATTERNS = (PROJECT_TAG_PATTERN, DATE_TAG_PATTERN, ID_TAG_PATTERN)
_STRIP_PATTERNS = [re.compile(r"\s*" + p.pattern, re.IGNORECASE) for p in _TAG_PATTERNS]


class DecodedTitle(NamedTuple):
    title: str
    priority: Priority


def priority_glyph(priority: Optional[int]) -> str:
    try:
        return PRIORITY_GLYPHS.get(Priority(priority), "")
    except ValueError:
        return ""


def checkbox(done: bool) -> str:
    return "[x]" if done else "[ ]"


def format_date_tag(start_date: DateLike, due_date: DateLike) -> str:
    """`` #date(...)`` with its leading space, or ``""`` when neither date is set."""
    start = format_date_for_display(start_date) if start_date else None
    end = format_date_for_display(due_date) if due_date else None

    if start and end:
        if start == end:
            return f" #date({start})"
        return f" #date({start} - {end})"
    if start or end:
        return f" #date({start or end})"
    return ""


def render_subtask(item: SubTask) -> str:
    return f"- {checkbox(item.is_done)} {item.title}"


def render_task(task: Task, project_name: Optional[str] = None) -> str:
    """Render one task (title line, optional description quote, subtasks) as text."""
    title = task.title
    if project_name:
        title += f" #project:{project_name}"

    lines = [
        f"- {checkbox(task.is_done)} {priority_glyph(task.priority)}{title}"
        f"{format_date_tag(task.startDate, task.dueDate)}"
    ]

    if task.desc and task.desc.strip():
        lines.append(f"  > {task.desc}")

    for item in task.items:
        lines.append(f"  {render_subtask(item)}")

    return "\n".join(lines)


def strip_tags(text: str) -> str:
    """Remove every metadata tag wherever it occurs, then trim."""
    for pattern in _STRIP_PATTERNS:
        text = pattern.sub("", text)
    return text.strip()


def split_priority(text: str) -> DecodedTitle:
    """Detect and strip exactly one leading priority glyph."""
    for priority, glyph in PRIORITY_GLYPHS.items():
        if text.startswith(glyph):
            return DecodedTitle(text[len(glyph):], priority)
    return DecodedTitle(text, Priority.NONE)


def decode_title_line(line: str) -> DecodedTitle:
    """Inverse of the title line emitted by :func:`render_task` (title and priority only)."""
    body = CHECKBOX_PATTERN.sub("", line, count=1)
    text, priority = split_priority(body)
    return DecodedTitle(strip_tags(text), priority)
