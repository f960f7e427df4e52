"""Two-way sync between selected TickTick projects and one markdown page.

``pull`` renders the remote tasks into the page; ``reconcile_from_document``
parses the page and pushes the differences back. Every pass tolerates partial
failure: one project or task failing never stops the others.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, NamedTuple, Optional

from ..ticktick_api.data_models import Task
from ..utils.config import Settings
from ..utils.logger import get_logger
from .dates import (
    Bucket,
    DayWindow,
    bucket,
    bucket_task,
    end_of_day,
    format_date_for_display,
    format_last_synced,
    parse_date,
    to_api_datetime,
)
from .formatter import render_task
from .notifier import Notifier
from .parser import ParsedTask, SectionType, parse_document
from .store import DocumentStore

log = get_logger(__name__)

DOCUMENT_TITLE = "# TickTick Tasks"

# Returned by effective_due_date when the section asks for no due-date change.
UNCHANGED = object()


class ProjectTask(NamedTuple):
    task: Task
    project_name: str


@dataclass
class SyncResult:
    synced: int = 0
    errors: int = 0
    skipped: int = 0


def effective_due_date(section_type: SectionType, window: DayWindow):
    """Due date implied by a task's section: a datetime, None (clear) or UNCHANGED."""
    if section_type is SectionType.TODO_TODAY:
        return end_of_day(window.today)
    if section_type is SectionType.TODO_TOMORROW:
        return end_of_day(window.tomorrow)
    if section_type is SectionType.TODO_NODATE:
        return None
    return UNCHANGED


def due_date_drifted(remote_due: Optional[str], target: Optional[datetime]) -> bool:
    """Compare on local calendar days; a cleared target only drifts if the remote has a date."""
    remote_dt = parse_date(remote_due)
    if target is None:
        return remote_dt is not None
    if remote_dt is None:
        return True
    return remote_dt.date() != target.date()


def _rendered_undated(parsed: ParsedTask, remote: Task, window: DayWindow) -> bool:
    """
    True for an overdue or later task left where pull put it: under No Date,
    still tagged with the remote due date. Such a line keeps its date.
    """
    if parsed.due_date is None or not remote.dueDate:
        return False
    if bucket(remote.dueDate, window) in (Bucket.TODAY, Bucket.TOMORROW):
        return False
    return format_date_for_display(parsed.due_date) == format_date_for_display(remote.dueDate)


def _render_subsection(lines: List[str], heading: str, entries: List[ProjectTask]) -> None:
    if not entries:
        return
    lines.append(f"### {heading}")
    for entry in entries:
        lines.append(render_task(entry.task, entry.project_name))
        lines.append("")
    lines.append("")


def build_document(entries: List[ProjectTask], window: DayWindow, now: datetime) -> str:
    """Group already-filtered tasks into the To Do / Completed layout."""
    todo = {Bucket.TODAY: [], Bucket.TOMORROW: [], Bucket.NONE: []}
    done = {Bucket.TODAY: [], Bucket.YESTERDAY: [], Bucket.NONE: []}

    for entry in entries:
        if entry.task.is_completed:
            key = bucket(entry.task.completedTime, window)
            done[key if key in done else Bucket.NONE].append(entry)
        else:
            key = bucket_task(entry.task, window)
            todo[key if key in todo else Bucket.NONE].append(entry)

    lines = [DOCUMENT_TITLE, f"Last synced: {format_last_synced(now)}", ""]

    if any(todo.values()):
        lines.extend(["## To Do", ""])
        _render_subsection(lines, "Today", todo[Bucket.TODAY])
        _render_subsection(lines, "Tomorrow", todo[Bucket.TOMORROW])
        _render_subsection(lines, "No Date", todo[Bucket.NONE])

    if any(done.values()):
        lines.extend(["## Completed", ""])
        _render_subsection(lines, "Today", done[Bucket.TODAY])
        _render_subsection(lines, "Yesterday", done[Bucket.YESTERDAY])
        _render_subsection(lines, "Earlier", done[Bucket.NONE])

    return "\n".join(lines)


class SyncEngine:
    def __init__(self, client, settings: Settings, store: DocumentStore, notifier: Notifier):
        self.client = client
        self.settings = settings
        self.store = store
        self.notifier = notifier
        # Last page written by pull. Advisory only, never used for diffing.
        self.last_generated_content = ""

    # --- TickTick -> page ---

    def _keep(self, task: Task, cutoff: datetime) -> bool:
        if not task.is_completed:
            return True
        if not self.settings.include_completed:
            return False
        completed_at = parse_date(task.completedTime)
        # No (readable) completion time: still relevant.
        return completed_at is None or completed_at >= cutoff

    def collect_tasks(self, window: DayWindow) -> List[ProjectTask]:
        """Fetch every selected project one at a time, keeping the tasks that belong on the page."""
        cutoff = window.cutoff(self.settings.completed_days_limit)
        entries: List[ProjectTask] = []

        for project_id in self.settings.selected_projects:
            try:
                tasks = self.client.get_project_tasks(project_id)
                project = self.client.get_project(project_id)
            except Exception as e:
                log.error("Failed to fetch tasks for project %s: %s", project_id, e)
                self.notifier.warning(f"Failed to sync project {project_id}: {e}")
                continue

            kept = [ProjectTask(t, project.name) for t in tasks if self._keep(t, cutoff)]
            log.info("Project %s: kept %d of %d tasks", project.name, len(kept), len(tasks))
            entries.extend(kept)

        return entries

    def render_document(self, now: Optional[datetime] = None) -> str:
        now = now or datetime.now().astimezone()
        window = DayWindow.from_reference(now)
        return build_document(self.collect_tasks(window), window, now)

    def pull(self, now: Optional[datetime] = None) -> Optional[str]:
        """Render the selected projects and write the page. Returns the text written."""
        if not self.settings.selected_projects:
            self.notifier.warning("No projects selected for sync")
            return None

        now = now or datetime.now().astimezone()
        window = DayWindow.from_reference(now)
        entries = self.collect_tasks(window)
        content = build_document(entries, window, now)

        self.last_generated_content = content
        self.store.write(self.settings.target_page_path, content)
        self.notifier.info(f"Synced {len(entries)} tasks")
        return content

    # --- page -> TickTick ---

    def _project_lookup(self) -> Dict[str, str]:
        try:
            return {p.name: p.id for p in self.client.get_projects()}
        except Exception as e:
            log.error("Failed to get projects: %s", e)
            return {}

    def _match_by_title(self, project_id: str, title: str, listings: Dict[str, Dict[str, List[Task]]]) -> Optional[Task]:
        """Pair an identifier-less line with an unclaimed remote task of the same title."""
        if project_id not in listings:
            by_title: Dict[str, List[Task]] = {}
            for task in self.client.get_project_tasks(project_id):
                by_title.setdefault(task.title, []).append(task)
            listings[project_id] = by_title
        candidates = listings[project_id].get(title)
        return candidates.pop(0) if candidates else None

    def _mutated(self, result: SyncResult, message: str) -> None:
        result.synced += 1
        log.info(message)
        self.notifier.info(message)

    def _reconcile_task(self, parsed: ParsedTask, project_id: str, window: DayWindow,
                        listings: Dict[str, Dict[str, List[Task]]], result: SyncResult) -> None:
        if parsed.ticktick_id:
            remote = self.client.get_task(project_id, parsed.ticktick_id)
        else:
            remote = self._match_by_title(project_id, parsed.title, listings)

        if remote is None:
            fields = {"title": parsed.title, "projectId": project_id}
            if parsed.due_date is not None:
                fields["dueDate"] = to_api_datetime(parsed.due_date)
            self.client.create_task(fields)
            self._mutated(result, f"Created: {parsed.title}")
            return

        task_id = parsed.ticktick_id or remote.id

        if remote.is_completed and not parsed.completed:
            self.client.uncomplete_task(project_id, task_id)
            self._mutated(result, f"Reopened: {parsed.title}")
        elif not remote.is_completed and parsed.completed:
            self.client.complete_task(project_id, task_id)
            self._mutated(result, f"Completed: {parsed.title}")

        if remote.title != parsed.title:
            self.client.update_task(task_id, {"projectId": project_id, "title": parsed.title})
            self._mutated(result, f"Updated title: {parsed.title}")

        target = effective_due_date(parsed.section_type, window)
        if target is None and _rendered_undated(parsed, remote, window):
            target = UNCHANGED
        if target is not UNCHANGED and due_date_drifted(remote.dueDate, target):
            due = to_api_datetime(target) if target is not None else None
            self.client.update_task(task_id, {"projectId": project_id, "dueDate": due})
            self._mutated(result, f"Updated date: {parsed.title}")

    def reconcile_from_document(self, now: Optional[datetime] = None) -> SyncResult:
        """Push the page's state to TickTick with the fewest calls the diff allows."""
        result = SyncResult()
        path = self.settings.target_page_path
        if not self.store.exists(path):
            self.notifier.error("Target page not found. Please run a pull first.")
            return result

        now = now or datetime.now().astimezone()
        window = DayWindow.from_reference(now)
        tasks, _ = parse_document(self.store.read(path), now)
        project_ids = self._project_lookup()
        listings: Dict[str, Dict[str, List[Task]]] = {}

        for parsed in tasks:
            project_id = project_ids.get(parsed.project_name) if parsed.project_name else None
            if not project_id or (not parsed.ticktick_id and not parsed.title.strip()):
                result.skipped += 1
                continue
            try:
                self._reconcile_task(parsed, project_id, window, listings, result)
            except Exception as e:
                result.errors += 1
                log.error('Failed to sync task "%s": %s', parsed.title, e)

        if result.synced > 0:
            self.notifier.info(f"Synced {result.synced} changes to TickTick")
        if result.errors > 0:
            self.notifier.error(f"{result.errors} tasks failed to sync")
        return result
