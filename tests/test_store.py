"""
Tests for the file-backed page store and the console notifier.
"""
from io import StringIO

from rich.console import Console

from ticksync.sync.notifier import ConsoleNotifier
from ticksync.sync.store import FileDocumentStore, document_path


def test_document_path_adds_extension():
    assert document_path("TickTick Tasks") == "TickTick Tasks.md"
    assert document_path("notes/tasks.md") == "notes/tasks.md"


def test_write_creates_parent_folders(tmp_path):
    store = FileDocumentStore(tmp_path)
    store.write("Daily/TickTick Tasks", "# TickTick Tasks\n")

    assert (tmp_path / "Daily" / "TickTick Tasks.md").read_text(encoding="utf-8") == "# TickTick Tasks\n"
    assert store.exists("Daily/TickTick Tasks")
    assert store.read("Daily/TickTick Tasks.md") == "# TickTick Tasks\n"


def test_missing_document(tmp_path):
    store = FileDocumentStore(tmp_path)
    assert not store.exists("nothing")
    assert store.mtime("nothing") == 0.0


def test_mtime_tracks_writes(tmp_path):
    store = FileDocumentStore(tmp_path)
    store.write("page", "a")
    assert store.mtime("page") > 0


def _notifier(quiet=False):
    buffer = StringIO()
    console = Console(file=buffer, width=120, color_system=None)
    return ConsoleNotifier(console, quiet=quiet), buffer


def test_notifier_levels():
    notifier, buffer = _notifier()
    notifier.info("Synced 2 tasks")
    notifier.warning("No projects selected for sync")
    notifier.error("1 tasks failed to sync")
    out = buffer.getvalue()
    assert "Synced 2 tasks" in out
    assert "No projects selected for sync" in out
    assert "1 tasks failed to sync" in out


def test_notifier_does_not_interpret_markup():
    notifier, buffer = _notifier()
    notifier.info("Created: [x] literal")
    assert "Created: [x] literal" in buffer.getvalue()


def test_quiet_notifier_still_reports_problems():
    notifier, buffer = _notifier(quiet=True)
    notifier.info("Synced 2 tasks")
    notifier.error("Target page not found. Please run a pull first.")
    out = buffer.getvalue()
    assert "Synced 2 tasks" not in out
    assert "Target page not found" in out
