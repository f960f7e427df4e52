"""Whole-document storage used by the sync engine."""
from __future__ import annotations

from pathlib import Path
from typing import Protocol, Union

DOCUMENT_SUFFIX = ".md"


def document_path(path: str) -> str:
    """Append the markdown extension when the configured path lacks one."""
    return path if path.endswith(DOCUMENT_SUFFIX) else path + DOCUMENT_SUFFIX


class DocumentStore(Protocol):
    def read(self, path: str) -> str: ...

    def write(self, path: str, text: str) -> None: ...

    def exists(self, path: str) -> bool: ...


class FileDocumentStore:
    """Documents as UTF-8 files below a root directory (an Obsidian vault, for instance)."""

    def __init__(self, root: Union[str, Path] = "."):
        self.root = Path(root).expanduser()

    def resolve(self, path: str) -> Path:
        return self.root / document_path(path)

    def read(self, path: str) -> str:
        return self.resolve(path).read_text(encoding="utf-8")

    def write(self, path: str, text: str) -> None:
        target = self.resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")

    def exists(self, path: str) -> bool:
        return self.resolve(path).is_file()

    def mtime(self, path: str) -> float:
        """Modification time, or 0 when the document does not exist."""
        target = self.resolve(path)
        return target.stat().st_mtime if target.is_file() else 0.0
