"""
Sync layer: markdown rendering and parsing, date bucketing and the
two-way reconciliation engine.
"""

from .engine import SyncEngine, SyncResult
from .formatter import decode_title_line, render_task
from .parser import PageSection, ParsedTask, SectionType, parse_document

__all__ = [
    'SyncEngine',
    'SyncResult',
    'render_task',
    'decode_title_line',
    'parse_document',
    'ParsedTask',
    'PageSection',
    'SectionType',
]
