"""
TickTick Sync: two-way sync between TickTick projects and a markdown task page.

Tasks are rendered into a page grouped by due date; edits to that page
(checking boxes, moving tasks between sections, renaming, adding lines) are
pushed back to TickTick.
"""

__version__ = "1.0.0"

# Import the main CLI app for entry point
from .ticksync import app

__all__ = ["app", "__version__"]
