"""
This __init__.py file makes the 'commands' directory a Python package.

Each module defines the handlers behind one group of CLI commands; the Typer
wiring lives in ticksync.ticksync.
"""
