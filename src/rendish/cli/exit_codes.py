"""Process exit codes."""

from __future__ import annotations

GENERAL_ERROR: int = 1
"""A known rendish error was caught and its message displayed."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C (128 + SIGINT)."""
