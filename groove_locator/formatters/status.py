"""Worktree status formatting utilities."""

from enum import Enum
from typing import Optional

from rich.markup import escape

from groove_locator.constants import STATE_COLORS
from groove_locator.models.worktree import LogState, WorktreeRow


def state_style(state: Enum) -> Optional[str]:
    """
    Return the rich style for a state enum value.

    Args:
        state: Any row state enum

    Returns:
        Rich colour name, or None for the default style
    """
    return STATE_COLORS.get(state.value)


def _styled(text: str, style: Optional[str]) -> str:
    return f"[{style}]{text}[/{style}]" if style else text


def format_opencode(row: WorktreeRow) -> str:
    """Format the opencode state for display."""
    return _styled(row.opencode_state.value, state_style(row.opencode_state))


def format_log(row: WorktreeRow) -> str:
    """
    Format the log state, including the target file name when present.

    Example:
        "latest → session-42.log"
    """
    text = row.log_state.value
    if row.log_target and row.log_state in (LogState.LATEST, LogState.BROKEN_LATEST):
        text = f"{text} → {escape(row.log_target)}"
    return _styled(text, state_style(row.log_state))


def format_activity(row: WorktreeRow) -> str:
    """Format the activity state with its reason and age, if reported."""
    text = row.activity_state.value
    detail = row.activity_detail
    if detail is not None:
        extras = []
        if detail.reason:
            extras.append(escape(detail.reason))
        if detail.age_s is not None:
            extras.append(f"{detail.age_s}s")
        if extras:
            text = f"{text} ({', '.join(extras)})"
    return _styled(text, state_style(row.activity_state))
