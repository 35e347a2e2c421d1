"""Formatting utilities for groove-locator."""

from .status import (
    state_style,
    format_opencode,
    format_log,
    format_activity,
)

__all__ = [
    "state_style",
    "format_opencode",
    "format_log",
    "format_activity",
]
