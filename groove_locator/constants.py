"""Shared constants for groove-locator."""

from dataclasses import dataclass
from typing import List


# Discovery defaults
MAX_DISCOVERY_DEPTH = 4
MAX_DISCOVERY_DIRECTORIES = 2500
SEARCH_PARENT_LEVELS = 3
SKIPPED_DIRECTORY_NAMES = frozenset({
    ".git",
    ".next",
    ".pnpm-store",
    ".turbo",
    "dist",
    "node_modules",
})

# Workspace layout
WORKTREES_DIRNAME = ".worktrees"
METADATA_RELPATH = ".groove/workspace.json"

# Request limits
MAX_KNOWN_WORKTREES = 128
AMBIGUITY_PREVIEW_LIMIT = 5

# External command
GROOVE_BIN_ENV = "GROOVE_BIN"
DEFAULT_GROOVE_BINARY = "groove"
COMMAND_TIMEOUT_SECONDS = 15
RESOLUTION_CACHE_TTL_SECONDS = 45

# Worktree list protocol
ROW_MARKER = "- "
SEGMENT_SEPARATOR = "|"


@dataclass
class ColumnDefinition:
    """Definition of a table column."""

    key: str
    label: str
    width: int = 0  # 0 means auto-width


COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("worktree", "Worktree", 24),
    ColumnDefinition("branch", "Branch", 30),
    ColumnDefinition("opencode", "Opencode", 12),
    ColumnDefinition("instance", "Instance", 10),
    ColumnDefinition("log", "Log", 28),
    ColumnDefinition("activity", "Activity", 10),
]


# Rich colour names per row state
STATE_COLORS = {
    "running": "green",
    "not-running": "yellow",
    "unknown": "dim",
    "latest": "green",
    "broken-latest": "red",
    "none": "dim",
    "thinking": "cyan",
    "idle": None,
    "finished": "green",
    "error": "red",
}
