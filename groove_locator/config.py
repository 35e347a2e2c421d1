"""Configuration handling for groove-locator"""

import os
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import FrozenSet, Optional

from groove_locator.constants import (
    AMBIGUITY_PREVIEW_LIMIT,
    COMMAND_TIMEOUT_SECONDS,
    MAX_DISCOVERY_DEPTH,
    MAX_DISCOVERY_DIRECTORIES,
    MAX_KNOWN_WORKTREES,
    METADATA_RELPATH,
    SEARCH_PARENT_LEVELS,
    SKIPPED_DIRECTORY_NAMES,
    GROOVE_BIN_ENV,
    WORKTREES_DIRNAME,
)


@dataclass
class Config:
    """Configuration for groove-locator with validation."""

    # Traversal caps
    max_depth: int = MAX_DISCOVERY_DEPTH
    max_directories: int = MAX_DISCOVERY_DIRECTORIES
    parent_levels: int = SEARCH_PARENT_LEVELS
    skipped_directory_names: FrozenSet[str] = field(default_factory=lambda: SKIPPED_DIRECTORY_NAMES)

    # Workspace layout
    worktrees_dirname: str = WORKTREES_DIRNAME
    metadata_relpath: str = METADATA_RELPATH

    # Request limits
    max_known_worktrees: int = MAX_KNOWN_WORKTREES
    preview_limit: int = AMBIGUITY_PREVIEW_LIMIT

    # External command
    groove_bin: Optional[str] = None  # None = GROOVE_BIN env, then PATH lookup
    command_timeout: float = COMMAND_TIMEOUT_SECONDS

    # Output
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_max_depth()
        self._validate_max_directories()
        self._validate_parent_levels()
        self._validate_skipped_directory_names()
        self._validate_relative_path("worktrees_dirname")
        self._validate_relative_path("metadata_relpath")
        self._validate_limits()
        self._validate_command_timeout()

    def _validate_max_depth(self):
        """Validate max_depth is not negative."""
        if self.max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {self.max_depth}")

    def _validate_max_directories(self):
        """Validate max_directories is positive."""
        if self.max_directories <= 0:
            raise ValueError(f"max_directories must be positive, got {self.max_directories}")

    def _validate_parent_levels(self):
        if self.parent_levels < 0:
            raise ValueError(f"parent_levels must not be negative, got {self.parent_levels}")

    def _validate_skipped_directory_names(self):
        """Normalize the block-list to a frozenset of names."""
        if isinstance(self.skipped_directory_names, str):
            raise ValueError("skipped_directory_names must be a collection of names")
        self.skipped_directory_names = frozenset(self.skipped_directory_names)

    def _validate_relative_path(self, name: str):
        """Validate a layout path is a non-empty relative path without parent segments."""
        value = getattr(self, name)
        if not value or not value.strip():
            raise ValueError(f"{name} cannot be empty")
        value = value.strip()
        path = PurePosixPath(value)
        if path.is_absolute() or ".." in path.parts:
            raise ValueError(f"{name} must be a relative path inside the workspace root, got '{value}'")
        setattr(self, name, value)

    def _validate_limits(self):
        """Validate request limits are positive."""
        if self.max_known_worktrees <= 0:
            raise ValueError(f"max_known_worktrees must be positive, got {self.max_known_worktrees}")
        if self.preview_limit <= 0:
            raise ValueError(f"preview_limit must be positive, got {self.preview_limit}")

    def _validate_command_timeout(self):
        """Validate command_timeout is positive."""
        if self.command_timeout <= 0:
            raise ValueError(f"command_timeout must be positive, got {self.command_timeout}")

    def resolved_groove_bin(self) -> Optional[str]:
        """Return the explicitly configured groove binary, if any.

        The ``groove_bin`` field wins over the ``GROOVE_BIN`` environment
        variable. ``None`` means the caller should fall back to a PATH lookup.
        """
        if self.groove_bin and self.groove_bin.strip():
            return self.groove_bin.strip()
        from_env = os.environ.get(GROOVE_BIN_ENV, "")
        if from_env.strip():
            return from_env.strip()
        return None

    def to_dict(self) -> dict:
        """Convert config to a plain dictionary."""
        return {
            "max_depth": self.max_depth,
            "max_directories": self.max_directories,
            "parent_levels": self.parent_levels,
            "skipped_directory_names": sorted(self.skipped_directory_names),
            "worktrees_dirname": self.worktrees_dirname,
            "metadata_relpath": self.metadata_relpath,
            "max_known_worktrees": self.max_known_worktrees,
            "preview_limit": self.preview_limit,
            "groove_bin": self.groove_bin,
            "command_timeout": self.command_timeout,
            "verbose": self.verbose,
            "debug": self.debug,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {
            "max_depth",
            "max_directories",
            "parent_levels",
            "skipped_directory_names",
            "worktrees_dirname",
            "metadata_relpath",
            "max_known_worktrees",
            "preview_limit",
            "groove_bin",
            "command_timeout",
            "verbose",
            "debug",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)
