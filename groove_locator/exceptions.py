"""Custom exceptions for groove-locator"""

from pathlib import Path
from typing import List, Optional


class GrooveLocatorError(Exception):
    """Base exception for all groove-locator errors."""
    pass


class InputValidationError(GrooveLocatorError):
    """Exception raised when a resolution request fails validation."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(message)


class ResolutionError(GrooveLocatorError):
    """Base exception for workspace roots that could not be resolved."""

    def __init__(self, root_name: str, message: str):
        self.root_name = root_name
        self.message = message
        super().__init__(message)


class NoMatchingRootError(ResolutionError):
    """Exception raised when no candidate root matches the requested name."""

    def __init__(self, root_name: str):
        super().__init__(
            root_name,
            f'Could not auto-resolve workspace root for "{root_name}". '
            "Rescan worktrees, or supply an explicit workspace root override.",
        )


class AmbiguousRootError(ResolutionError):
    """Exception raised when several candidate roots remain after disambiguation."""

    def __init__(self, root_name: str, candidates: List[Path], preview: List[Path]):
        self.candidates = candidates
        self.preview = preview
        shown = ", ".join(str(path) for path in preview)
        super().__init__(
            root_name,
            f"Could not auto-resolve workspace root: found {len(candidates)} matches ({shown}). "
            "Supply an explicit workspace root override to choose the exact root path.",
        )


class GrooveCommandError(GrooveLocatorError):
    """Exception raised when the external groove command fails."""

    def __init__(
        self,
        operation: str,
        message: Optional[str] = None,
        exit_code: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
    ):
        self.operation = operation
        self.message = message
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr

        error_msg = f"groove {operation} failed"
        if exit_code is not None:
            error_msg += f" (exit {exit_code})"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class WorktreePathError(GrooveLocatorError):
    """Exception raised when a worktree path is missing or escapes its container."""
    pass


class NotAGitRepositoryError(GrooveLocatorError):
    """Exception raised when a workspace root is not a Git repository root."""

    def __init__(self, path: Path, message: Optional[str] = None):
        self.path = path
        super().__init__(
            message
            or f'"{path}" is not a Git repository. Select the repository root folder (the one containing .git).'
        )
