"""Request validation service for groove-locator."""

import math
import os
import re
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

from groove_locator.constants import MAX_KNOWN_WORKTREES
from groove_locator.exceptions import InputValidationError
from groove_locator.models.workspace import (
    InspectionMode,
    ResolutionRequest,
    SearchContext,
    WorkspaceMetadata,
)

SAFE_TOKEN_PATTERN = re.compile(r"[A-Za-z0-9._-]+(?:/[A-Za-z0-9._-]+)*")


class RequestValidationService:
    """Service for validating resolution inputs before any search runs."""

    @staticmethod
    def is_safe_path_token(value: str) -> bool:
        """
        Check that a value is a safe relative path token.

        Letters, digits, ``.``, ``_`` and ``-`` separated by single ``/``,
        with no ``.`` or ``..`` segments.

        Args:
            value: Candidate token

        Returns:
            True if the token is safe to join beneath a directory
        """
        if not SAFE_TOKEN_PATTERN.fullmatch(value):
            return False
        return not any(segment in (".", "..") for segment in value.split("/"))

    @staticmethod
    def validate_root_name(value: Optional[str]) -> str:
        """
        Validate the directory name to search for.

        Args:
            value: Raw root name

        Returns:
            The trimmed root name

        Raises:
            InputValidationError: If the name is empty, contains a path
                separator, or is ``.`` / ``..``
        """
        if not isinstance(value, str) or not value.strip():
            raise InputValidationError(
                "rootName",
                "Could not auto-resolve workspace root: rootName is required when no workspace root override is given.",
            )
        trimmed = value.strip()
        if "/" in trimmed or "\\" in trimmed or trimmed in (".", ".."):
            raise InputValidationError("rootName", "rootName contains invalid path characters.")
        return trimmed

    @staticmethod
    def validate_known_worktrees(
        values: Optional[Iterable[str]], max_entries: int = MAX_KNOWN_WORKTREES
    ) -> Tuple[str, ...]:
        """
        Validate and de-duplicate the known worktree names.

        Args:
            values: Raw worktree names, or None
            max_entries: Maximum number of entries accepted

        Returns:
            Trimmed, unique names in first-seen order

        Raises:
            InputValidationError: If the list is too large or any entry is
                empty or unsafe
        """
        if values is None:
            return ()
        if isinstance(values, str):
            raise InputValidationError("knownWorktrees", "knownWorktrees must be a list when provided.")
        entries = list(values)
        if len(entries) > max_entries:
            raise InputValidationError(
                "knownWorktrees", f"knownWorktrees is too large (max {max_entries} entries)."
            )

        sanitized = []
        seen = set()
        for entry in entries:
            if not isinstance(entry, str) or not entry.strip():
                raise InputValidationError(
                    "knownWorktrees", "knownWorktrees entries must be non-empty strings."
                )
            trimmed = entry.strip()
            if not RequestValidationService.is_safe_path_token(trimmed):
                raise InputValidationError(
                    "knownWorktrees", "knownWorktrees contains unsafe characters or path segments."
                )
            if trimmed not in seen:
                seen.add(trimmed)
                sanitized.append(trimmed)
        return tuple(sanitized)

    @staticmethod
    def validate_root_override(value: str) -> Path:
        """
        Validate an explicit workspace root override.

        Args:
            value: Raw path supplied by the caller

        Returns:
            The normalized absolute path

        Raises:
            InputValidationError: If the path is empty, relative, or not an
                existing directory
        """
        if not isinstance(value, str) or not value.strip():
            raise InputValidationError(
                "workspaceRoot", "workspaceRoot must be a non-empty absolute path string when provided."
            )
        normalized = os.path.normpath(value.strip())
        if not os.path.isabs(normalized):
            raise InputValidationError(
                "workspaceRoot",
                "workspaceRoot override must be an absolute path starting with '/'. "
                "Example: /home/you/projects/next.",
            )
        if not os.path.isdir(normalized):
            raise InputValidationError(
                "workspaceRoot",
                f'workspaceRoot override "{normalized}" is not an existing, accessible directory. '
                "Verify the path and permissions.",
            )
        return Path(normalized)

    @staticmethod
    def validate_relative_dir(value: Optional[str], label: str = "dir") -> Optional[str]:
        """
        Validate an optional relative directory flag such as ``--dir``.

        Returns:
            The trimmed value, or None when not provided
        """
        if value is None:
            return None
        trimmed = value.strip()
        if not trimmed:
            raise InputValidationError(label, f"{label} must be a non-empty string when provided.")
        if os.path.isabs(trimmed):
            raise InputValidationError(label, f"{label} must be a relative path.")
        if not RequestValidationService.is_safe_path_token(trimmed):
            raise InputValidationError(label, f"{label} contains unsafe characters or path segments.")
        return trimmed

    @staticmethod
    def validate_version(value: Union[None, str, int, float]) -> Optional[Union[int, float]]:
        """Parse an optional workspace version hint into a number."""
        if value is None:
            return None
        if isinstance(value, bool):
            raise InputValidationError("workspaceVersion", "workspaceVersion must be numeric when provided.")
        if isinstance(value, (int, float)):
            parsed = value
        else:
            text = value.strip()
            if not text:
                return None
            try:
                parsed = int(text)
            except ValueError:
                try:
                    parsed = float(text)
                except ValueError:
                    raise InputValidationError(
                        "workspaceVersion", "workspaceVersion must be numeric when provided."
                    ) from None
        if isinstance(parsed, float) and not math.isfinite(parsed):
            raise InputValidationError("workspaceVersion", "workspaceVersion must be numeric when provided.")
        return parsed


def _optional_hint(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def build_resolution_request(
    root_name: Optional[str] = None,
    known_worktrees: Optional[Iterable[str]] = None,
    workspace_root: Optional[str] = None,
    version: Union[None, str, int, float] = None,
    created_at: Optional[str] = None,
    updated_at: Optional[str] = None,
    mode: InspectionMode = InspectionMode.LIST,
    max_known_worktrees: int = MAX_KNOWN_WORKTREES,
) -> ResolutionRequest:
    """
    Validate raw caller input and assemble a resolution request.

    The override path, when given, is validated for shape only here; its
    existence is checked at resolution time. When a root name is supplied it
    also becomes the expected ``rootName`` metadata field.

    Raises:
        InputValidationError: On any invalid field; no search is attempted
    """
    validator = RequestValidationService
    known = validator.validate_known_worktrees(known_worktrees, max_known_worktrees)
    parsed_version = validator.validate_version(version)

    if workspace_root is not None:
        if not workspace_root.strip():
            raise InputValidationError(
                "workspaceRoot", "workspaceRoot must be a non-empty absolute path string when provided."
            )
        return ResolutionRequest(root_override=workspace_root.strip())

    name = validator.validate_root_name(root_name)
    expected = WorkspaceMetadata(
        version=parsed_version,
        root_name=name,
        created_at=_optional_hint(created_at),
        updated_at=_optional_hint(updated_at),
    )
    context = SearchContext(
        target_name=name,
        known_worktrees=known,
        expected_metadata=expected,
        mode=mode,
    )
    return ResolutionRequest(context=context)
