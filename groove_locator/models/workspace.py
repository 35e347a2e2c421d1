"""Workspace discovery data models."""

import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Tuple, Union


class InspectionMode(Enum):
    """Which flow a candidate root is inspected for."""
    LIST = "list"  # root must already hold the worktree container
    CREATE = "create"  # root may not have any worktrees yet


class ResolutionReason(Enum):
    """Why a workspace root was chosen."""
    OVERRIDE = "override"
    SINGLE_CANDIDATE = "single-candidate"
    METADATA_MATCH = "metadata-match"
    CACHED = "cached"


def _optional_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _optional_number(value: Any) -> Optional[Union[int, float]]:
    # bool is an int subclass but is never a valid version
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


@dataclass(frozen=True)
class WorkspaceMetadata:
    """Identity fields recorded in a workspace's metadata descriptor."""

    version: Optional[Union[int, float]] = None
    root_name: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> Optional["WorkspaceMetadata"]:
        """Build metadata from a decoded JSON payload.

        Fields are read permissively: a field of the wrong type is treated as
        absent. Returns None when the payload is not an object or carries
        none of the known fields.
        """
        if not isinstance(payload, dict):
            return None
        metadata = cls(
            version=_optional_number(payload.get("version")),
            root_name=_optional_text(payload.get("rootName")),
            created_at=_optional_text(payload.get("createdAt")),
            updated_at=_optional_text(payload.get("updatedAt")),
        )
        return None if metadata.is_empty() else metadata

    def is_empty(self) -> bool:
        """True when no field is set."""
        return (
            self.version is None
            and self.root_name is None
            and self.created_at is None
            and self.updated_at is None
        )

    def to_dict(self) -> dict:
        """Convert to the descriptor's JSON field names, omitting absent fields."""
        payload = {
            "version": self.version,
            "rootName": self.root_name,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        return {key: value for key, value in payload.items() if value is not None}


@dataclass(frozen=True)
class SearchContext:
    """Validated inputs for a name-based workspace root search."""

    target_name: str
    known_worktrees: Tuple[str, ...] = ()
    expected_metadata: Optional[WorkspaceMetadata] = None
    mode: InspectionMode = InspectionMode.LIST


@dataclass(frozen=True)
class ResolutionRequest:
    """A resolution request: an explicit root override, or a search context."""

    context: Optional[SearchContext] = None
    root_override: Optional[str] = None


@dataclass(frozen=True)
class CandidateRoot:
    """A directory that matched the target name and passed the structural checks."""

    path: Path
    has_metadata: bool
    matches_expected: bool

    def __str__(self) -> str:
        flags = []
        if self.has_metadata:
            flags.append("metadata")
        if self.matches_expected:
            flags.append("matches")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        return f"{self.path}{suffix}"


@dataclass(frozen=True)
class Resolution:
    """A resolved workspace root."""

    path: Path
    reason: ResolutionReason
    candidate_count: int = 1
