"""Candidate root inspection for workspace root discovery."""

import json
import os
from pathlib import Path
from typing import Iterable, Optional

from groove_locator.config import Config
from groove_locator.constants import METADATA_RELPATH, WORKTREES_DIRNAME
from groove_locator.logging_config import get_logger
from groove_locator.models.workspace import (
    CandidateRoot,
    InspectionMode,
    WorkspaceMetadata,
)

logger = get_logger(__name__)


def read_workspace_metadata(
    root: Path, metadata_relpath: str = METADATA_RELPATH
) -> Optional[WorkspaceMetadata]:
    """Load the metadata descriptor beneath a workspace root.

    A missing, unreadable or unparsable descriptor yields None rather than
    an error.

    Args:
        root: Candidate workspace root
        metadata_relpath: Descriptor location relative to the root

    Returns:
        Parsed metadata, or None when there is no usable descriptor
    """
    metadata_path = root / metadata_relpath
    if not metadata_path.is_file():
        return None
    try:
        payload = json.loads(metadata_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.debug(f"Ignoring unreadable metadata at {metadata_path}: {e}")
        return None
    return WorkspaceMetadata.from_payload(payload)


def metadata_matches(
    observed: Optional[WorkspaceMetadata], expected: Optional[WorkspaceMetadata]
) -> bool:
    """Compare observed metadata against the expected descriptor field by field.

    Fields absent from ``expected`` are not compared. Without both
    descriptors there is nothing to match.
    """
    if observed is None or expected is None or expected.is_empty():
        return False
    for field_name in ("root_name", "created_at", "version", "updated_at"):
        wanted = getattr(expected, field_name)
        if wanted is not None and getattr(observed, field_name) != wanted:
            return False
    return True


class CandidateInspector:
    """Validates that a matching directory is shaped like a workspace root."""

    def __init__(
        self,
        worktrees_dirname: str = WORKTREES_DIRNAME,
        metadata_relpath: str = METADATA_RELPATH,
    ):
        self.worktrees_dirname = worktrees_dirname
        self.metadata_relpath = metadata_relpath

    @classmethod
    def from_config(cls, config: Config) -> "CandidateInspector":
        return cls(
            worktrees_dirname=config.worktrees_dirname,
            metadata_relpath=config.metadata_relpath,
        )

    def inspect(
        self,
        directory: Path,
        known_worktrees: Iterable[str] = (),
        expected_metadata: Optional[WorkspaceMetadata] = None,
        mode: InspectionMode = InspectionMode.LIST,
    ) -> Optional[CandidateRoot]:
        """
        Build a candidate from a directory, or reject it.

        Args:
            directory: Directory whose name matched the target name
            known_worktrees: Worktree names that must exist in the container
            expected_metadata: Descriptor used to compute ``matches_expected``
            mode: LIST requires the worktree container; CREATE does not

        Returns:
            CandidateRoot, or None if the directory is not a plausible root
        """
        if not directory.is_dir():
            return None

        container = directory / self.worktrees_dirname
        if mode is InspectionMode.LIST and not container.is_dir():
            logger.debug(f"Rejecting {directory}: no {self.worktrees_dirname} directory")
            return None

        for worktree in known_worktrees:
            if not (container / worktree).is_dir():
                logger.debug(f"Rejecting {directory}: missing worktree '{worktree}'")
                return None

        observed = read_workspace_metadata(directory, self.metadata_relpath)
        return CandidateRoot(
            path=Path(os.path.realpath(directory)),
            has_metadata=observed is not None,
            matches_expected=metadata_matches(observed, expected_metadata),
        )
