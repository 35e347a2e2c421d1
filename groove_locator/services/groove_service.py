"""Service for invoking the external groove CLI."""

import os
import shutil
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import git

from groove_locator.config import Config
from groove_locator.constants import DEFAULT_GROOVE_BINARY, WORKTREES_DIRNAME
from groove_locator.exceptions import (
    GrooveCommandError,
    NotAGitRepositoryError,
    WorktreePathError,
)
from groove_locator.logging_config import get_logger
from groove_locator.models.worktree import WorktreeListResult
from groove_locator.services.validation_service import RequestValidationService
from groove_locator.services.worktree_list_parser import parse_worktree_list

logger = get_logger(__name__)


def ensure_git_repository_root(path: Path) -> None:
    """Check that a directory is the working tree root of a Git repository.

    Raises:
        NotAGitRepositoryError: If ``path`` has no ``.git`` entry or is not
            the top of its working tree
    """
    if not (path / ".git").exists():
        raise NotAGitRepositoryError(path)

    try:
        repo = git.Repo(path)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
        raise NotAGitRepositoryError(
            path, f'"{path}" is not a valid Git repository. Select a folder initialized with Git.'
        ) from e

    try:
        working_tree = repo.working_tree_dir
    finally:
        repo.close()

    if working_tree is None or os.path.realpath(working_tree) != os.path.realpath(path):
        raise NotAGitRepositoryError(path)


def resolve_worktree_path(root: Path, worktree: str, dir: str = WORKTREES_DIRNAME) -> Path:
    """
    Locate a worktree directory beneath a workspace root.

    When ``root`` already ends with ``<dir>/<worktree>`` it is returned as-is.

    Args:
        root: Resolved workspace root
        worktree: Worktree name
        dir: Worktree container directory, relative to the root

    Returns:
        Path to the worktree directory

    Raises:
        WorktreePathError: If the worktree escapes its container or does not exist
    """
    if not RequestValidationService.is_safe_path_token(worktree):
        raise WorktreePathError(f"Invalid worktree name '{worktree}'.")

    worktree_depth = len(Path(worktree).parts)
    suffix = Path(dir) / worktree
    if len(root.parts) > len(suffix.parts) and root.parts[-len(suffix.parts):] == suffix.parts:
        container = root.parents[worktree_depth - 1]
        target = root
    else:
        container = root / dir
        target = container / worktree

    container_resolved = os.path.realpath(container)
    target_resolved = os.path.realpath(target)
    if os.path.commonpath([container_resolved, target_resolved]) != container_resolved:
        raise WorktreePathError(
            f'Resolved worktree path "{target_resolved}" is outside expected worktrees directory '
            f'"{container_resolved}".'
        )

    if not target.is_dir():
        raise WorktreePathError(f'Worktree directory not found at "{target}".')
    return target


class GrooveService:
    """Runs groove commands inside a resolved workspace root."""

    def __init__(self, config: Optional[Config] = None):
        """Initialize the groove service.

        Args:
            config: Configuration providing the binary and command timeout
        """
        self.config = config or Config()

    def binary(self) -> str:
        """Return the groove executable: configured, then on PATH, then bare name."""
        configured = self.config.resolved_groove_bin()
        if configured:
            return configured
        return shutil.which(DEFAULT_GROOVE_BINARY) or DEFAULT_GROOVE_BINARY

    def _run(self, operation: str, args: List[str], cwd: Path) -> Tuple[int, str, str]:
        """Run ``groove <args>`` in ``cwd`` and return (exit code, stdout, stderr).

        Raises:
            GrooveCommandError: If the binary cannot be executed
        """
        command = [self.binary(), *args]
        logger.info(f"Running {' '.join(command)} in {cwd}")
        runner = git.cmd.Git(str(cwd))
        try:
            status, stdout, stderr = runner.execute(
                command,
                with_extended_output=True,
                with_exceptions=False,
                kill_after_timeout=self.config.command_timeout,
            )
        except git.exc.GitCommandNotFound as e:
            raise GrooveCommandError(operation, f"Failed to execute {command[0]}: {e}") from e
        except git.exc.CommandError as e:
            stderr = (e.stderr if hasattr(e, "stderr") else str(e)).strip()
            raise GrooveCommandError(operation, stderr or str(e), stderr=stderr) from e

        logger.debug(f"groove {operation} exited with {status}")
        return status, stdout or "", stderr or ""

    def list_worktrees(
        self,
        root: Path,
        known_worktrees: Iterable[str] = (),
        dir: Optional[str] = None,
    ) -> WorktreeListResult:
        """
        Run ``groove list`` in the workspace root and parse its output.

        Args:
            root: Resolved workspace root
            known_worktrees: Names used to decide header order
            dir: Optional worktree container override passed as ``--dir``

        Returns:
            WorktreeListResult with parsed rows and the raw output

        Raises:
            GrooveCommandError: If the command fails
        """
        args = ["list"]
        if dir:
            args.extend(["--dir", dir])

        status, stdout, stderr = self._run("list", args, root)
        if status != 0:
            stderr = stderr.strip()
            raise GrooveCommandError(
                "list", stderr or None, exit_code=status, stdout=stdout, stderr=stderr
            )

        result = parse_worktree_list(stdout, known_worktrees)
        result.stderr = stderr
        if result.malformed_line_count:
            logger.warning(f"Skipped {result.malformed_line_count} malformed line(s) in groove list output")
        return result

    def create_worktree(
        self,
        root: Path,
        branch: str,
        base: Optional[str] = None,
        dir: Optional[str] = None,
    ) -> str:
        """
        Run ``groove create`` for a branch in the workspace root.

        Returns:
            Command stdout

        Raises:
            NotAGitRepositoryError: If the root is not a Git repository root
            GrooveCommandError: If the command fails
        """
        ensure_git_repository_root(root)

        args = ["create", branch]
        if base:
            args.extend(["--base", base])
        if dir:
            args.extend(["--dir", dir])

        status, stdout, stderr = self._run("create", args, root)
        if status != 0:
            stderr = stderr.strip()
            raise GrooveCommandError(
                "create", stderr or None, exit_code=status, stdout=stdout, stderr=stderr
            )
        logger.info(f"Created worktree for branch {branch}")
        return stdout
