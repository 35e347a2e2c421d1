"""Bounded directory tree walker for workspace root discovery."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, NamedTuple, Set

from groove_locator.config import Config
from groove_locator.constants import (
    MAX_DISCOVERY_DEPTH,
    MAX_DISCOVERY_DIRECTORIES,
    SKIPPED_DIRECTORY_NAMES,
)
from groove_locator.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class WalkStats:
    """Counters collected during one walk."""

    scanned: int = 0
    matched: int = 0
    unreadable: int = 0
    cap_reached: bool = False


class WalkResult(NamedTuple):
    """Matches and counters from one walk."""

    matches: List[Path]
    stats: WalkStats


class TreeWalker:
    """Depth- and count-limited search for directories with a given name.

    Every call to :meth:`walk` starts from an empty visited set and scan
    counter and returns its own counters, so one walker can serve many
    requests without sharing state.
    """

    def __init__(
        self,
        max_depth: int = MAX_DISCOVERY_DEPTH,
        max_directories: int = MAX_DISCOVERY_DIRECTORIES,
        skipped_directory_names: Iterable[str] = SKIPPED_DIRECTORY_NAMES,
    ):
        """Initialize the walker.

        Args:
            max_depth: Deepest directory level (relative to a base) that is read
            max_directories: Global cap on directory reads per walk
            skipped_directory_names: Entry names that are never reported or descended into
        """
        self.max_depth = max_depth
        self.max_directories = max_directories
        self.skipped_directory_names = frozenset(skipped_directory_names)

    @classmethod
    def from_config(cls, config: Config) -> "TreeWalker":
        return cls(
            max_depth=config.max_depth,
            max_directories=config.max_directories,
            skipped_directory_names=config.skipped_directory_names,
        )

    def walk(self, bases: Iterable[Path], target_name: str) -> WalkResult:
        """Find every directory named ``target_name`` at or beneath the bases.

        A base whose own name is ``target_name`` is a match as well.

        Args:
            bases: Directories to search from, in order
            target_name: Exact directory name to match

        Returns:
            WalkResult with matching paths in discovery order, without
            duplicates, and the counters for this walk
        """
        visited: Set[str] = set()
        matches: Dict[Path, None] = {}
        stats = WalkStats()

        for base in bases:
            if stats.scanned >= self.max_directories:
                stats.cap_reached = True
                break
            self._match_base(base, target_name, matches)
            self._walk_directory(str(base), 0, target_name, visited, matches, stats)

        stats.matched = len(matches)
        logger.debug(
            f"Scanned {stats.scanned} directories for '{target_name}': "
            f"{stats.matched} matches, {stats.unreadable} unreadable"
        )
        if stats.cap_reached:
            logger.debug(f"Stopped scanning at the {self.max_directories} directory cap")
        return WalkResult(list(matches), stats)

    def _match_base(self, base: Path, target_name: str, matches: Dict[Path, None]) -> None:
        canonical = os.path.realpath(base)
        name = os.path.basename(canonical)
        if name != target_name or name in self.skipped_directory_names:
            return
        if os.path.isdir(canonical):
            matches[Path(canonical)] = None

    def _walk_directory(
        self,
        directory: str,
        depth: int,
        target_name: str,
        visited: Set[str],
        matches: Dict[Path, None],
        stats: WalkStats,
    ) -> None:
        canonical = os.path.realpath(directory)
        if canonical in visited:
            return
        visited.add(canonical)

        if stats.scanned >= self.max_directories:
            stats.cap_reached = True
            return
        stats.scanned += 1

        try:
            with os.scandir(canonical) as iterator:
                entries = sorted(iterator, key=lambda entry: entry.name)
        except OSError as e:
            # Unreadable directories count as empty
            stats.unreadable += 1
            logger.debug(f"Could not read {canonical}: {e}")
            return

        for entry in entries:
            try:
                if entry.is_symlink() or not entry.is_dir(follow_symlinks=False):
                    continue
            except OSError:
                continue

            if entry.name in self.skipped_directory_names:
                continue

            child = os.path.join(canonical, entry.name)
            if entry.name == target_name:
                matches[Path(child)] = None

            if depth >= self.max_depth:
                continue

            self._walk_directory(child, depth + 1, target_name, visited, matches, stats)
            if stats.scanned >= self.max_directories:
                stats.cap_reached = True
                return
