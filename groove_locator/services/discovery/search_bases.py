"""Search base enumeration for workspace root discovery."""

import os
from pathlib import Path
from typing import List, Optional

from groove_locator.constants import SEARCH_PARENT_LEVELS
from groove_locator.logging_config import get_logger

logger = get_logger(__name__)


def _current_directory() -> Optional[Path]:
    try:
        return Path(os.getcwd())
    except OSError as e:
        logger.debug(f"Could not read current directory: {e}")
        return None


def _home_directory() -> Optional[Path]:
    try:
        return Path.home()
    except (RuntimeError, KeyError) as e:
        logger.debug(f"Could not determine home directory: {e}")
        return None


def build_search_bases(
    cwd: Optional[Path] = None,
    home: Optional[Path] = None,
    parent_levels: int = SEARCH_PARENT_LEVELS,
) -> List[Path]:
    """Return the directories most likely to contain a workspace root.

    The current directory comes first, then up to ``parent_levels`` of its
    ancestors (stopping at the filesystem root), then the home directory.
    Duplicates are dropped while keeping first-seen order.

    Args:
        cwd: Starting directory; defaults to the process working directory
        home: Home directory; defaults to the current user's home
        parent_levels: Number of ancestors to include

    Returns:
        Ordered list of absolute directories
    """
    bases: List[Path] = []
    seen = set()

    def add(path: Path) -> None:
        if path not in seen:
            seen.add(path)
            bases.append(path)

    start = cwd if cwd is not None else _current_directory()
    if start is not None:
        cursor = Path(os.path.abspath(start))
        add(cursor)
        for _ in range(parent_levels):
            parent = cursor.parent
            if parent == cursor:
                break
            add(parent)
            cursor = parent

    home_dir = home if home is not None else _home_directory()
    if home_dir is not None:
        add(Path(os.path.abspath(home_dir)))

    logger.debug(f"Search bases: {', '.join(str(base) for base in bases)}")
    return bases
