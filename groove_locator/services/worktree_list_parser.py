"""Parser for the line-oriented output of ``groove list``.

Each data line looks like::

    - feature/login (wt-login) | opencode: running instance=abc123 | log: latest->/x/y/session-42.log

Two header orders exist in the wild: ``branch (worktree)`` and the older
``worktree (branch)``. The order is decided per line by :func:`parse_header`.
"""

import re
from pathlib import PurePosixPath
from typing import AbstractSet, Iterable, Optional, Tuple

from groove_locator.constants import ROW_MARKER, SEGMENT_SEPARATOR
from groove_locator.logging_config import get_logger
from groove_locator.models.worktree import (
    ActivityDetail,
    ActivityState,
    HeaderRule,
    LogState,
    OpencodeState,
    WorktreeHeader,
    WorktreeListResult,
    WorktreeRow,
)

logger = get_logger(__name__)

HEADER_PATTERN = re.compile(r"-\s+(.+?)\s+\((.+)\)")
INSTANCE_PATTERN = re.compile(r"\binstance=([^\s|]+)")
RUNNING_PATTERN = re.compile(r"running\b")
NOT_RUNNING_PATTERN = re.compile(r"\bnot[-\s]?running\b")
STOPPED_PATTERN = re.compile(r"stopped\b")
NONE_PATTERN = re.compile(r"none\b")
LATEST_PATTERN = re.compile(r"latest->(.+)")
BROKEN_LATEST_PATTERN = re.compile(r"broken-?latest->(.+)")
LINE_SPLIT_PATTERN = re.compile(r"\r?\n")


def looks_like_branch(token: str) -> bool:
    """Branch names usually carry a prefix such as ``feature/``."""
    return "/" in token


def parse_header(segment: str, known_worktrees: AbstractSet[str]) -> Optional[WorktreeHeader]:
    """
    Decode ``- <tokenA> (<tokenB>)`` into worktree and branch names.

    Rules, in order: a token found in ``known_worktrees`` (when exactly one
    is) is the worktree; else a lone branch-shaped token is the branch; else
    tokenA is the branch and tokenB the worktree.

    Args:
        segment: First ``|`` segment of the line, already trimmed
        known_worktrees: Worktree names the caller already knows about

    Returns:
        WorktreeHeader, or None if the segment does not match the grammar
    """
    match = HEADER_PATTERN.fullmatch(segment)
    if not match:
        return None

    first = match.group(1).strip()
    second = match.group(2).strip()
    if not first or not second:
        return None

    first_known = first in known_worktrees
    second_known = second in known_worktrees
    if first_known and not second_known:
        return WorktreeHeader(worktree=first, branch=second, rule=HeaderRule.MATCHED_BY_KNOWN_SET)
    if second_known and not first_known:
        return WorktreeHeader(worktree=second, branch=first, rule=HeaderRule.MATCHED_BY_KNOWN_SET)

    first_branch_like = looks_like_branch(first)
    second_branch_like = looks_like_branch(second)
    if first_branch_like and not second_branch_like:
        return WorktreeHeader(worktree=second, branch=first, rule=HeaderRule.MATCHED_BY_BRANCH_SHAPE)
    if second_branch_like and not first_branch_like:
        return WorktreeHeader(worktree=first, branch=second, rule=HeaderRule.MATCHED_BY_BRANCH_SHAPE)

    return WorktreeHeader(worktree=second, branch=first, rule=HeaderRule.DEFAULT_ORDER)


def parse_opencode_segment(value: str) -> Tuple[OpencodeState, Optional[str]]:
    """Parse an ``opencode:`` value into a state and optional instance id."""
    normalized = value.strip()
    instance_match = INSTANCE_PATTERN.search(normalized)
    instance_id = instance_match.group(1) if instance_match else None

    if RUNNING_PATTERN.match(normalized):
        return OpencodeState.RUNNING, instance_id
    if NOT_RUNNING_PATTERN.search(normalized) or STOPPED_PATTERN.match(normalized):
        return OpencodeState.NOT_RUNNING, instance_id
    return OpencodeState.UNKNOWN, instance_id


def _log_target_name(target: str) -> Optional[str]:
    target = target.strip()
    if not target:
        return None
    return PurePosixPath(target).name or None


def parse_log_segment(value: str) -> Tuple[LogState, Optional[str]]:
    """Parse a ``log:`` value into a state and the basename of its target."""
    normalized = value.strip()

    latest = LATEST_PATTERN.fullmatch(normalized)
    if latest:
        return LogState.LATEST, _log_target_name(latest.group(1))

    broken = BROKEN_LATEST_PATTERN.fullmatch(normalized)
    if broken:
        return LogState.BROKEN_LATEST, _log_target_name(broken.group(1))

    if NONE_PATTERN.match(normalized):
        return LogState.NONE, None

    return LogState.UNKNOWN, None


def parse_activity_segment(value: str) -> Tuple[ActivityState, Optional[ActivityDetail]]:
    """Parse an ``activity:`` value such as ``thinking reason=tool age_s=12``."""
    tokens = value.split()
    if not tokens:
        return ActivityState.UNKNOWN, None

    try:
        state = ActivityState(tokens[0].lower())
    except ValueError:
        state = ActivityState.UNKNOWN

    detail = ActivityDetail()
    for token in tokens[1:]:
        key, separator, raw_value = token.partition("=")
        if not separator:
            continue
        raw_value = raw_value.strip()
        if not raw_value or raw_value == "na":
            continue
        if key == "reason":
            detail.reason = raw_value
        elif key == "age_s":
            if raw_value.isdigit():
                detail.age_s = int(raw_value)
        elif key == "marker":
            detail.marker = raw_value
        elif key == "log":
            detail.log = raw_value

    has_detail = any(
        item is not None for item in (detail.reason, detail.age_s, detail.marker, detail.log)
    )
    return state, detail if has_detail else None


def parse_worktree_line(line: str, known_worktrees: AbstractSet[str]) -> Optional[WorktreeRow]:
    """
    Parse one trimmed data line into a row.

    Returns:
        WorktreeRow, or None if the header segment is malformed
    """
    segments = [segment.strip() for segment in line.split(SEGMENT_SEPARATOR)]
    header = parse_header(segments[0], known_worktrees)
    if header is None:
        return None

    if header.rule is not HeaderRule.MATCHED_BY_KNOWN_SET:
        logger.debug(
            f"Header '{segments[0]}' decided by {header.rule.value}: "
            f"worktree={header.worktree} branch={header.branch}"
        )

    row = WorktreeRow(worktree=header.worktree, branch=header.branch, header_rule=header.rule)
    for segment in segments[1:]:
        key, separator, value = segment.partition(":")
        if not separator:
            continue
        key = key.strip().lower()
        value = value.strip()
        if key == "opencode":
            row.opencode_state, row.opencode_instance_id = parse_opencode_segment(value)
        elif key == "log":
            row.log_state, row.log_target = parse_log_segment(value)
        elif key == "activity":
            row.activity_state, row.activity_detail = parse_activity_segment(value)
    return row


def parse_worktree_list(stdout: str, known_worktrees: Iterable[str] = ()) -> WorktreeListResult:
    """
    Parse the full ``groove list`` output.

    Lines not starting with ``- `` are ignored. Lines that do start with it
    but have a malformed header are counted and skipped. A later line for
    the same worktree replaces the earlier row.

    Args:
        stdout: Raw command output
        known_worktrees: Worktree names used to decide header order

    Returns:
        WorktreeListResult with rows keyed by worktree name
    """
    known = frozenset(known_worktrees)
    result = WorktreeListResult(stdout=stdout)

    for raw_line in LINE_SPLIT_PATTERN.split(stdout):
        line = raw_line.strip()
        if not line or not line.startswith(ROW_MARKER):
            continue

        row = parse_worktree_line(line, known)
        if row is None:
            result.malformed_line_count += 1
            logger.debug(f"Malformed worktree line: {line!r}")
            continue

        result.rows[row.worktree] = row

    logger.debug(
        f"Parsed {len(result.rows)} worktree rows ({result.malformed_line_count} malformed lines)"
    )
    return result
