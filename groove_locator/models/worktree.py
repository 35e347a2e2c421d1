"""Worktree status data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional


class OpencodeState(Enum):
    """Whether an opencode instance is attached to the worktree."""
    RUNNING = "running"
    NOT_RUNNING = "not-running"
    UNKNOWN = "unknown"


class LogState(Enum):
    """State of the worktree's latest session log link."""
    LATEST = "latest"
    BROKEN_LATEST = "broken-latest"
    NONE = "none"
    UNKNOWN = "unknown"


class ActivityState(Enum):
    """Reported opencode activity."""
    THINKING = "thinking"
    IDLE = "idle"
    FINISHED = "finished"
    ERROR = "error"
    UNKNOWN = "unknown"


class HeaderRule(Enum):
    """Which rule decided the worktree/branch order of a row header."""
    MATCHED_BY_KNOWN_SET = "known-set"
    MATCHED_BY_BRANCH_SHAPE = "branch-shape"
    DEFAULT_ORDER = "default-order"


@dataclass(frozen=True)
class WorktreeHeader:
    """Worktree and branch names decoded from a row header."""

    worktree: str
    branch: str
    rule: HeaderRule


@dataclass
class ActivityDetail:
    """Optional details attached to an activity segment."""

    reason: Optional[str] = None
    age_s: Optional[int] = None
    marker: Optional[str] = None
    log: Optional[str] = None

    def to_dict(self) -> dict:
        payload = {"reason": self.reason, "ageS": self.age_s, "marker": self.marker, "log": self.log}
        return {key: value for key, value in payload.items() if value is not None}


@dataclass
class WorktreeRow:
    """Status of one worktree as reported by the groove list command."""

    worktree: str
    branch: str
    opencode_state: OpencodeState = OpencodeState.UNKNOWN
    opencode_instance_id: Optional[str] = None
    log_state: LogState = LogState.UNKNOWN
    log_target: Optional[str] = None
    activity_state: ActivityState = ActivityState.UNKNOWN
    activity_detail: Optional[ActivityDetail] = None
    header_rule: HeaderRule = HeaderRule.DEFAULT_ORDER

    def __str__(self) -> str:
        """String representation of the row."""
        return f"{self.worktree} ({self.branch}) opencode={self.opencode_state.value} log={self.log_state.value}"

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dictionary, omitting absent optionals."""
        payload = {
            "worktree": self.worktree,
            "branch": self.branch,
            "opencodeState": self.opencode_state.value,
            "logState": self.log_state.value,
            "activityState": self.activity_state.value,
        }
        if self.opencode_instance_id:
            payload["opencodeInstanceId"] = self.opencode_instance_id
        if self.log_target:
            payload["logTarget"] = self.log_target
        if self.activity_detail is not None:
            payload["activityDetail"] = self.activity_detail.to_dict()
        return payload


@dataclass
class WorktreeListResult:
    """Parsed output of one groove list invocation."""

    rows: Dict[str, WorktreeRow] = field(default_factory=dict)
    malformed_line_count: int = 0
    stdout: str = ""
    stderr: str = ""

    def to_dict(self) -> dict:
        return {
            "rows": {name: row.to_dict() for name, row in self.rows.items()},
            "malformedLineCount": self.malformed_line_count,
        }
