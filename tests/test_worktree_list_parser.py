"""Tests for groove list output parsing"""
import logging

import pytest

from groove_locator.models.worktree import (
    ActivityDetail,
    ActivityState,
    HeaderRule,
    LogState,
    OpencodeState,
)
from groove_locator.services.worktree_list_parser import (
    looks_like_branch,
    parse_activity_segment,
    parse_header,
    parse_log_segment,
    parse_opencode_segment,
    parse_worktree_list,
)

SAMPLE_LINE = "- feature/login (wt-login) | opencode: running instance=abc123 | log: latest->/x/y/session-42.log"


class TestParseHeader:
    """Test header token ordering."""

    def test_known_worktree_in_second_position(self):
        """Test known worktree in second position."""
        header = parse_header("- main (wt-1)", {"wt-1"})
        assert (header.worktree, header.branch) == ("wt-1", "main")
        assert header.rule is HeaderRule.MATCHED_BY_KNOWN_SET

    def test_known_worktree_in_first_position(self):
        """Test known worktree in first position."""
        header = parse_header("- wt-1 (main)", {"wt-1"})
        assert (header.worktree, header.branch) == ("wt-1", "main")
        assert header.rule is HeaderRule.MATCHED_BY_KNOWN_SET

    def test_both_orders_agree_with_known_set(self):
        """Test both orders agree with known set."""
        first = parse_header("- feature/x (wt-x)", {"wt-x"})
        second = parse_header("- wt-x (feature/x)", {"wt-x"})
        assert (first.worktree, first.branch) == (second.worktree, second.branch) == ("wt-x", "feature/x")

    def test_branch_shape_decides_without_known_set(self):
        """Test branch shape decides without known set."""
        header = parse_header("- wt-x (feature/x)", set())
        assert (header.worktree, header.branch) == ("wt-x", "feature/x")
        assert header.rule is HeaderRule.MATCHED_BY_BRANCH_SHAPE

        header = parse_header("- feature/x (wt-x)", set())
        assert (header.worktree, header.branch) == ("wt-x", "feature/x")

    def test_both_tokens_known_falls_through(self):
        """Test both tokens known falls through."""
        header = parse_header("- a (b)", {"a", "b"})
        assert (header.worktree, header.branch) == ("b", "a")
        assert header.rule is HeaderRule.DEFAULT_ORDER

    def test_default_order_is_branch_then_worktree(self):
        """Test default order is branch then worktree."""
        header = parse_header("- main (wt-1)", set())
        assert (header.worktree, header.branch) == ("wt-1", "main")
        assert header.rule is HeaderRule.DEFAULT_ORDER

    def test_both_branch_shaped_uses_default_order(self):
        """Test both branch shaped uses default order."""
        header = parse_header("- feature/a (team/b)", set())
        assert (header.worktree, header.branch) == ("team/b", "feature/a")
        assert header.rule is HeaderRule.DEFAULT_ORDER

    @pytest.mark.parametrize("segment", ["- main", "-main (wt)", "- (wt)", "- main ()", "main (wt)", ""])
    def test_malformed_headers(self, segment):
        """Test malformed headers."""
        assert parse_header(segment, set()) is None

    def test_looks_like_branch(self):
        """Test looks like branch."""
        assert looks_like_branch("feature/login")
        assert not looks_like_branch("wt-login")


class TestSegments:
    """Test per-segment state extraction."""

    def test_opencode_running_with_instance(self):
        """Test opencode running with instance."""
        assert parse_opencode_segment("running instance=abc123") == (OpencodeState.RUNNING, "abc123")

    def test_opencode_states_are_case_sensitive(self):
        """Test opencode states are case sensitive."""
        assert parse_opencode_segment("RUNNING")[0] is OpencodeState.UNKNOWN
        assert parse_opencode_segment("Stopped")[0] is OpencodeState.UNKNOWN
        assert parse_opencode_segment("NOT RUNNING")[0] is OpencodeState.UNKNOWN

    @pytest.mark.parametrize("value", ["not-running", "not running", "notrunning", "stopped", "stopped since 3m"])
    def test_opencode_not_running(self, value):
        """Test opencode not running."""
        assert parse_opencode_segment(value) == (OpencodeState.NOT_RUNNING, None)

    def test_opencode_unknown(self):
        """Test unrecognised opencode values."""
        assert parse_opencode_segment("starting") == (OpencodeState.UNKNOWN, None)

    def test_log_latest_keeps_basename(self):
        """Test log latest keeps basename."""
        assert parse_log_segment("latest->/x/y/session-42.log") == (LogState.LATEST, "session-42.log")

    def test_log_broken_latest(self):
        """Test log broken latest."""
        assert parse_log_segment("broken-latest->/x/gone.log") == (LogState.BROKEN_LATEST, "gone.log")
        assert parse_log_segment("brokenlatest->/x/gone.log") == (LogState.BROKEN_LATEST, "gone.log")

    def test_log_none(self):
        """Test the none log state."""
        assert parse_log_segment("none") == (LogState.NONE, None)
        assert parse_log_segment("none (no sessions)") == (LogState.NONE, None)

    def test_log_none_must_be_a_whole_word(self):
        """Test log none must be a whole word."""
        assert parse_log_segment("nonexistent") == (LogState.UNKNOWN, None)
        assert parse_log_segment("none-yet") == (LogState.NONE, None)

    def test_log_unknown(self):
        """Test unrecognised log values."""
        assert parse_log_segment("latest") == (LogState.UNKNOWN, None)
        assert parse_log_segment("") == (LogState.UNKNOWN, None)

    def test_activity_with_details(self):
        """Test activity with details."""
        state, detail = parse_activity_segment("thinking reason=tool age_s=12 marker=m1 log=na")
        assert state is ActivityState.THINKING
        assert detail == ActivityDetail(reason="tool", age_s=12, marker="m1")

    def test_activity_without_details(self):
        """Test activity without details."""
        assert parse_activity_segment("idle") == (ActivityState.IDLE, None)

    def test_activity_unknown_state_and_bad_age(self):
        """Test activity unknown state and bad age."""
        state, detail = parse_activity_segment("pondering age_s=soon")
        assert state is ActivityState.UNKNOWN
        assert detail is None


class TestParseWorktreeList:
    """Test whole-output parsing."""

    def test_sample_line(self):
        """Test parsing a complete status line."""
        result = parse_worktree_list(SAMPLE_LINE + "\n")
        row = result.rows["wt-login"]
        assert row.branch == "feature/login"
        assert row.opencode_state is OpencodeState.RUNNING
        assert row.opencode_instance_id == "abc123"
        assert row.log_state is LogState.LATEST
        assert row.log_target == "session-42.log"
        assert result.malformed_line_count == 0

    def test_missing_segments_default_to_unknown(self):
        """Test missing segments default to unknown."""
        row = parse_worktree_list("- main (wt-1)").rows["wt-1"]
        assert row.opencode_state is OpencodeState.UNKNOWN
        assert row.log_state is LogState.UNKNOWN
        assert row.activity_state is ActivityState.UNKNOWN
        assert row.opencode_instance_id is None

    def test_non_row_lines_are_ignored(self):
        """Test non row lines are ignored."""
        stdout = "Worktrees for proj:\n\n  \n" + SAMPLE_LINE + "\nTotal: 1\n"
        result = parse_worktree_list(stdout)
        assert list(result.rows) == ["wt-login"]
        assert result.malformed_line_count == 0

    def test_malformed_rows_are_counted(self):
        """Test malformed rows are counted."""
        stdout = "- broken header\n- also (\n" + SAMPLE_LINE
        result = parse_worktree_list(stdout)
        assert result.malformed_line_count == 2
        assert list(result.rows) == ["wt-login"]

    def test_crlf_and_indentation(self):
        """Test crlf and indentation."""
        stdout = "   - main (wt-1) | opencode: stopped\r\n\t- dev (wt-2) | log: none\r\n"
        result = parse_worktree_list(stdout)
        assert result.rows["wt-1"].opencode_state is OpencodeState.NOT_RUNNING
        assert result.rows["wt-2"].log_state is LogState.NONE

    def test_last_line_wins(self):
        """Test last line wins."""
        stdout = "- main (wt-1) | opencode: running\n- main (wt-1) | opencode: stopped\n"
        result = parse_worktree_list(stdout)
        assert len(result.rows) == 1
        assert result.rows["wt-1"].opencode_state is OpencodeState.NOT_RUNNING

    def test_segment_keys_are_case_insensitive(self):
        """Test segment keys are case insensitive."""
        row = parse_worktree_list("- main (wt-1) | OpenCode: running | Activity: finished").rows["wt-1"]
        assert row.opencode_state is OpencodeState.RUNNING
        assert row.activity_state is ActivityState.FINISHED

    def test_unknown_segments_are_ignored(self):
        """Test unknown segments are ignored."""
        row = parse_worktree_list("- main (wt-1) | dirty | pr: #12 | log: none").rows["wt-1"]
        assert row.log_state is LogState.NONE

    def test_known_worktrees_choose_order(self):
        """Test known worktrees choose order."""
        result = parse_worktree_list("- wt-1 (main)\n- main (wt-2)", known_worktrees=["wt-1", "wt-2"])
        assert result.rows["wt-1"].branch == "main"
        assert result.rows["wt-2"].branch == "main"

    def test_empty_output(self):
        """Test parsing empty output."""
        result = parse_worktree_list("")
        assert result.rows == {}
        assert result.malformed_line_count == 0

    def test_heuristic_decisions_are_logged(self, caplog):
        """Test heuristic decisions are logged."""
        with caplog.at_level(logging.DEBUG, logger="worktree_list_parser"):
            parse_worktree_list("- main (wt-1)")
        assert "default-order" in caplog.text

    def test_to_dict(self):
        """Test JSON-friendly conversion of the result."""
        payload = parse_worktree_list(SAMPLE_LINE + " | activity: idle age_s=3").to_dict()
        assert payload["malformedLineCount"] == 0
        assert payload["rows"]["wt-login"] == {
            "worktree": "wt-login",
            "branch": "feature/login",
            "opencodeState": "running",
            "logState": "latest",
            "activityState": "idle",
            "opencodeInstanceId": "abc123",
            "logTarget": "session-42.log",
            "activityDetail": {"ageS": 3},
        }
