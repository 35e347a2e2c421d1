"""Display service for resolved roots and worktree status."""
import json
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from groove_locator.constants import COLUMNS
from groove_locator.formatters import format_activity, format_log, format_opencode
from groove_locator.models.workspace import Resolution
from groove_locator.models.worktree import WorktreeListResult

console = Console()


class DisplayService:
    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def display_resolution(self, resolution: Resolution) -> None:
        """Print the resolved root; with verbose output also say why it was chosen."""
        self.display_path(resolution.path)
        if self.verbose:
            console.print(
                f"[dim]{resolution.reason.value}, {resolution.candidate_count} candidate(s)[/dim]"
            )

    def display_path(self, path: Path) -> None:
        """Print a bare path so it can be captured by shell scripts."""
        console.print(str(path), markup=False, emoji=False, highlight=False, soft_wrap=True)

    def display_text(self, text: str) -> None:
        """Print command output verbatim."""
        console.print(text.rstrip(), markup=False, emoji=False, highlight=False, soft_wrap=True)

    def display_worktree_table(self, result: WorktreeListResult, title: str = "") -> None:
        """Display a table of parsed worktree rows."""
        table = Table(title=title or None)
        for col in COLUMNS:
            table.add_column(col.label, min_width=col.width or None)

        for row in result.rows.values():
            table.add_row(
                escape(row.worktree),
                escape(row.branch),
                format_opencode(row),
                escape(row.opencode_instance_id or ""),
                format_log(row),
                format_activity(row),
            )

        if result.rows:
            console.print(table)
        else:
            console.print("[yellow]No worktrees reported.[/yellow]")

        if result.malformed_line_count:
            console.print(
                f"[yellow]Warning: skipped {result.malformed_line_count} malformed line(s) "
                "in groove list output.[/yellow]"
            )

    def display_json(self, payload: dict) -> None:
        """Print a payload as JSON without rich markup processing."""
        console.print(json.dumps(payload, indent=2), markup=False, emoji=False, highlight=False, soft_wrap=True)
