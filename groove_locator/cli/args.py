"""Command-line argument parsing for groove-locator."""

import argparse
from pathlib import Path
from typing import List, Optional

from groove_locator.__version__ import __version__
from groove_locator.constants import MAX_DISCOVERY_DEPTH, MAX_DISCOVERY_DIRECTORIES


def _add_resolution_arguments(parser: argparse.ArgumentParser) -> None:
    """Options shared by every command that resolves a workspace root."""
    parser.add_argument("root_name", metavar="NAME", help="Directory name of the workspace root")
    parser.add_argument(
        "-k",
        "--known-worktree",
        dest="known_worktrees",
        action="append",
        default=[],
        metavar="WORKTREE",
        help="Worktree that must exist under the root (repeatable)",
    )
    parser.add_argument(
        "--workspace-root",
        metavar="PATH",
        help="Absolute path of the workspace root; skips the search",
    )
    parser.add_argument("--workspace-version", metavar="N", help="Expected metadata version")
    parser.add_argument("--workspace-created-at", metavar="TS", help="Expected metadata createdAt")
    parser.add_argument("--workspace-updated-at", metavar="TS", help="Expected metadata updatedAt")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="groove-locator",
        description="Locate groove workspace roots and report worktree status",
        epilog="Set GROOVE_BIN to use a groove executable that is not on PATH.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--version", action="version", version=f"groove-locator {__version__}")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=MAX_DISCOVERY_DEPTH,
        metavar="N",
        help=f"Deepest directory level searched below each base (default: {MAX_DISCOVERY_DEPTH})",
    )
    parser.add_argument(
        "--max-directories",
        type=int,
        default=MAX_DISCOVERY_DIRECTORIES,
        metavar="N",
        help=f"Maximum directories read per search (default: {MAX_DISCOVERY_DIRECTORIES})",
    )
    parser.add_argument("--groove-bin", metavar="PATH", help="groove executable to run")
    parser.add_argument(
        "--log-file",
        type=Path,
        metavar="PATH",
        help="Write all log messages to this file (debug mode defaults to ~/.groove-locator/groove-locator.log)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve_parser = subparsers.add_parser("resolve", help="Print the resolved workspace root")
    _add_resolution_arguments(resolve_parser)
    resolve_parser.add_argument(
        "--create",
        action="store_true",
        help="Accept roots without a worktree container (for creating the first worktree)",
    )

    list_parser = subparsers.add_parser("list", help="Show worktree status from groove list")
    _add_resolution_arguments(list_parser)
    list_parser.add_argument("--dir", metavar="DIR", help="Worktree directory passed to groove")
    list_parser.add_argument("--json", action="store_true", help="Print rows as JSON")

    create_parser = subparsers.add_parser("create", help="Create a worktree with groove create")
    _add_resolution_arguments(create_parser)
    create_parser.add_argument("branch", metavar="BRANCH", help="Branch to create a worktree for")
    create_parser.add_argument("--base", metavar="BRANCH", help="Base branch for the new branch")
    create_parser.add_argument("--dir", metavar="DIR", help="Worktree directory passed to groove")

    path_parser = subparsers.add_parser("path", help="Print the directory of one worktree")
    _add_resolution_arguments(path_parser)
    path_parser.add_argument("worktree", metavar="WORKTREE", help="Worktree name")
    path_parser.add_argument("--dir", metavar="DIR", help="Worktree directory under the root")

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
