"""Entry point for the groove-locator command."""

import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from groove_locator.cli.args import parse_args
from groove_locator.config import Config
from groove_locator.exceptions import GrooveLocatorError
from groove_locator.logging_config import get_logger, setup_logging
from groove_locator.models.workspace import InspectionMode
from groove_locator.services.display_service import DisplayService
from groove_locator.services.groove_service import GrooveService, resolve_worktree_path
from groove_locator.services.resolution_service import WorkspaceResolver
from groove_locator.services.validation_service import (
    RequestValidationService,
    build_resolution_request,
)

console = Console(stderr=True)
logger = get_logger(__name__)


def run(parsed_args) -> int:
    """Run the selected command with already parsed arguments."""
    config = Config(
        max_depth=parsed_args.max_depth,
        max_directories=parsed_args.max_directories,
        groove_bin=parsed_args.groove_bin,
        verbose=parsed_args.verbose,
        debug=parsed_args.debug,
    )
    if config.debug:
        logger.debug("Configuration:")
        for key, value in config.to_dict().items():
            logger.debug(f"  {key}: {value}")

    command = parsed_args.command
    creating = command == "create" or (command == "resolve" and parsed_args.create)
    request = build_resolution_request(
        root_name=parsed_args.root_name,
        known_worktrees=parsed_args.known_worktrees,
        workspace_root=parsed_args.workspace_root,
        version=parsed_args.workspace_version,
        created_at=parsed_args.workspace_created_at,
        updated_at=parsed_args.workspace_updated_at,
        mode=InspectionMode.CREATE if creating else InspectionMode.LIST,
        max_known_worktrees=config.max_known_worktrees,
    )
    dir_override = RequestValidationService.validate_relative_dir(getattr(parsed_args, "dir", None))

    display = DisplayService(verbose=config.verbose)
    resolution = WorkspaceResolver(config).resolve(request)

    if command == "resolve":
        display.display_resolution(resolution)
        return 0

    if command == "path":
        worktree_path = resolve_worktree_path(
            resolution.path, parsed_args.worktree, dir_override or config.worktrees_dirname
        )
        display.display_path(worktree_path)
        return 0

    groove = GrooveService(config)
    if command == "create":
        branch = RequestValidationService.validate_relative_dir(parsed_args.branch, "branch")
        base = RequestValidationService.validate_relative_dir(parsed_args.base, "base")
        output = groove.create_worktree(resolution.path, branch, base=base, dir=dir_override)
        if output.strip():
            display.display_text(output)
        return 0

    known = request.context.known_worktrees if request.context else ()
    result = groove.list_worktrees(resolution.path, known, dir=dir_override)
    if parsed_args.json:
        payload = {"workspaceRoot": str(resolution.path), **result.to_dict()}
        display.display_json(payload)
    else:
        display.display_worktree_table(result, title=str(resolution.path))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    parsed_args = parse_args(argv)
    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug, log_file=parsed_args.log_file)

    try:
        return run(parsed_args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except (GrooveLocatorError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
        if parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
