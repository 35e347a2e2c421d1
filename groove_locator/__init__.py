"""
groove-locator - Find groove workspace roots and read their worktree status
"""

from .__version__ import __version__
from .services.resolution_service import WorkspaceResolver
from .services.worktree_list_parser import parse_worktree_list

__all__ = ["WorkspaceResolver", "parse_worktree_list", "__version__"]
