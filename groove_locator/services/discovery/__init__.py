"""Workspace root discovery services for groove-locator."""

from .search_bases import build_search_bases
from .walker import TreeWalker, WalkResult, WalkStats
from .inspector import CandidateInspector, read_workspace_metadata, metadata_matches
from .disambiguator import disambiguate

__all__ = [
    "build_search_bases",
    "TreeWalker",
    "WalkResult",
    "WalkStats",
    "CandidateInspector",
    "read_workspace_metadata",
    "metadata_matches",
    "disambiguate",
]
