"""Workspace root resolution service for groove-locator."""

import time
from abc import ABC, abstractmethod
from pathlib import Path
from threading import Lock
from typing import Callable, Dict, List, Optional, Tuple

from groove_locator.config import Config
from groove_locator.constants import RESOLUTION_CACHE_TTL_SECONDS
from groove_locator.exceptions import InputValidationError
from groove_locator.logging_config import get_logger
from groove_locator.models.workspace import (
    CandidateRoot,
    Resolution,
    ResolutionReason,
    ResolutionRequest,
    SearchContext,
)
from groove_locator.services.discovery import (
    CandidateInspector,
    TreeWalker,
    build_search_bases,
    disambiguate,
)
from groove_locator.services.validation_service import RequestValidationService

logger = get_logger(__name__)


class ResolutionCache(ABC):
    """Lookup collaborator consulted before a name-based search."""

    @abstractmethod
    def get(self, context: SearchContext) -> Optional[Path]:
        """Return a previously resolved root for the context, if any."""

    @abstractmethod
    def put(self, context: SearchContext, path: Path) -> None:
        """Remember a resolved root for the context."""

    @abstractmethod
    def invalidate(self, context: Optional[SearchContext] = None) -> None:
        """Forget one context, or everything when context is None."""


class NullResolutionCache(ResolutionCache):
    """Cache that never remembers anything; every request searches from scratch."""

    def get(self, context: SearchContext) -> Optional[Path]:
        return None

    def put(self, context: SearchContext, path: Path) -> None:
        return None

    def invalidate(self, context: Optional[SearchContext] = None) -> None:
        return None


class MemoryResolutionCache(ResolutionCache):
    """In-process cache of resolved roots with a time-to-live."""

    def __init__(self, ttl_seconds: float = RESOLUTION_CACHE_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[SearchContext, Tuple[Path, float]] = {}
        self._lock = Lock()

    def get(self, context: SearchContext) -> Optional[Path]:
        with self._lock:
            entry = self._entries.get(context)
            if entry is None:
                return None
            path, stored_at = entry
            if self._clock() - stored_at > self.ttl_seconds:
                del self._entries[context]
                return None
            return path

    def put(self, context: SearchContext, path: Path) -> None:
        with self._lock:
            self._entries[context] = (path, self._clock())

    def invalidate(self, context: Optional[SearchContext] = None) -> None:
        with self._lock:
            if context is None:
                self._entries.clear()
            else:
                self._entries.pop(context, None)


class WorkspaceResolver:
    """Resolves a workspace root from an override path or a name-based search."""

    def __init__(
        self,
        config: Optional[Config] = None,
        cache: Optional[ResolutionCache] = None,
        base_provider: Optional[Callable[[], List[Path]]] = None,
    ):
        """Initialize the resolver.

        Args:
            config: Discovery configuration; defaults are used when omitted
            cache: Lookup collaborator; defaults to no caching
            base_provider: Returns the directories to search from
        """
        self.config = config or Config()
        self.cache = cache or NullResolutionCache()
        self.walker = TreeWalker.from_config(self.config)
        self.inspector = CandidateInspector.from_config(self.config)
        self.base_provider = base_provider or (
            lambda: build_search_bases(parent_levels=self.config.parent_levels)
        )

    def resolve(self, request: ResolutionRequest) -> Resolution:
        """
        Resolve a request to exactly one workspace root.

        An explicit override always bypasses the search.

        Raises:
            InputValidationError: If the override is invalid or no name was given
            NoMatchingRootError: If nothing matched
            AmbiguousRootError: If several roots remain
        """
        if request.root_override is not None:
            return self.resolve_override(request.root_override)
        if request.context is None:
            raise InputValidationError(
                "rootName",
                "Could not auto-resolve workspace root: rootName is required when no workspace root override is given.",
            )
        return self.resolve_context(request.context)

    def resolve_override(self, root_override: str) -> Resolution:
        """Validate an explicit root path and use it as-is."""
        path = RequestValidationService.validate_root_override(root_override)
        logger.info(f"Using workspace root override {path}")
        return Resolution(path, ResolutionReason.OVERRIDE)

    def resolve_context(self, context: SearchContext) -> Resolution:
        """Resolve a validated search context, consulting the cache first."""
        cached = self._cached_root(context)
        if cached is not None:
            return Resolution(cached, ResolutionReason.CACHED)

        candidates = self.find_candidates(context)
        resolution = disambiguate(context.target_name, candidates, self.config.preview_limit)
        logger.info(
            f"Resolved '{context.target_name}' to {resolution.path} "
            f"({resolution.reason.value}, {resolution.candidate_count} candidates)"
        )
        self.cache.put(context, resolution.path)
        return resolution

    def find_candidates(self, context: SearchContext) -> List[CandidateRoot]:
        """Walk the search bases and inspect every directory with the target name."""
        bases = self.base_provider()
        candidates: Dict[Path, CandidateRoot] = {}
        walk = self.walker.walk(bases, context.target_name)
        if walk.stats.cap_reached:
            logger.info(
                f"Directory cap of {self.walker.max_directories} reached while searching for "
                f"'{context.target_name}'; results may be incomplete"
            )
        for directory in walk.matches:
            candidate = self.inspector.inspect(
                directory,
                context.known_worktrees,
                context.expected_metadata,
                context.mode,
            )
            if candidate is not None:
                candidates[candidate.path] = candidate
        logger.debug(f"Found {len(candidates)} candidate roots for '{context.target_name}'")
        for candidate in candidates.values():
            logger.debug(f"  {candidate}")
        return sorted(candidates.values(), key=lambda candidate: str(candidate.path))

    def _cached_root(self, context: SearchContext) -> Optional[Path]:
        cached = self.cache.get(context)
        if cached is None:
            return None
        still_valid = self.inspector.inspect(
            cached, context.known_worktrees, context.expected_metadata, context.mode
        )
        if still_valid is None:
            logger.debug(f"Discarding stale cached root {cached}")
            self.cache.invalidate(context)
            return None
        logger.debug(f"Using cached root {cached} for '{context.target_name}'")
        return cached
