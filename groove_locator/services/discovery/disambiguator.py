"""Disambiguation policy for discovered candidate roots."""

from typing import Iterable, List

from groove_locator.constants import AMBIGUITY_PREVIEW_LIMIT
from groove_locator.exceptions import AmbiguousRootError, NoMatchingRootError
from groove_locator.models.workspace import CandidateRoot, Resolution, ResolutionReason


def disambiguate(
    root_name: str,
    candidates: Iterable[CandidateRoot],
    preview_limit: int = AMBIGUITY_PREVIEW_LIMIT,
) -> Resolution:
    """
    Narrow candidate roots down to exactly one.

    Decision table, in order:
    1. No candidates: NoMatchingRootError.
    2. One candidate: it is resolved.
    3. Several candidates with exactly one metadata match: the match is resolved.
    4. Otherwise AmbiguousRootError. The preview lists metadata matches when
       more than one matched, else candidates that have metadata, else all
       candidates, sorted by path and capped at ``preview_limit``.

    Args:
        root_name: Requested directory name, used in failure messages
        candidates: Candidates produced by the inspector
        preview_limit: Maximum number of paths in the ambiguity preview

    Returns:
        Resolution for the chosen root

    Raises:
        NoMatchingRootError: If there are no candidates
        AmbiguousRootError: If no single candidate can be chosen
    """
    ordered: List[CandidateRoot] = sorted(candidates, key=lambda candidate: str(candidate.path))

    if not ordered:
        raise NoMatchingRootError(root_name)

    if len(ordered) == 1:
        return Resolution(ordered[0].path, ResolutionReason.SINGLE_CANDIDATE, 1)

    matching = [candidate for candidate in ordered if candidate.matches_expected]
    if len(matching) == 1:
        return Resolution(matching[0].path, ResolutionReason.METADATA_MATCH, len(ordered))

    with_metadata = [candidate for candidate in ordered if candidate.has_metadata]
    if len(matching) > 1:
        diagnostic = matching
    elif with_metadata:
        diagnostic = with_metadata
    else:
        diagnostic = ordered

    raise AmbiguousRootError(
        root_name,
        [candidate.path for candidate in ordered],
        [candidate.path for candidate in diagnostic[:preview_limit]],
    )
