"""
Candidate Ranker - order title candidates against a query

Scoring (per suggest hit):
    label      = hit label with every listed contributor removed
    distance   = edit_distance(query.lower(), label.lower())
    bonus      = 25 when the first contributor appears in the original label
                 and contains the query, 8 when it appears but does not
    distance   = max(0, distance - bonus)

Sort chain (ascending):
    1. adjusted distance
    2. contributor present in label (present first)
    3. English language (English first)
    4. numeric token (non-numeric tokens last)
    5. URI, so the order never depends on input order

A second, simpler scorer serves the title-click flow: relationship listing
rows are scored against both the search box value and the clicked label,
the best rows kept and split into good and poor matches.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Collection, Iterable, Sequence

from idloc_search.domain.entities import (
    MatchPartition,
    ScoredCandidate,
    ScoredListing,
    SearchHit,
    WorkListing,
    leading_int,
    trailing_segment,
)

from .string_metrics import edit_distance

logger = logging.getLogger(__name__)

NO_QUERY_DISTANCE = 999999
NON_NUMERIC_TOKEN = 999999999
AUTHOR_QUERY_BONUS = 25
CONTRIBUTOR_BONUS = 8
DEFAULT_GOOD_MATCH_THRESHOLD = 5
DEFAULT_BEST_MATCH_LIMIT = 20

_LEADING_PERIOD = re.compile(r"^\.\s*")


def strip_contributors(label: str, contributors: Iterable[str]) -> str:
    """Remove the first occurrence of each contributor and tidy the remnant."""
    for contributor in contributors:
        label = _LEADING_PERIOD.sub("", label.replace(contributor, "", 1)).strip()
    return label


def is_english(languages: Iterable[str]) -> bool:
    return any(lang in ("English", "mlang:eng") or "eng" in lang.lower() for lang in languages)


def score(hit: SearchHit, query: str | None) -> ScoredCandidate:
    """Annotate one hit with its distance and tie-break flags."""
    label = hit.label
    contributors = hit.more.contributors
    first_contributor = hit.first_contributor
    has_contributor = bool(first_contributor and hit.a_label and first_contributor in hit.a_label)

    stripped = strip_contributors(label, contributors)
    if query:
        original = edit_distance(query.lower(), stripped.lower())
    else:
        original = NO_QUERY_DISTANCE

    distance = original
    if has_contributor and first_contributor and query:
        bonus = AUTHOR_QUERY_BONUS if query.lower() in first_contributor.lower() else CONTRIBUTOR_BONUS
        distance = max(0, distance - bonus)

    return ScoredCandidate(
        hit=hit,
        distance=distance,
        original_distance=original,
        label_without_contributors=stripped,
        has_contributor_in_label=has_contributor,
        is_english=is_english(hit.more.languages),
        token_number=leading_int(hit.token, NON_NUMERIC_TOKEN),
    )


def rank(
    hits: Iterable[SearchHit],
    query: str | None,
    excluded: Collection[str] = frozenset(),
) -> list[ScoredCandidate]:
    """
    Score and order title hits for display.

    Args:
        hits: Raw suggest hits
        query: The user's query; ``None`` or empty sorts everything by the
            remaining tie-breaks
        excluded: URIs known to be bad; such hits are dropped

    Returns:
        Scored candidates, best first
    """
    scored = [score(hit, query) for hit in hits if hit.uri not in excluded]
    scored.sort(key=lambda c: (*c.sort_key(), c.hit.uri))
    return scored


# =============================================================================
# Title-click flow
# =============================================================================


def listing_distance(listing: WorkListing, search_value: str | None, clicked_label: str | None) -> float:
    """Smaller of the distances to the search value and to the clicked label."""
    label = listing.label.lower()
    search_distance = edit_distance(search_value.lower(), label) if search_value else math.inf
    clicked_distance = edit_distance(clicked_label.lower(), label) if clicked_label else math.inf
    return min(search_distance, clicked_distance)


def rank_contributor_works(
    results: Iterable[WorkListing],
    search_value: str | None,
    clicked_label: str | None,
    limit: int = DEFAULT_BEST_MATCH_LIMIT,
) -> list[ScoredListing]:
    """Score listing rows and keep the ``limit`` closest, stable on ties."""
    scored = [ScoredListing(r, listing_distance(r, search_value, clicked_label)) for r in results]
    scored.sort(key=lambda s: s.distance)
    return scored[:limit]


def partition_matches(
    scored: Sequence[ScoredListing],
    threshold: int = DEFAULT_GOOD_MATCH_THRESHOLD,
) -> MatchPartition:
    """
    Split ranked rows into good (distance ≤ threshold) and poor matches.

    Good matches are re-sorted by the numeric id at the end of their URI
    (non-numeric ids count as 0); poor matches keep ranked order.
    """
    good = [s for s in scored if s.distance <= threshold]
    poor = [s for s in scored if s.distance > threshold]
    good.sort(key=lambda s: leading_int(trailing_segment(s.uri), 0))
    logger.debug(f"Partitioned {len(scored)} listings: {len(good)} good, {len(poor)} poor")
    return MatchPartition(good=tuple(good), poor=tuple(poor))
