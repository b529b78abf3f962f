"""
Catalog Search Pipeline

Pure components for reconciling id.loc.gov results, plus the service that
drives them.

Key Components:
- string_metrics: edit distance and name initials
- title_extractor: ordered cascade recovering a title from an author/title label
- record_normalizer: URI dedup, title clustering, display ordering
- candidate_ranker: query scoring and tie-break chain
- graph_resolver: typed accessors over BIBFRAME record graphs
- epoch: supersede in-flight flows when a newer one starts

Architecture:
    raw suggest / graph payloads
             │
             ▼
    ┌──────────────────┐
    │  GraphResolver   │  ← titles, agents, classification, statements
    └────────┬─────────┘
             ▼
    ┌──────────────────┐
    │  TitleExtractor  │  ← strip author citations
    └────────┬─────────┘
             ▼
    ┌──────────────────┐
    │ RecordNormalizer │  ← dedup + title groups
    └────────┬─────────┘
             ▼
    ┌──────────────────┐
    │ CandidateRanker  │  ← distance + bonuses + tie-breaks
    └────────┬─────────┘
             ▼
    view models (SearchResults, ContributorWorks, ...)
"""

from __future__ import annotations

from .candidate_ranker import (
    is_english,
    partition_matches,
    rank,
    rank_contributor_works,
    strip_contributors,
)
from .epoch import EpochToken, QueryEpoch
from .record_normalizer import (
    canonical_form,
    dedupe_by_uri,
    group,
    normalize_key,
    ordered_groups,
)
from .service import CatalogSearchService
from .settings import SearchSettings
from .string_metrics import edit_distance, initials
from .title_extractor import STRATEGIES, TitleStrategy, extract_title, extract_with_strategy
from .views import ContributorWorks, SearchResults, TitleMatches, WorkInstances

__all__ = [
    # String metrics
    "edit_distance",
    "initials",
    # Title extraction
    "extract_title",
    "extract_with_strategy",
    "TitleStrategy",
    "STRATEGIES",
    # Normalization
    "normalize_key",
    "dedupe_by_uri",
    "canonical_form",
    "group",
    "ordered_groups",
    # Ranking
    "rank",
    "rank_contributor_works",
    "partition_matches",
    "strip_contributors",
    "is_english",
    # Epoch
    "QueryEpoch",
    "EpochToken",
    # Service
    "CatalogSearchService",
    "SearchSettings",
    "SearchResults",
    "ContributorWorks",
    "TitleMatches",
    "WorkInstances",
]
