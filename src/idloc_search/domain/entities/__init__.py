"""
Domain Entities

Core value objects for catalog search and disambiguation.
"""

from __future__ import annotations

from .graph import BLANK_NODE_PREFIX, Node, RecordGraph
from .navigation import NavigationKind, NavigationState
from .records import (
    ContributorCandidate,
    EnrichedWork,
    GroupedWorks,
    HitMetadata,
    MatchPartition,
    ScoredCandidate,
    ScoredListing,
    SearchHit,
    TitleGroup,
    WikidataProfile,
    WorkListing,
    hits_from_payload,
    leading_int,
    trailing_segment,
)
from .summary import (
    ContributorRef,
    InstanceListing,
    PublicationStatement,
    SubjectRef,
    Summary,
)

__all__ = [
    # Graph entities
    "Node",
    "RecordGraph",
    "BLANK_NODE_PREFIX",
    # Search records
    "SearchHit",
    "HitMetadata",
    "WorkListing",
    "EnrichedWork",
    "TitleGroup",
    "GroupedWorks",
    "ScoredCandidate",
    "ScoredListing",
    "MatchPartition",
    "ContributorCandidate",
    "WikidataProfile",
    "hits_from_payload",
    "leading_int",
    "trailing_segment",
    # Detail view
    "Summary",
    "ContributorRef",
    "SubjectRef",
    "PublicationStatement",
    "InstanceListing",
    # Navigation
    "NavigationKind",
    "NavigationState",
]
