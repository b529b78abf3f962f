"""
View models returned by CatalogSearchService.

Each view carries the NavigationState the presentation layer hands back
for a "back" action.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from idloc_search.domain.entities import (
    ContributorCandidate,
    GroupedWorks,
    InstanceListing,
    MatchPartition,
    NavigationState,
    ScoredCandidate,
    SearchHit,
)


@dataclass(frozen=True)
class SearchResults:
    """Contributors and titles for a text query, or instances for a numeric one."""

    query: str
    contributors: tuple[ContributorCandidate, ...] = ()
    titles: tuple[ScoredCandidate, ...] = ()
    instances: tuple[SearchHit, ...] = ()
    navigation: NavigationState = field(default_factory=NavigationState)

    @property
    def is_numeric(self) -> bool:
        return self.query.isdigit()

    @property
    def is_empty(self) -> bool:
        return not (self.contributors or self.titles or self.instances)


@dataclass(frozen=True)
class ContributorWorks:
    """Works of one contributor, grouped under canonical titles."""

    lccn: str
    contributor_name: str
    groups: GroupedWorks
    total_works: int = 0
    navigation: NavigationState = field(default_factory=NavigationState)


@dataclass(frozen=True)
class TitleMatches:
    """
    Works by the clicked title's first contributor, closest first.

    ``details`` maps a listed work URI to its instance listing (publication
    and responsibility statements).
    """

    work_uri: str
    lccn: str
    partition: MatchPartition
    details: dict[str, InstanceListing] = field(default_factory=dict)
    navigation: NavigationState = field(default_factory=NavigationState)


@dataclass(frozen=True)
class WorkInstances:
    """Instances of a collapsed title group, by ascending numeric id."""

    title: str
    instances: tuple[InstanceListing, ...] = ()
    navigation: NavigationState = field(default_factory=NavigationState)
