"""
Navigation State - where a "back" action should return to

The presentation layer receives a NavigationState with every view and hands
it back when the user navigates away; no module-level state is kept.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class NavigationKind(Enum):
    """The view a back action returns to."""

    SEARCH = "search"
    CONTRIBUTOR_WORKS = "contributor-works"
    ALL_INSTANCES = "all-instances"


@dataclass(frozen=True)
class NavigationState:
    """
    Immutable description of the view that produced a result.

    Attributes:
        kind: Which flow produced the view
        query: The search box value at the time
        lccn: Selected contributor (contributor-works and deeper)
        contributor_name: Display name of that contributor
        work_uris: URIs of the expanded work group (all-instances)
        title: Canonical title of the expanded group (all-instances)
    """

    kind: NavigationKind = NavigationKind.SEARCH
    query: str = ""
    lccn: str | None = None
    contributor_name: str | None = None
    work_uris: tuple[str, ...] = ()
    title: str | None = None

    @classmethod
    def search(cls, query: str) -> NavigationState:
        return cls(kind=NavigationKind.SEARCH, query=query)

    def to_contributor(self, lccn: str, contributor_name: str) -> NavigationState:
        return NavigationState(
            kind=NavigationKind.CONTRIBUTOR_WORKS,
            query=self.query,
            lccn=lccn,
            contributor_name=contributor_name,
        )

    def to_instances(self, work_uris: tuple[str, ...], title: str) -> NavigationState:
        return NavigationState(
            kind=NavigationKind.ALL_INSTANCES,
            query=self.query,
            lccn=self.lccn,
            contributor_name=self.contributor_name,
            work_uris=work_uris,
            title=title,
        )

    def back(self) -> NavigationState:
        """The state one level up."""
        if self.kind is NavigationKind.ALL_INSTANCES and self.lccn:
            return NavigationState(
                kind=NavigationKind.CONTRIBUTOR_WORKS,
                query=self.query,
                lccn=self.lccn,
                contributor_name=self.contributor_name,
            )
        return NavigationState.search(self.query)
