"""
Search Record Entities - hits, enriched works and their groupings

Key Entities:
    - SearchHit: one raw row from a suggest2 endpoint
    - WorkListing: one ``{uri, label}`` row of a relationship listing
    - EnrichedWork: a listing plus classification and extracted title
    - TitleGroup / GroupedWorks: works clustered under a canonical title
    - ScoredCandidate / ScoredListing: transient ranking annotations
    - ContributorCandidate: a name hit with its resolved display name
    - WikidataProfile: best-effort enrichment for a contributor

Architecture:
    All entities are frozen dataclasses. Enrichment produces new instances
    via ``dataclasses.replace`` rather than mutating a hit in place.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .graph import RecordGraph

LCCN_PATTERN = re.compile(r"^n\d+$")

# Placeholder the source API emits for missing metadata values
_UNDEFINED = "undefined"


def trailing_segment(uri: str) -> str:
    """Last path segment of a URI (``.../works/123`` → ``123``)."""
    return uri.rstrip("/").rsplit("/", 1)[-1] if uri else ""


_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def leading_int(text: str | None, default: int) -> int:
    """Integer prefix of *text* (``"123abc"`` → 123), else *default*."""
    if not text:
        return default
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else default


def _string_list(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return ()
    return tuple(str(v) for v in value if v is not None and str(v) and str(v) != _UNDEFINED)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text or None


@dataclass(frozen=True)
class HitMetadata:
    """Nested ``more`` block of a suggest2 hit."""

    contributors: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()
    birthdates: tuple[str, ...] = ()
    occupations: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> HitMetadata:
        if not data:
            return cls()
        return cls(
            contributors=_string_list(data.get("contributors")),
            languages=_string_list(data.get("languages")),
            birthdates=_string_list(data.get("birthdates")),
            occupations=_string_list(data.get("occupations")),
        )


@dataclass(frozen=True)
class SearchHit:
    """
    One result row of a suggest2 search.

    ``uri`` identifies the bibliographic entity; two hits with the same
    ``uri`` are the same entity.
    """

    uri: str
    token: str | None = None
    suggest_label: str | None = None
    a_label: str | None = None
    v_label: str | None = None
    contributions: int | None = None
    more: HitMetadata = field(default_factory=HitMetadata)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SearchHit:
        contributions = data.get("contributions")
        try:
            contributions = int(contributions) if contributions is not None else None
        except (TypeError, ValueError):
            contributions = None
        more = data.get("more")
        return cls(
            uri=str(data.get("uri") or ""),
            token=_optional_str(data.get("token")),
            suggest_label=_optional_str(data.get("suggestLabel")),
            a_label=_optional_str(data.get("aLabel")),
            v_label=_optional_str(data.get("vLabel")),
            contributions=contributions,
            more=HitMetadata.from_dict(more if isinstance(more, Mapping) else None),
        )

    @property
    def label(self) -> str:
        """Preferred label: ``aLabel``, then ``suggestLabel``."""
        return self.a_label or self.suggest_label or ""

    @property
    def first_contributor(self) -> str | None:
        return self.more.contributors[0] if self.more.contributors else None

    @property
    def is_lccn(self) -> bool:
        return bool(self.token and LCCN_PATTERN.match(self.token))


@dataclass(frozen=True)
class WorkListing:
    """One ``{uri, label}`` row of the contributor relationship listing."""

    uri: str
    label: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WorkListing:
        return cls(uri=str(data.get("uri") or ""), label=str(data.get("label") or ""))

    @property
    def work_id(self) -> str:
        return trailing_segment(self.uri)


@dataclass(frozen=True)
class EnrichedWork:
    """
    A work listing after the enrichment pass.

    Exactly one of ``is_text`` / ``is_non_text`` is true. ``work_type`` is
    only set for non-text works.
    """

    uri: str
    label: str
    display_title: str
    normalized_title: str
    is_text: bool = True
    work_type: str | None = None
    bibframe_data: RecordGraph | None = None

    @property
    def is_non_text(self) -> bool:
        return not self.is_text

    @property
    def work_id(self) -> str:
        return trailing_segment(self.uri)


@dataclass(frozen=True)
class TitleGroup:
    """
    Works sharing one normalized title within a partition.

    Attributes:
        key: The shared normalized title
        canonical_display_title: Most frequent literal title form
        members: Works in first-seen order
        is_text: Partition the group belongs to
    """

    key: str
    canonical_display_title: str
    members: tuple[EnrichedWork, ...]
    is_text: bool = True

    @property
    def primary(self) -> EnrichedWork:
        return self.members[0]

    @property
    def count(self) -> int:
        return len(self.members)

    @property
    def uris(self) -> tuple[str, ...]:
        return tuple(m.uri for m in self.members)

    @property
    def work_type(self) -> str | None:
        return self.primary.work_type


@dataclass(frozen=True)
class GroupedWorks:
    """Title groups split into their display sections."""

    multiple_instances: tuple[TitleGroup, ...] = ()
    single_instance: tuple[TitleGroup, ...] = ()
    non_text: tuple[TitleGroup, ...] = ()

    def ordered(self) -> tuple[TitleGroup, ...]:
        """All groups in display order."""
        return self.multiple_instances + self.single_instance + self.non_text

    def primary_works(self) -> tuple[EnrichedWork, ...]:
        return tuple(group.primary for group in self.ordered())

    @property
    def is_empty(self) -> bool:
        return not (self.multiple_instances or self.single_instance or self.non_text)


@dataclass(frozen=True)
class ScoredCandidate:
    """A title hit annotated for ranking."""

    hit: SearchHit
    distance: int
    original_distance: int
    label_without_contributors: str
    has_contributor_in_label: bool
    is_english: bool
    token_number: int

    def sort_key(self) -> tuple[int, int, int, int]:
        """Ascending key: distance, contributor-in-label, English, token."""
        return (
            self.distance,
            0 if self.has_contributor_in_label else 1,
            0 if self.is_english else 1,
            self.token_number,
        )


@dataclass(frozen=True)
class ScoredListing:
    """A relationship-listing row scored against a query and clicked label."""

    listing: WorkListing
    distance: float

    @property
    def uri(self) -> str:
        return self.listing.uri

    @property
    def label(self) -> str:
        return self.listing.label


@dataclass(frozen=True)
class MatchPartition:
    """Good matches (close distance) and poor matches for one selected work."""

    good: tuple[ScoredListing, ...] = ()
    poor: tuple[ScoredListing, ...] = ()

    def all(self) -> tuple[ScoredListing, ...]:
        return self.good + self.poor


@dataclass(frozen=True)
class ContributorCandidate:
    """A personal-name hit with its display name resolved."""

    hit: SearchHit
    display_name: str

    @property
    def token(self) -> str | None:
        return self.hit.token

    @property
    def lccn(self) -> str | None:
        return self.hit.token if self.hit.is_lccn else None

    @property
    def contributions(self) -> int:
        return self.hit.contributions or 0


@dataclass(frozen=True)
class WikidataProfile:
    """Optional enrichment for a contributor, keyed by LCCN."""

    lccn: str
    item: str | None = None
    label: str | None = None
    description: str | None = None
    image: str | None = None
    birth_date: str | None = None
    death_date: str | None = None

    @classmethod
    def from_binding(cls, binding: Mapping[str, Any]) -> WikidataProfile | None:
        """Build a profile from one SPARQL JSON binding row."""

        def value(name: str) -> str | None:
            cell = binding.get(name)
            if isinstance(cell, Mapping):
                raw = cell.get("value")
                if raw and raw != _UNDEFINED:
                    return str(raw)
            return None

        lccn = value("lccn")
        if not lccn:
            return None
        return cls(
            lccn=lccn,
            item=value("item"),
            label=value("itemLabel"),
            description=value("description"),
            image=value("image"),
            birth_date=value("birthDate"),
            death_date=value("deathDate"),
        )


def hits_from_payload(payload: Any) -> list[SearchHit]:
    """Decode the ``hits`` array of a suggest2 response."""
    if not isinstance(payload, Mapping):
        return []
    hits: Sequence[Any] = payload.get("hits") or []
    return [SearchHit.from_dict(h) for h in hits if isinstance(h, Mapping)]
