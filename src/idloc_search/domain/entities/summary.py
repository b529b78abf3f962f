"""
Detail View Entities - the denormalized view of a work and its instances

Key Entities:
    - PublicationStatement: statement text with its newest year emphasized
    - ContributorRef / SubjectRef: display label plus optional link
    - Summary: one work+instance pair ready for display
    - InstanceListing: one instance row of a collapsed work group
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .records import leading_int, trailing_segment

DEFAULT_SUBJECT_DISPLAY_LIMIT = 7
EDITOR_URL_TEMPLATE = (
    "https://bibframe.org/marva/?action=load"
    "&url=https://id.loc.gov/resources/instances/{instance_id}.cbd.rdf"
    "&profile=lc:RT:bf2:Monograph:Instance"
)


@dataclass(frozen=True)
class PublicationStatement:
    """
    A publication statement and the year that should be emphasized.

    ``years`` lists every matched year token in order of appearance
    (``"c1998"`` keeps its circa prefix). ``emphasized`` is the token with the
    largest numeric year; the first such token wins a tie.
    """

    text: str = ""
    years: tuple[str, ...] = ()
    emphasized: str | None = None

    def segments(self) -> list[tuple[str, bool]]:
        """
        Split the text into ``(fragment, is_emphasized)`` pairs.

        Every whole-word occurrence of the emphasized token is flagged so a
        renderer can bold it without re-parsing the statement.
        """
        if not self.text:
            return []
        if not self.emphasized:
            return [(self.text, False)]

        pattern = re.compile(rf"\b{re.escape(self.emphasized)}\b")
        segments: list[tuple[str, bool]] = []
        cursor = 0
        for match in pattern.finditer(self.text):
            if match.start() > cursor:
                segments.append((self.text[cursor : match.start()], False))
            segments.append((match.group(0), True))
            cursor = match.end()
        if cursor < len(self.text):
            segments.append((self.text[cursor:], False))
        return segments

    def __bool__(self) -> bool:
        return bool(self.text)


@dataclass(frozen=True)
class ContributorRef:
    """A contributor name with its authority URI (``None`` for blank agents)."""

    name: str
    uri: str | None = None


@dataclass(frozen=True)
class SubjectRef:
    """A subject label with its URI (``None`` for blank subjects)."""

    label: str
    uri: str | None = None


@dataclass(frozen=True)
class Summary:
    """Denormalized detail view for one work+instance pair. Built per view."""

    work_uri: str
    instance_uri: str
    title: str = ""
    contributors: tuple[ContributorRef, ...] = ()
    publication_statement: str = ""
    extent: str = ""
    isbn: tuple[str, ...] = ()
    language: tuple[str, ...] = ()
    subjects: tuple[SubjectRef, ...] = ()
    subject_display_limit: int = DEFAULT_SUBJECT_DISPLAY_LIMIT

    @property
    def display_subjects(self) -> tuple[SubjectRef, ...]:
        return self.subjects[: self.subject_display_limit]

    @property
    def instance_id(self) -> str:
        return trailing_segment(self.instance_uri)

    @property
    def editor_url(self) -> str:
        """Link that opens the instance in the Marva cataloging editor."""
        return EDITOR_URL_TEMPLATE.format(instance_id=self.instance_id)


@dataclass(frozen=True)
class InstanceListing:
    """One instance shown when a collapsed work group is expanded."""

    uri: str
    label: str
    work_id: str
    publication: PublicationStatement = field(default_factory=PublicationStatement)
    responsibility_statement: str = ""

    @property
    def numeric_id(self) -> int:
        return leading_int(trailing_segment(self.uri), 0)
