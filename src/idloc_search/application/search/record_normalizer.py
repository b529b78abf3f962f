"""
Record Normalizer - deduplication and title clustering

Architecture:
    Input (listings / enriched works, possibly with duplicate URIs)
        → dedupe_by_uri (first occurrence kept, order preserved)
        → group (partition text / non-text, then cluster by normalize_key)
        → ordered_groups (display sections, locale-aware order)

The canonical display title of a cluster is its most frequent literal
title; on equal counts the form seen first wins.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from typing import Any, TypeVar

from idloc_search.domain.entities import EnrichedWork, GroupedWorks, TitleGroup

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PUNCTUATION = re.compile(r"""[.,;:!?\-–—'"‘’“”\[\](){}]""")
_WHITESPACE = re.compile(r"\s+")


def normalize_key(title: str) -> str:
    """
    Grouping key: lowercase, punctuation removed, whitespace collapsed.

    Example:
        >>> normalize_key("The Cat, in the Hat!")
        'the cat in the hat'
    """
    if not title:
        return ""
    key = _PUNCTUATION.sub("", title.lower())
    return _WHITESPACE.sub(" ", key).strip()


def _uri_of(record: Any) -> str | None:
    if isinstance(record, dict):
        return record.get("uri")
    return getattr(record, "uri", None)


def dedupe_by_uri(records: Iterable[T], key: Callable[[T], str | None] = _uri_of) -> list[T]:
    """
    Drop records whose URI was already seen.

    Works on entities with a ``uri`` attribute and on plain dicts. Records
    without a URI are kept as-is.
    """
    seen: set[str] = set()
    unique: list[T] = []
    for record in records:
        uri = key(record)
        if uri:
            if uri in seen:
                logger.debug(f"Skipping duplicate URI: {uri}")
                continue
            seen.add(uri)
        unique.append(record)
    return unique


def canonical_form(titles: Sequence[str]) -> str:
    """Most frequent literal title; first-seen wins a tie."""
    if not titles:
        return ""
    counts = Counter(titles)
    best = titles[0]
    for title in counts:  # Counter preserves first-insertion order
        if counts[title] > counts[best]:
            best = title
    return best


def group(works: Iterable[EnrichedWork]) -> dict[tuple[bool, str], TitleGroup]:
    """
    Cluster works by partition and normalized display title.

    Returns:
        Mapping of ``(is_text, normalized_key)`` to TitleGroup, in
        first-seen order. Duplicate URIs are dropped before counting.
    """
    buckets: dict[tuple[bool, str], list[EnrichedWork]] = {}
    for work in dedupe_by_uri(works):
        key = normalize_key(work.display_title)
        buckets.setdefault((work.is_text, key), []).append(work)

    groups: dict[tuple[bool, str], TitleGroup] = {}
    for (is_text, key), members in buckets.items():
        groups[(is_text, key)] = TitleGroup(
            key=key,
            canonical_display_title=canonical_form([m.display_title for m in members]),
            members=tuple(members),
            is_text=is_text,
        )
    return groups


def fold_accents(text: str) -> str:
    """Strip combining marks so accented letters collate with their base letter."""
    return "".join(c for c in unicodedata.normalize("NFD", text) if unicodedata.category(c) != "Mn")


def display_sort_key(title: str) -> tuple[str, str, str]:
    """
    Collation key: base letters first, then accents and case, then the literal.

    Example:
        >>> sorted(["Zola", "Émile", "emile"], key=display_sort_key)
        ['emile', 'Émile', 'Zola']
    """
    folded = title.casefold()
    return (fold_accents(folded), folded, title)


def ordered_groups(works: Iterable[EnrichedWork]) -> GroupedWorks:
    """
    Group works into their display sections.

    Text groups with more than one member come first, then single-member
    text groups, then every non-text group. Each section is sorted by
    canonical display title.
    """
    groups = group(works)

    def by_title(items: Iterable[TitleGroup]) -> tuple[TitleGroup, ...]:
        return tuple(sorted(items, key=lambda g: display_sort_key(g.canonical_display_title)))

    text = [g for g in groups.values() if g.is_text]
    non_text = [g for g in groups.values() if not g.is_text]

    grouped = GroupedWorks(
        multiple_instances=by_title(g for g in text if g.count > 1),
        single_instance=by_title(g for g in text if g.count == 1),
        non_text=by_title(non_text),
    )
    logger.debug(
        f"Grouped {sum(g.count for g in groups.values())} works: "
        f"{len(grouped.multiple_instances)} multi, {len(grouped.single_instance)} single, "
        f"{len(grouped.non_text)} non-text"
    )
    return grouped
