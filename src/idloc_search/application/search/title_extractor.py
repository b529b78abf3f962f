"""
Title Extraction - recover a work title from an author/title label

Relationship listings label works with an authorized access point such as
``"Smith, John, 1920-1990. The Great War"``. The title is recovered with an
ordered cascade of independent strategies, each returning the remaining
title or ``None``. The first strategy that yields a non-empty remainder wins;
when none does, the label is returned unchanged.

Cascade:
    1. exact_prefix       known contributor string at the start of the label
    2. partial_surname    surname of the known contributor, then ". " or "- "
    3. honorific_dates    "Last, First[, Sir...][, 1900-[1990]]. "
    4. dates_only         "Last, First, 1900-[1990][.-]"
    5. initials           "Last, J. K. (Name) (paren). Capital..."
    6. last_period        "Last, anything-without-period. "
    7. secondary_pass     year-range cut, then second-comma/whitespace cut

Strategies 3-7 only apply to labels that look like an author citation
(``"word, word"``).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

TitleStrategyFunc = Callable[[str, str | None], str | None]

# =============================================================================
# Patterns
# =============================================================================

SEPARATOR_RUN = re.compile(r"^[\s.,:\-–—]+")
AUTHOR_CITATION = re.compile(r"^[^,]+,\s*[^,.]+")
SECOND_AUTHOR_CITATION = re.compile(r"^[^,]+,\s*[^,]+")

HONORIFICS = ("Sir", "Dr", "Prof", "Mr", "Mrs", "Ms", "Miss", "Lord", "Lady", "Baron", "Count", "Duke")

HONORIFIC_DATES = re.compile(
    r"^[^,]+,\s*[^,]+"
    rf"(?:,\s*(?:{'|'.join(HONORIFICS)})[^,]*)?"
    r"(?:,\s*\d{4}[-–](?:\d{4})?)?"
    r"\s*\.\s+"
)
DATES_ONLY = re.compile(r"^[^,]+,\s*[^,]+,\s*\d{4}[-–](?:\d{4})?\s*[-.]?\s*")
NAME_WITH_INITIALS = re.compile(r"^[^,]+,\s*(?:[A-Z]\.?\s*)+(?:[A-Za-z]+\s*)?(?:\([^)]+\))?\s*\.\s+([A-Z])")
LAST_AUTHOR_PERIOD = re.compile(r"^[^,]+,\s*[^.]+\.\s+")
YEAR_RANGE = re.compile(r"\d{4}[-–]\d{0,4}\s+")
NEXT_DELIMITER = re.compile(r"[\s,]")


def looks_like_author_citation(text: str) -> bool:
    return bool(AUTHOR_CITATION.match(text))


def _non_empty(text: str) -> str | None:
    text = text.strip()
    return text or None


# =============================================================================
# Strategies
# =============================================================================


def exact_prefix(raw_label: str, contributor: str | None) -> str | None:
    """Strip the known contributor string and any separators after it."""
    if not contributor or not raw_label.startswith(contributor):
        return None
    remainder = SEPARATOR_RUN.sub("", raw_label[len(contributor) :])
    return _non_empty(remainder)


def partial_surname(raw_label: str, contributor: str | None) -> str | None:
    """
    Strip ``surname ... ". "`` or ``surname ... "- "`` from the label.

    Only tried when the full contributor string is not a prefix of the label.
    The two patterns are kept separate: the first needs a period, the second
    a hyphen or en dash.
    """
    if not contributor or raw_label.startswith(contributor):
        return None
    surname = contributor.split(",")[0].strip()
    if not surname or not raw_label.startswith(surname):
        return None

    escaped = re.escape(surname)
    patterns = (
        re.compile(rf"^{escaped}[^.]*\.\s+"),
        re.compile(rf"^{escaped}[^.]*[-–]\s+"),
    )
    for pattern in patterns:
        match = pattern.match(raw_label)
        if match:
            return _non_empty(raw_label[match.end() :])
    return None


def honorific_dates(raw_label: str, contributor: str | None) -> str | None:
    """Strip ``"Last, First[, honorific][, dates]. "``."""
    if not looks_like_author_citation(raw_label):
        return None
    match = HONORIFIC_DATES.match(raw_label)
    return _non_empty(raw_label[match.end() :]) if match else None


def dates_only(raw_label: str, contributor: str | None) -> str | None:
    """Strip ``"Last, First, 1900-[1990]"`` plus a trailing period or dash."""
    if not looks_like_author_citation(raw_label):
        return None
    match = DATES_ONLY.match(raw_label)
    return _non_empty(raw_label[match.end() :]) if match else None


def initials(raw_label: str, contributor: str | None) -> str | None:
    """Strip ``"Last, J. K. "`` style names up to the title's capital letter."""
    if not looks_like_author_citation(raw_label):
        return None
    match = NAME_WITH_INITIALS.match(raw_label)
    return _non_empty(raw_label[match.start(1) :]) if match else None


def last_period(raw_label: str, contributor: str | None) -> str | None:
    """Strip everything up to the first ``". "`` after the surname comma."""
    if not looks_like_author_citation(raw_label):
        return None
    match = LAST_AUTHOR_PERIOD.match(raw_label)
    return _non_empty(raw_label[match.end() :]) if match else None


def secondary_pass(raw_label: str, contributor: str | None) -> str | None:
    """
    Last-resort cuts for citation-shaped labels.

    First drop everything through a year range (``"1928-1981 "`` or
    ``"1928- "``). If the result still reads like a citation, take the text
    after the second word following the first comma, unless that text is
    itself another ``"Last, First"`` citation.
    """
    if not looks_like_author_citation(raw_label):
        return None

    title = raw_label
    year = YEAR_RANGE.search(title)
    if year:
        title = title[year.end() :]

    if title and not looks_like_author_citation(title):
        return _non_empty(title)

    after_comma = raw_label[raw_label.index(",") + 1 :].lstrip()
    delimiter = NEXT_DELIMITER.search(after_comma)
    if delimiter:
        potential = after_comma[delimiter.end() :].strip()
        if potential and not SECOND_AUTHOR_CITATION.match(potential):
            return potential

    return _non_empty(title) if year else None


@dataclass(frozen=True)
class TitleStrategy:
    """A named step of the extraction cascade."""

    name: str
    apply: TitleStrategyFunc


STRATEGIES: tuple[TitleStrategy, ...] = (
    TitleStrategy("exact_prefix", exact_prefix),
    TitleStrategy("partial_surname", partial_surname),
    TitleStrategy("honorific_dates", honorific_dates),
    TitleStrategy("dates_only", dates_only),
    TitleStrategy("initials", initials),
    TitleStrategy("last_period", last_period),
    TitleStrategy("secondary_pass", secondary_pass),
)


# =============================================================================
# Public API
# =============================================================================


def extract_with_strategy(
    raw_label: str,
    known_contributor: str | None = None,
    strategies: tuple[TitleStrategy, ...] = STRATEGIES,
) -> tuple[str, str | None]:
    """
    Run the cascade and report which strategy produced the title.

    Returns:
        ``(title, strategy_name)``; ``strategy_name`` is ``None`` when no
        strategy matched and the label came back unchanged.
    """
    if not raw_label:
        return raw_label, None

    for strategy in strategies:
        result = strategy.apply(raw_label, known_contributor)
        if result:
            logger.debug(f"Title extraction [{strategy.name}]: {raw_label!r} -> {result!r}")
            return result, strategy.name

    logger.debug(f"Title extraction: no strategy matched {raw_label!r}")
    return raw_label, None


def extract_title(raw_label: str, known_contributor: str | None = None) -> str:
    """
    Recover the work title from an author/title label.

    Never raises; the worst case is the label unchanged.

    Example:
        >>> extract_title("Smith, John. The Great War", "Smith, John")
        'The Great War'
    """
    title, _ = extract_with_strategy(raw_label, known_contributor)
    return title
