"""
Graph Resolver - typed accessors over BIBFRAME record graphs

Every raw predicate lookup in the package goes through this module, so
business logic never indexes JSON-LD by long URI strings.

Failure policy:
    A missing node or field yields an empty result (``None``, ``""`` or
    ``[]``) and never raises. Blank nodes are resolved only against the
    graph they were found in.

Effectful lookups (contributor names, subject labels) are not done here;
the service fetches the authority record and hands the graph to
``authoritative_label`` / ``hub_label`` / ``subject_label``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any

from idloc_search.domain.entities import (
    BLANK_NODE_PREFIX,
    Node,
    PublicationStatement,
    RecordGraph,
    trailing_segment,
)
from idloc_search.domain.entities.graph import (
    BF_AGENT,
    BF_CONTRIBUTION,
    BF_EXTENT,
    BF_IDENTIFIED_BY,
    BF_ISBN,
    BF_LANGUAGE,
    BF_MAIN_TITLE,
    BF_PUBLICATION_STATEMENT,
    BF_RESPONSIBILITY_STATEMENT,
    BF_SUBJECT,
    BF_SUBTITLE,
    BF_TEXT,
    BF_TITLE,
    BFLC_AAP,
    MADS_AUTHORITATIVE_LABEL,
    MADS_AUTHORITY,
    RDF_VALUE,
    RDFS_LABEL,
)

logger = logging.getLogger(__name__)

NAMES_AUTHORITY_BASE = "http://id.loc.gov/authorities/names/"

UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)
YEAR_PATTERN = re.compile(r"\b(c?)(1[5-9]\d{2}|20[0-2]\d)\b")

# Type names that say nothing about a work's format
GENERIC_WORK_TYPES = frozenset({"Work", "Monograph", "Text"})


# =============================================================================
# Primitive accessors
# =============================================================================


def find_node(graph: RecordGraph | None, node_id: str | None) -> Node | None:
    """First node whose ``@id`` equals *node_id*."""
    if graph is None or not node_id:
        return None
    return graph.get(node_id)


def values(node: Node | None, predicate: str) -> Sequence[Mapping[str, Any]]:
    return node.get(predicate) if node is not None else ()


def first_value(node: Node | None, predicate: str) -> Mapping[str, Any] | None:
    found = values(node, predicate)
    return found[0] if found else None


def literal(node: Node | None, predicate: str) -> str | None:
    """``@value`` of the first value at *predicate*."""
    value = first_value(node, predicate)
    if value is None:
        return None
    raw = value.get("@value")
    return str(raw) if raw is not None else None


def reference(node: Node | None, predicate: str) -> str | None:
    """``@id`` of the first value at *predicate*."""
    value = first_value(node, predicate)
    if value is None:
        return None
    raw = value.get("@id")
    return raw if isinstance(raw, str) else None


def references(node: Node | None, predicate: str) -> list[str]:
    return [v["@id"] for v in values(node, predicate) if isinstance(v.get("@id"), str)]


def is_blank_node(node_id: str | None) -> bool:
    return bool(node_id) and node_id.startswith(BLANK_NODE_PREFIX)


def is_uuid(identifier: str) -> bool:
    return bool(UUID_PATTERN.match(identifier))


def main_node(graph: RecordGraph | None, uri: str) -> Node | None:
    """The node describing *uri*, else the first node of the document."""
    if graph is None:
        return None
    return graph.get(uri) or graph.first()


# =============================================================================
# Works
# =============================================================================


def main_title(graph: RecordGraph, node: Node | None) -> str | None:
    """``mainTitle`` of the title node referenced by *node*."""
    title_node = find_node(graph, reference(node, BF_TITLE))
    return literal(title_node, BF_MAIN_TITLE)


def work_title(graph: RecordGraph, work: Node | None) -> str:
    """Main title with ``": subtitle"`` appended when present."""
    title_node = find_node(graph, reference(work, BF_TITLE))
    if title_node is None:
        return ""
    title = literal(title_node, BF_MAIN_TITLE) or ""
    subtitle = literal(title_node, BF_SUBTITLE)
    if subtitle:
        title += f": {subtitle}"
    return title


def work_label(label: str, graph: RecordGraph | None, uri: str) -> str:
    """
    Listing label, or a fallback when the listing has none.

    Falls back to the work's authorized access point, then the title
    node's main title, then ``"Work {id}"``.
    """
    if label:
        return label
    work = find_node(graph, uri)
    if work is not None:
        fallback = literal(work, BFLC_AAP) or main_title(graph, work)
        if fallback:
            return fallback
    return f"Work {trailing_segment(uri)}"


def classify_work(graph: RecordGraph | None, uri: str) -> tuple[bool, str | None]:
    """
    Text / non-text classification of a work.

    A work is non-text when it is not typed ``bf:Text`` and carries more
    than one type. Missing and untyped records count as text.

    Returns:
        ``(is_text, work_type)``; ``work_type`` is the first type name that
        is not Work/Monograph/Text, and only set for non-text works.
    """
    work = find_node(graph, uri)
    if work is None or not work.types:
        logger.debug(f"Work {uri}: no typed node, defaulting to text")
        return True, None

    if work.has_type(BF_TEXT) or len(work.types) <= 1:
        return True, None

    work_type = next(
        (trailing_segment(t) for t in work.types if trailing_segment(t) not in GENERIC_WORK_TYPES),
        None,
    )
    logger.debug(f"Work {uri}: non-text, type={work_type}")
    return False, work_type


def contribution_agents(graph: RecordGraph, work: Node | None) -> list[str]:
    """Agent ids of each contribution, in contribution order."""
    agents: list[str] = []
    for contribution_id in references(work, BF_CONTRIBUTION):
        agent = reference(find_node(graph, contribution_id), BF_AGENT)
        if agent:
            agents.append(agent)
    return agents


def first_agent(graph: RecordGraph | None, uri: str) -> str | None:
    """Agent of the work's first contribution."""
    work = find_node(graph, uri)
    contribution_id = reference(work, BF_CONTRIBUTION)
    return reference(find_node(graph, contribution_id), BF_AGENT)


def blank_label(graph: RecordGraph, node_id: str) -> str | None:
    """``rdfs:label`` of a blank node in *graph*."""
    return literal(find_node(graph, node_id), RDFS_LABEL)


def language_codes(work: Node | None) -> list[str]:
    return [trailing_segment(uri) for uri in references(work, BF_LANGUAGE)]


def subject_refs(work: Node | None) -> list[str]:
    return references(work, BF_SUBJECT)


def blank_subject_label(graph: RecordGraph, node_id: str) -> str | None:
    """Authoritative label of a blank subject, else its ``rdfs:label``."""
    node = find_node(graph, node_id)
    return literal(node, MADS_AUTHORITATIVE_LABEL) or literal(node, RDFS_LABEL)


# =============================================================================
# Instances
# =============================================================================


def instance_label(graph: RecordGraph | None, uri: str) -> str:
    """``rdfs:label``, then the main title, then ``"Instance {id}"``."""
    instance = find_node(graph, uri)
    if instance is not None:
        label = literal(instance, RDFS_LABEL)
        if label:
            return label
        if reference(instance, BF_TITLE):
            title = main_title(graph, instance)
            if title:
                return title
    return f"Instance {trailing_segment(uri)}"


def publication_statement(instance: Node | None) -> str:
    return literal(instance, BF_PUBLICATION_STATEMENT) or ""


def responsibility_statement(instance: Node | None) -> str:
    return literal(instance, BF_RESPONSIBILITY_STATEMENT) or ""


def extent(graph: RecordGraph, instance: Node | None) -> str:
    extent_node = find_node(graph, reference(instance, BF_EXTENT))
    return literal(extent_node, RDFS_LABEL) or ""


def isbns(graph: RecordGraph, instance: Node | None) -> list[str]:
    """Values of identifier nodes typed ``bf:Isbn``."""
    found: list[str] = []
    for identifier_id in references(instance, BF_IDENTIFIED_BY):
        node = find_node(graph, identifier_id)
        if node is not None and node.has_type(BF_ISBN):
            value = literal(node, RDF_VALUE)
            if value:
                found.append(value)
    return found


def emphasize_newest_year(statement: str) -> PublicationStatement:
    """
    Find the year tokens of a publication statement and pick the newest.

    Year tokens are four digits in 1500-2029, optionally prefixed with a
    lowercase ``c`` (circa). The token with the largest numeric year is
    emphasized; the earliest one wins a tie.

    Example:
        >>> emphasize_newest_year("London : Faber, 1998, c2001").emphasized
        'c2001'
    """
    if not statement:
        return PublicationStatement()

    matches = list(YEAR_PATTERN.finditer(statement))
    if not matches:
        return PublicationStatement(text=statement)

    newest = matches[0]
    for match in matches[1:]:
        if int(match.group(2)) > int(newest.group(2)):
            newest = match
    return PublicationStatement(
        text=statement,
        years=tuple(m.group(0) for m in matches),
        emphasized=newest.group(0),
    )


# =============================================================================
# Authority records
# =============================================================================


def authoritative_label(graph: RecordGraph | None, agent_uri: str, lccn: str) -> str | None:
    """
    Authoritative label from a name-authority record.

    The agent URI may be a ``/rwo/agents/`` URI while the record describes
    ``/authorities/names/{lccn}``; either id is accepted, provided the node
    is typed ``madsrdf:Authority``.
    """
    if graph is None:
        return None
    accepted = {agent_uri, f"{NAMES_AUTHORITY_BASE}{lccn}"}
    for node in graph:
        if node.id in accepted and node.has_type(MADS_AUTHORITY):
            label = literal(node, MADS_AUTHORITATIVE_LABEL)
            if label:
                return label
    return None


def hub_label(graph: RecordGraph | None, uri: str) -> str | None:
    """Authorized access point of a hub resource."""
    return literal(find_node(graph, uri), BFLC_AAP)


def subject_label(graph: RecordGraph | None, uri: str) -> str | None:
    """Authoritative label of a subject authority."""
    return literal(find_node(graph, uri), MADS_AUTHORITATIVE_LABEL)
