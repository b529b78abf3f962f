"""
Record Graph Entities - JSON-LD documents from id.loc.gov

A fetched linked-data document (``*.bibframe_raw.json``, ``*.bibframe.json``,
``authorities/names/{lccn}.json``, ...) is an array of node objects. Each node
carries an ``@id``, an optional ``@type`` and a set of predicate URIs mapped to
arrays of value objects (``{"@id": ...}`` references or ``{"@value": ...}``
literals).

Key Entities:
    - Node: one addressable node of the graph
    - RecordGraph: ordered, ``@id``-indexed collection of nodes

Blank nodes (``@id`` beginning with ``_:``) are only meaningful inside the
document they came from; a RecordGraph never resolves ids against another
document.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

BLANK_NODE_PREFIX = "_:"

# =============================================================================
# Predicate / type vocabulary
# =============================================================================

BF = "http://id.loc.gov/ontologies/bibframe/"
BFLC = "http://id.loc.gov/ontologies/bflc/"
MADS = "http://www.loc.gov/mads/rdf/v1#"
RDFS_LABEL = "http://www.w3.org/2000/01/rdf-schema#label"
RDF_VALUE = "http://www.w3.org/1999/02/22-rdf-syntax-ns#value"

BF_TITLE = f"{BF}title"
BF_MAIN_TITLE = f"{BF}mainTitle"
BF_SUBTITLE = f"{BF}subtitle"
BF_CONTRIBUTION = f"{BF}contribution"
BF_AGENT = f"{BF}agent"
BF_LANGUAGE = f"{BF}language"
BF_SUBJECT = f"{BF}subject"
BF_PUBLICATION_STATEMENT = f"{BF}publicationStatement"
BF_RESPONSIBILITY_STATEMENT = f"{BF}responsibilityStatement"
BF_EXTENT = f"{BF}extent"
BF_IDENTIFIED_BY = f"{BF}identifiedBy"
BF_TEXT = f"{BF}Text"
BF_ISBN = f"{BF}Isbn"
BFLC_AAP = f"{BFLC}aap"
MADS_AUTHORITATIVE_LABEL = f"{MADS}authoritativeLabel"
MADS_AUTHORITY = f"{MADS}Authority"


@dataclass(frozen=True)
class Node:
    """
    A single node of a record graph.

    Attributes:
        id: The node's ``@id`` (URI or blank node label)
        types: ``@type`` values, always as a tuple
        properties: predicate URI → list of value objects
    """

    id: str
    types: tuple[str, ...] = ()
    properties: Mapping[str, Sequence[Mapping[str, Any]]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Node:
        """Build a node from one raw JSON-LD object."""
        raw_types = data.get("@type")
        if isinstance(raw_types, str):
            types: tuple[str, ...] = (raw_types,)
        elif isinstance(raw_types, list):
            types = tuple(t for t in raw_types if isinstance(t, str))
        else:
            types = ()

        properties: dict[str, list[Mapping[str, Any]]] = {}
        for key, value in data.items():
            if key.startswith("@"):
                continue
            if isinstance(value, list):
                properties[key] = [v for v in value if isinstance(v, Mapping)]
            elif isinstance(value, Mapping):
                properties[key] = [value]

        node_id = data.get("@id")
        return cls(id=node_id if isinstance(node_id, str) else "", types=types, properties=properties)

    @property
    def is_blank(self) -> bool:
        return self.id.startswith(BLANK_NODE_PREFIX)

    def has_type(self, type_uri: str) -> bool:
        return type_uri in self.types

    def get(self, predicate: str) -> Sequence[Mapping[str, Any]]:
        """All value objects at *predicate* (empty when absent)."""
        return self.properties.get(predicate, ())


class RecordGraph:
    """
    Ordered collection of nodes addressable by ``@id``.

    Lookups return the first node carrying an id when the source document
    repeats it.
    """

    def __init__(self, nodes: Sequence[Node] = ()) -> None:
        self._nodes: tuple[Node, ...] = tuple(nodes)
        self._index: dict[str, Node] = {}
        for node in self._nodes:
            if node.id and node.id not in self._index:
                self._index[node.id] = node

    @classmethod
    def from_json(cls, payload: Any) -> RecordGraph:
        """
        Build a graph from a decoded JSON-LD payload.

        Accepts a bare node array or an object with an ``@graph`` array;
        anything else yields an empty graph.
        """
        if isinstance(payload, Mapping):
            payload = payload.get("@graph", [])
        if not isinstance(payload, list):
            return cls()
        return cls([Node.from_dict(item) for item in payload if isinstance(item, Mapping)])

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._nodes

    def get(self, node_id: str) -> Node | None:
        return self._index.get(node_id)

    def first(self) -> Node | None:
        return self._nodes[0] if self._nodes else None

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __bool__(self) -> bool:
        return bool(self._nodes)

    def __repr__(self) -> str:
        return f"RecordGraph(nodes={len(self._nodes)})"
