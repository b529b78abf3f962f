"""
id.loc.gov Search - search and disambiguation over the Library of Congress
Linked Data Service.

Usage:
    from idloc_search import CatalogSearchService, LOCClient

    async with LOCClient() as client:
        service = CatalogSearchService(client)
        results = await service.search("rowling")
        for candidate in results.titles:
            print(candidate.hit.label, candidate.distance)

Features:
    - Contributor and title search with edit-distance ranking
    - Title recovery from "Lastname, Firstname, dates. Title" labels
    - Work grouping under canonical titles, text vs non-text
    - Instance disambiguation and detail summaries
    - Best-effort Wikidata enrichment
"""

from .application.search import (
    CatalogSearchService,
    QueryEpoch,
    SearchSettings,
    edit_distance,
    extract_title,
    normalize_key,
    rank,
)
from .infrastructure.sources import LOCClient, WikidataClient

__version__ = "0.1.0"

__all__ = [
    # Service
    "CatalogSearchService",
    "SearchSettings",
    "QueryEpoch",
    # Clients
    "LOCClient",
    "WikidataClient",
    # Pure components
    "edit_distance",
    "extract_title",
    "normalize_key",
    "rank",
]
