"""
External data source clients.

- LOCClient: id.loc.gov suggest, BIBFRAME graphs, relationships, authorities
- WikidataClient: SPARQL enrichment keyed by LCCN
"""

from __future__ import annotations

from .base_client import BaseAPIClient
from .loc import LOCClient
from .wikidata import WikidataClient

__all__ = ["BaseAPIClient", "LOCClient", "WikidataClient"]
