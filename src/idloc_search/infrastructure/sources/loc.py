"""
Library of Congress Linked Data Service client (id.loc.gov).

Endpoints:
    suggest2          typeahead search over names, works and instances
    bibframe graphs   ``{works|instances}/{id}.bibframe_raw.json`` / ``.bibframe.json``
    relationships     paginated ``contributorto`` listing for a name authority
    authorities       name / subject authority records, hub resources

All graph endpoints return JSON-LD node arrays, decoded into RecordGraph.
"""

from __future__ import annotations

import logging
from typing import Any

from idloc_search.domain.entities import RecordGraph, SearchHit, WorkListing, hits_from_payload

from .base_client import BaseAPIClient

logger = logging.getLogger(__name__)

LOC_BASE_URL = "https://id.loc.gov"
NAMES_AUTHORITY_URI = "http://id.loc.gov/authorities/names/"

# Graph flavours
RAW = "bibframe_raw"
PROCESSED = "bibframe"


class LOCClient(BaseAPIClient):
    """
    Async client for id.loc.gov.

    Example:
        async with LOCClient() as client:
            names = await client.suggest_names("rowling")
            graph = await client.fetch_work_graph("12345")
    """

    _service_name = "id.loc.gov"

    def __init__(
        self,
        timeout: float = 30.0,
        min_interval: float = 0.0,
        user_agent: str | None = None,
        base_url: str = LOC_BASE_URL,
    ) -> None:
        headers = {"Accept": "application/json"}
        if user_agent:
            headers["User-Agent"] = user_agent
        super().__init__(base_url=base_url, timeout=timeout, min_interval=min_interval, headers=headers)

    # =========================================================================
    # Suggest
    # =========================================================================

    async def suggest_names(self, query: str, count: int = 20) -> list[SearchHit]:
        """Personal-name authorities matching *query* (prefix search)."""
        data = await self._make_request(
            "/authorities/names/suggest2/",
            params={
                "q": f"{query}*",
                "searchtype": "keyword",
                "rdftype": "PersonalName",
                "usage": "true",
                "count": count,
            },
        )
        return hits_from_payload(data)

    async def suggest_works(self, query: str, count: int = 100) -> list[SearchHit]:
        """Monograph/Text works matching *query*."""
        data = await self._make_request(
            "/resources/works/suggest2/",
            params=[
                ("q", query),
                ("searchtype", "keyword"),
                ("rdftype", "Monograph"),
                ("rdftype", "Text"),
                ("count", count),
            ],
        )
        return hits_from_payload(data)

    async def suggest_instances(self, query: str) -> list[SearchHit]:
        """Instances matching a numeric identifier query."""
        data = await self._make_request(
            "/resources/instances/suggest2/",
            params={"q": query, "searchtype": "keyword"},
        )
        return hits_from_payload(data)

    # =========================================================================
    # BIBFRAME graphs
    # =========================================================================

    async def fetch_work_graph(self, work_id: str, *, processed: bool = False) -> RecordGraph:
        flavour = PROCESSED if processed else RAW
        return RecordGraph.from_json(await self._make_request(f"/resources/works/{work_id}.{flavour}.json"))

    async def fetch_instance_graph(self, instance_id: str, *, processed: bool = False) -> RecordGraph:
        flavour = PROCESSED if processed else RAW
        return RecordGraph.from_json(await self._make_request(f"/resources/instances/{instance_id}.{flavour}.json"))

    # =========================================================================
    # Relationships
    # =========================================================================

    async def fetch_relationship_page(self, lccn: str, page: int) -> tuple[int, list[WorkListing]]:
        """
        One page of works a name authority contributed to.

        Returns:
            ``(total_pages, rows)``; ``total_pages`` is the highest page
            index reported by the service.
        """
        data: Any = await self._make_request(
            "/resources/works/relationships/contributorto/",
            params={"label": f"{NAMES_AUTHORITY_URI}{lccn}", "page": page},
        )
        if not isinstance(data, dict):
            return 0, []
        summary = data.get("summary") or {}
        try:
            total_pages = int(summary.get("totalPages") or 0)
        except (TypeError, ValueError):
            total_pages = 0
        rows = [WorkListing.from_dict(r) for r in data.get("results") or [] if isinstance(r, dict)]
        return total_pages, rows

    # =========================================================================
    # Authorities
    # =========================================================================

    async def fetch_name_authority(self, lccn: str) -> RecordGraph:
        return RecordGraph.from_json(await self._make_request(f"/authorities/names/{lccn}.json"))

    async def fetch_subject(self, subject_id: str) -> RecordGraph:
        return RecordGraph.from_json(await self._make_request(f"/authorities/subjects/{subject_id}.json"))

    async def fetch_hub(self, hub_id: str) -> RecordGraph:
        return RecordGraph.from_json(await self._make_request(f"/resources/hubs/{hub_id}.json"))
