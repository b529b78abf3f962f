"""
Wikidata SPARQL client - best-effort contributor enrichment.

One query is batched across every LCCN of a result page (``wdt:P244``),
with optional image (P18), birth date (P569) and death date (P570).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from idloc_search.domain.entities import WikidataProfile
from idloc_search.domain.entities.records import LCCN_PATTERN

from .base_client import BaseAPIClient

logger = logging.getLogger(__name__)

WIKIDATA_SPARQL_URL = "https://query.wikidata.org/sparql"

PROFILE_QUERY = """
SELECT ?item ?itemLabel ?lccn ?image ?birthDate ?deathDate ?description WHERE {{
  VALUES ?lccn {{ {values} }}
  ?item wdt:P244 ?lccn .
  OPTIONAL {{ ?item wdt:P18 ?image }}
  OPTIONAL {{ ?item wdt:P569 ?birthDate }}
  OPTIONAL {{ ?item wdt:P570 ?deathDate }}
  SERVICE wikibase:label {{
    bd:serviceParam wikibase:language "[AUTO_LANGUAGE],en" .
    ?item schema:description ?description .
    ?item rdfs:label ?itemLabel .
  }}
}}
"""


def build_profile_query(lccns: Iterable[str]) -> str | None:
    """SPARQL for the given LCCNs; ``None`` when none are well-formed."""
    tokens = [t for t in dict.fromkeys(lccns) if t and LCCN_PATTERN.match(t)]
    if not tokens:
        return None
    return PROFILE_QUERY.format(values=" ".join(f'"{t}"' for t in tokens))


class WikidataClient(BaseAPIClient):
    """
    Async client for the Wikidata Query Service.

    Example:
        async with WikidataClient(user_agent="my-app/1.0") as client:
            profiles = await client.fetch_profiles(["n97108433"])
    """

    _service_name = "Wikidata"

    def __init__(
        self,
        timeout: float = 30.0,
        min_interval: float = 1.0,
        user_agent: str | None = None,
    ) -> None:
        headers = {"Accept": "application/sparql-results+json"}
        if user_agent:
            headers["User-Agent"] = user_agent
        super().__init__(timeout=timeout, min_interval=min_interval, headers=headers)

    async def fetch_profiles(self, lccns: Iterable[str]) -> dict[str, WikidataProfile]:
        """
        Profiles keyed by LCCN.

        LCCNs without a Wikidata item are absent from the result. When an
        item has several values for an optional property the first row wins.
        """
        query = build_profile_query(lccns)
        if query is None:
            return {}

        data: Any = await self._make_request(WIKIDATA_SPARQL_URL, params={"query": query, "format": "json"})
        bindings = (data.get("results") or {}).get("bindings") or [] if isinstance(data, dict) else []

        profiles: dict[str, WikidataProfile] = {}
        for binding in bindings:
            if not isinstance(binding, dict):
                continue
            profile = WikidataProfile.from_binding(binding)
            if profile is not None and profile.lccn not in profiles:
                profiles[profile.lccn] = profile

        logger.debug(f"Wikidata returned {len(profiles)} profiles for {len(bindings)} rows")
        return profiles
