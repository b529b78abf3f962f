"""
Application DI Container (dependency-injector).

Centralizes client and service creation for the MCP server.

Usage::

    from idloc_search.container import ApplicationContainer

    container = ApplicationContainer()
    container.config.from_dict({
        "timeout": 30.0,
        "contributor_page_cap": 49,
        "title_page_cap": 29,
    })

    service = container.search_service()

    # In tests, override any provider:
    container.loc_client.override(providers.Object(mock_client))
"""

from __future__ import annotations

import logging
from typing import Any

from dependency_injector import containers, providers

logger = logging.getLogger(__name__)


def _create_settings(config: dict[str, Any] | None) -> object:
    from idloc_search.application.search.settings import SearchSettings

    return SearchSettings.from_dict(config)


def _create_loc_client(settings: Any) -> object:
    """Lazy factory for LOCClient (avoids top-level import)."""
    from idloc_search.infrastructure.sources.loc import LOCClient

    return LOCClient(timeout=settings.timeout, min_interval=settings.min_interval, user_agent=settings.user_agent)


def _create_wikidata_client(settings: Any) -> object | None:
    """Lazy factory for WikidataClient; ``None`` when enrichment is disabled."""
    if not settings.wikidata_enabled:
        logger.info("Wikidata enrichment disabled")
        return None
    from idloc_search.infrastructure.sources.wikidata import WikidataClient

    return WikidataClient(timeout=settings.timeout, user_agent=settings.user_agent)


def _create_search_service(loc_client: Any, wikidata_client: Any, settings: Any) -> object:
    from idloc_search.application.search.service import CatalogSearchService

    return CatalogSearchService(loc_client, wikidata_client, settings)


class ApplicationContainer(containers.DeclarativeContainer):
    """Central DI container for the id.loc.gov search application.

    Manages creation and lifecycle of:
    - ``settings``: SearchSettings built from ``config``
    - ``loc_client``: id.loc.gov HTTP client
    - ``wikidata_client``: Wikidata SPARQL client (or ``None``)
    - ``search_service``: CatalogSearchService wiring both
    """

    config = providers.Configuration()

    settings = providers.Singleton(_create_settings, config=config)

    loc_client = providers.Singleton(_create_loc_client, settings=settings)

    wikidata_client = providers.Singleton(_create_wikidata_client, settings=settings)

    search_service = providers.Singleton(
        _create_search_service,
        loc_client=loc_client,
        wikidata_client=wikidata_client,
        settings=settings,
    )


__all__ = ["ApplicationContainer"]
