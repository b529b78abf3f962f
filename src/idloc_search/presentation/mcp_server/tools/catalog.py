"""
Catalog MCP Tools - search and disambiguation over id.loc.gov

Tools:
- search_catalog: contributors and titles for a query (instances for numbers)
- get_contributor_works: a contributor's works grouped by title
- get_title_matches: works by a title's first contributor, closest first
- get_work_instances: instances of a collapsed title group
- get_instance_summary: detail view of one instance
- get_contributor_profiles: Wikidata enrichment by LCCN
- exclude_result: hide a known-bad work from later searches
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from idloc_search.domain.entities import NavigationState
from idloc_search.shared.exceptions import CatalogSearchError

from ..formatting import (
    format_contributor_works,
    format_profiles,
    format_search_results,
    format_summary,
    format_title_matches,
    format_work_instances,
)

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

    from idloc_search.application.search import CatalogSearchService

logger = logging.getLogger(__name__)

SUPERSEDED_MESSAGE = "⏭️ A newer request replaced this one; its results were discarded."


def _split(values: str) -> list[str]:
    return [v.strip() for v in values.replace("\n", ",").split(",") if v.strip()]


def register_catalog_tools(mcp: FastMCP, service: CatalogSearchService) -> None:
    """Register catalog search tools (7 tools)."""

    async def _reissue_search(message: str, query: str) -> str:
        """Re-run the prior search once so the excluded work drops out."""
        if not query:
            return message
        try:
            results = await service.search(query)
        except CatalogSearchError as e:
            logger.warning(f"Re-issued search for {query!r} failed: {e}")
            return message
        if results is None:
            return message
        return f"{message}\n\n---\n\n{format_search_results(results)}"

    @mcp.tool()
    async def search_catalog(query: str) -> str:
        """
        Search id.loc.gov for contributors and titles.

        Text queries return personal-name contributors (most contributions
        first) and ranked Monograph/Text works. A digits-only query searches
        instances by identifier. Queries shorter than two characters return
        nothing.

        Args:
            query: Free text (e.g. "rowling harry potter") or a numeric identifier

        Returns:
            Markdown list of contributors (with LCCN) and titles (with URI)
        """
        logger.info(f"search_catalog: {query!r}")
        try:
            results = await service.search(query)
        except CatalogSearchError as e:
            logger.error(f"search_catalog failed: {e}")
            return e.to_agent_message()
        if results is None:
            return SUPERSEDED_MESSAGE
        return format_search_results(results)

    @mcp.tool()
    async def get_contributor_works(lccn: str, contributor_name: str, query: str = "") -> str:
        """
        List every work of a contributor, grouped under canonical titles.

        Titles that occur on several works are listed first, then titles
        with a single work, then non-text works (audio, video, ...).

        Args:
            lccn: Name authority identifier (e.g. "n97108433")
            contributor_name: Display name as shown by search_catalog
            query: The search that led here, used for back-navigation

        Returns:
            Markdown sections of title groups with their work URIs
        """
        try:
            view = await service.contributor_works(lccn, contributor_name, NavigationState.search(query))
        except CatalogSearchError as e:
            logger.error(f"get_contributor_works failed: {e}")
            return e.to_agent_message()
        if view is None:
            return SUPERSEDED_MESSAGE
        return format_contributor_works(view)

    @mcp.tool()
    async def get_title_matches(work_uri: str, clicked_label: str = "", query: str = "") -> str:
        """
        Find the works closest to a selected title among its contributor's works.

        Matches within a small edit distance are listed first by identifier;
        weaker matches follow a separator. A work that fails here is hidden
        from later search_catalog results and *query* is searched again.

        Args:
            work_uri: Work URI from search_catalog (".../resources/works/{id}")
            clicked_label: Title label as shown in the result list
            query: The current search box value

        Returns:
            Markdown list of matching works with publication details
        """
        try:
            view = await service.title_matches(
                work_uri, clicked_label or None, query or None, NavigationState.search(query)
            )
        except CatalogSearchError as e:
            logger.error(f"get_title_matches failed for {work_uri}: {e}")
            message = f"{e.to_agent_message()}\n\nThis work is now excluded from search results."
            return await _reissue_search(message, query)
        if view is None:
            return SUPERSEDED_MESSAGE
        return format_title_matches(view)

    @mcp.tool()
    async def get_work_instances(
        work_uris: str,
        title: str,
        lccn: str = "",
        contributor_name: str = "",
        query: str = "",
    ) -> str:
        """
        List the instances of a collapsed title group.

        Args:
            work_uris: Comma-separated work URIs of the group
            title: Canonical title of the group
            lccn: Contributor the group came from (for back-navigation)
            contributor_name: That contributor's display name
            query: The search that led here

        Returns:
            Markdown list of instances sorted by identifier
        """
        navigation = NavigationState.search(query)
        if lccn:
            navigation = navigation.to_contributor(lccn, contributor_name or lccn)
        try:
            view = await service.work_instances(_split(work_uris), title, navigation)
        except CatalogSearchError as e:
            logger.error(f"get_work_instances failed: {e}")
            return e.to_agent_message()
        if view is None:
            return SUPERSEDED_MESSAGE
        return format_work_instances(view)

    @mcp.tool()
    async def get_instance_summary(instance_uri: str) -> str:
        """
        Show the detail view of an instance.

        Includes title, contributors (resolved to authority names),
        publication statement, extent, ISBN, language and up to seven
        subjects, plus an editor link.

        Args:
            instance_uri: Instance URI (".../resources/instances/{id}"); a
                work URI is accepted and mapped to the instance with the same id

        Returns:
            Markdown detail view
        """
        instance_uri = instance_uri.replace("/resources/works/", "/resources/instances/")
        try:
            summary = await service.instance_summary(instance_uri)
        except CatalogSearchError as e:
            logger.error(f"get_instance_summary failed for {instance_uri}: {e}")
            return e.to_agent_message()
        if summary is None:
            return SUPERSEDED_MESSAGE
        return format_summary(summary)

    @mcp.tool()
    async def get_contributor_profiles(lccns: str) -> str:
        """
        Wikidata description, image and dates for contributors.

        Args:
            lccns: Comma-separated LCCNs (e.g. "n97108433,n79021164")

        Returns:
            Markdown profiles for the LCCNs Wikidata knows
        """
        requested = _split(lccns)
        profiles = await service.contributor_profiles(requested)
        return format_profiles(profiles, requested)

    @mcp.tool()
    async def exclude_result(work_uri: str) -> str:
        """
        Hide a work from subsequent search_catalog title results.

        Args:
            work_uri: Work URI to hide

        Returns:
            Confirmation message
        """
        service.exclude(work_uri)
        return f"✅ Excluded {work_uri} ({len(service.excluded)} excluded in total)"
