"""
id.loc.gov Search MCP Tools

✅ Search (1):
- search_catalog: contributors + titles, or instances for numeric queries

✅ Disambiguation (4):
- get_contributor_works, get_title_matches, get_work_instances, get_instance_summary

✅ Enrichment (1):
- get_contributor_profiles: Wikidata profiles by LCCN

✅ Housekeeping (1):
- exclude_result: hide a known-bad work

Usage:
    from .tools import register_all_tools
    register_all_tools(mcp, service)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .catalog import register_catalog_tools

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

    from idloc_search.application.search import CatalogSearchService

logger = logging.getLogger(__name__)


def register_all_tools(mcp: FastMCP, service: CatalogSearchService) -> dict[str, int]:
    """Register every MCP tool and return tool counts by category."""
    register_catalog_tools(mcp, service)
    stats = {"catalog": 7}
    logger.info(f"Registered tools: {stats}")
    return stats


__all__ = ["register_all_tools", "register_catalog_tools"]
