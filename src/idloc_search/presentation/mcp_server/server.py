"""
id.loc.gov Search MCP Server

A Model Context Protocol server for searching and disambiguating Library
of Congress linked-data records.

Architecture:
- instructions.py: SERVER_INSTRUCTIONS for AI agents
- tools/: tool implementations
- formatting.py: Markdown rendering of views
- container: DI container (dependency-injector) for service lifecycle
"""

from __future__ import annotations

import logging
import os
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import TYPE_CHECKING, Any, cast

from mcp.server.fastmcp import FastMCP

from idloc_search.container import ApplicationContainer
from idloc_search.shared.exceptions import ConfigurationError

from .instructions import SERVER_INSTRUCTIONS
from .tools import register_all_tools

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from idloc_search.application.search import CatalogSearchService

logger = logging.getLogger(__name__)

# ── Module-level DI container ──────────────────────────────────────────────
_container: ApplicationContainer | None = None


def get_container() -> ApplicationContainer:
    """Get the application DI container.

    Raises:
        RuntimeError: If ``create_server()`` has not been called yet.
    """
    if _container is None:
        msg = "Container not initialized. Call create_server() first."
        raise RuntimeError(msg)
    return _container


def _make_lifespan(
    container: ApplicationContainer,
) -> Callable[[FastMCP[Any]], AbstractAsyncContextManager[ApplicationContainer]]:
    """Create a FastMCP lifespan handler bound to *container*."""

    @asynccontextmanager
    async def _lifespan(server: FastMCP[Any]) -> AsyncIterator[ApplicationContainer]:
        """Application lifecycle: startup → yield → shutdown."""
        logger.info("Lifecycle: startup, resources ready")
        try:
            yield container
        finally:
            await container.loc_client().close()
            wikidata = container.wikidata_client()
            if wikidata is not None:
                await wikidata.close()
            logger.info("Lifecycle: shutdown, HTTP clients closed")

    return _lifespan


def create_server(
    name: str = "idloc-search",
    config: dict[str, Any] | None = None,
) -> FastMCP:
    """
    Create and configure the id.loc.gov Search MCP server.

    Args:
        name: Server name.
        config: Values for SearchSettings (timeout, page caps, wikidata_enabled, ...).

    Returns:
        Configured FastMCP server instance.
    """
    global _container
    logger.info("Initializing id.loc.gov Search MCP Server...")

    _container = ApplicationContainer()
    _container.config.from_dict(config or {})

    service = cast("CatalogSearchService", _container.search_service())
    logger.info(f"Search settings: {service.settings}")

    mcp = FastMCP(
        name,
        instructions=SERVER_INSTRUCTIONS,
        lifespan=_make_lifespan(_container),
    )

    stats = register_all_tools(mcp, service)
    logger.info("Tool registration complete: %s", stats)
    return mcp


def _env_number(name: str, cast_to: Callable[[str], Any]) -> Any:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        return cast_to(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def config_from_env() -> dict[str, Any]:
    """Read IDLOC_* environment variables into a settings mapping."""
    wikidata = os.environ.get("IDLOC_WIKIDATA", "").strip().lower()
    return {
        "timeout": _env_number("IDLOC_TIMEOUT", float),
        "contributor_page_cap": _env_number("IDLOC_CONTRIBUTOR_PAGE_CAP", int),
        "title_page_cap": _env_number("IDLOC_TITLE_PAGE_CAP", int),
        "wikidata_enabled": None if not wikidata else wikidata not in ("0", "false", "no", "off"),
    }


def main():
    """Run the MCP server."""

    # Configure logging
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    server = create_server(config=config_from_env())

    # Run stdio MCP server (blocks)
    server.run()


if __name__ == "__main__":
    main()
