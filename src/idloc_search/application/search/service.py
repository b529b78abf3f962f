"""
Catalog Search Service - the user-facing flows over id.loc.gov

Flows:
    search              names + works suggest (or instances for numeric queries)
    contributor_works   every work of a contributor, grouped by title
    title_matches       works by a clicked title's first contributor, ranked
    work_instances      instances of a collapsed title group
    instance_summary    detail view of one work+instance pair

Each flow starts a new query epoch. A flow that is superseded while it
awaits returns ``None``; its results and errors are dropped. Failures of a
single record during enrichment degrade that record only.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from idloc_search.domain.entities import (
    ContributorCandidate,
    ContributorRef,
    EnrichedWork,
    InstanceListing,
    NavigationState,
    SearchHit,
    SubjectRef,
    Summary,
    WikidataProfile,
    WorkListing,
    trailing_segment,
)
from idloc_search.shared.async_utils import gather_with_errors, run_in_background, timeout_with_fallback
from idloc_search.shared.exceptions import (
    CatalogSearchError,
    ErrorContext,
    InvalidQueryError,
    MalformedGraphError,
)

from . import graph_resolver as gr
from .candidate_ranker import partition_matches, rank, rank_contributor_works
from .epoch import EpochToken, QueryEpoch
from .record_normalizer import dedupe_by_uri, normalize_key, ordered_groups
from .settings import SearchSettings
from .title_extractor import extract_title
from .views import ContributorWorks, SearchResults, TitleMatches, WorkInstances

if TYPE_CHECKING:
    from idloc_search.domain.entities import RecordGraph
    from idloc_search.infrastructure.sources.loc import LOCClient
    from idloc_search.infrastructure.sources.wikidata import WikidataClient

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
WORKS_PATH = "/resources/works/"
INSTANCES_PATH = "/resources/instances/"


def _raise_first_error(results: Iterable[object]) -> None:
    for result in results:
        if isinstance(result, Exception):
            raise result


class CatalogSearchService:
    """
    Orchestrates clients and the pure ranking/grouping components.

    Example:
        service = CatalogSearchService(LOCClient(), WikidataClient())
        results = await service.search("rowling")
        works = await service.contributor_works("n97108433", "Rowling, J. K.")
    """

    def __init__(
        self,
        loc_client: LOCClient,
        wikidata_client: WikidataClient | None = None,
        settings: SearchSettings | None = None,
    ) -> None:
        self._loc = loc_client
        self._wikidata = wikidata_client
        self._settings = settings or SearchSettings()
        self._epoch = QueryEpoch()
        self._excluded: set[str] = set()
        self._profiles: dict[str, WikidataProfile] = {}
        self._semaphore = asyncio.Semaphore(self._settings.enrichment_concurrency)

    @property
    def settings(self) -> SearchSettings:
        return self._settings

    @property
    def epoch(self) -> QueryEpoch:
        return self._epoch

    @property
    def excluded(self) -> frozenset[str]:
        return frozenset(self._excluded)

    def exclude(self, uri: str) -> None:
        """Omit *uri* from subsequent title results."""
        logger.info(f"Excluding URI from future results: {uri}")
        self._excluded.add(uri)

    # =========================================================================
    # Search
    # =========================================================================

    async def search(self, query: str) -> SearchResults | None:
        """
        Run a search; ``None`` when a newer flow superseded this one.

        Queries shorter than two characters return an empty result without
        any request. Digit-only queries search instances.
        """
        query = (query or "").strip()
        token = self._epoch.begin(f"search:{query}")
        return await self._epoch.run(token, self._search(query, token))

    async def _search(self, query: str, token: EpochToken) -> SearchResults:
        navigation = NavigationState.search(query)
        if len(query) < MIN_QUERY_LENGTH:
            return SearchResults(query=query, navigation=navigation)

        if query.isdigit():
            hits = await self._loc.suggest_instances(query)
            return SearchResults(query=query, instances=tuple(dedupe_by_uri(hits)), navigation=navigation)

        results = await gather_with_errors(
            self._loc.suggest_names(query),
            self._loc.suggest_works(query),
            return_exceptions=True,
        )
        _raise_first_error(results)
        names, works = results

        if not self._epoch.is_current(token):
            return SearchResults(query=query, navigation=navigation)

        contributors = await self._resolve_contributors(dedupe_by_uri(names))
        titles = rank(dedupe_by_uri(works), query, self._excluded)
        logger.info(f"Search {query!r}: {len(contributors)} contributors, {len(titles)} titles")

        lccns = [c.lccn for c in contributors if c.lccn]
        if lccns and self._wikidata is not None and self._settings.wikidata_enabled:
            run_in_background(self._prefetch_profiles(token, lccns), name=f"wikidata:{query}")

        return SearchResults(
            query=query,
            contributors=tuple(contributors),
            titles=tuple(titles),
            navigation=navigation,
        )

    async def _resolve_contributors(self, hits: list[SearchHit]) -> list[ContributorCandidate]:
        ordered = sorted(hits, key=lambda h: -(h.contributions or 0))
        resolved = await gather_with_errors(*(self._resolve_contributor(hit) for hit in ordered))
        return list(resolved)

    async def _resolve_contributor(self, hit: SearchHit) -> ContributorCandidate:
        display_name = hit.suggest_label or hit.label
        if hit.is_lccn and hit.token:
            try:
                authority = await self._loc.fetch_name_authority(hit.token)
                label = gr.authoritative_label(authority, f"{gr.NAMES_AUTHORITY_BASE}{hit.token}", hit.token)
                if label:
                    display_name = label
            except CatalogSearchError as e:
                logger.warning(f"Name authority lookup failed for {hit.token}: {e}")
        return ContributorCandidate(hit=hit, display_name=display_name or hit.token or hit.uri)

    # =========================================================================
    # Wikidata enrichment
    # =========================================================================

    async def _prefetch_profiles(self, token: EpochToken, lccns: list[str]) -> None:
        profiles = await self._fetch_profiles(lccns)
        if self._epoch.is_current(token):
            self._profiles.update(profiles)
        else:
            logger.debug(f"Dropping Wikidata profiles of superseded epoch {token.number}")

    async def _fetch_profiles(self, lccns: list[str]) -> dict[str, WikidataProfile]:
        if self._wikidata is None:
            return {}
        try:
            return await timeout_with_fallback(self._wikidata.fetch_profiles(lccns), self._settings.timeout, dict)
        except CatalogSearchError as e:
            logger.warning(f"Wikidata enrichment failed: {e}")
            return {}

    async def contributor_profiles(self, lccns: Iterable[str]) -> dict[str, WikidataProfile]:
        """Wikidata profiles for *lccns*, from the prefetch cache where possible."""
        wanted = list(dict.fromkeys(lccns))
        missing = [lccn for lccn in wanted if lccn not in self._profiles]
        if missing and self._settings.wikidata_enabled:
            self._profiles.update(await self._fetch_profiles(missing))
        return {lccn: self._profiles[lccn] for lccn in wanted if lccn in self._profiles}

    # =========================================================================
    # Relationship listings
    # =========================================================================

    async def _fetch_listing(self, lccn: str, page_cap: int) -> list[WorkListing]:
        """Pages ``0..min(totalPages, page_cap)`` of the contributor listing."""
        total_pages, rows = await self._loc.fetch_relationship_page(lccn, 0)
        last_page = min(total_pages, page_cap)

        pages = await gather_with_errors(
            *(self._loc.fetch_relationship_page(lccn, page) for page in range(1, last_page + 1)),
            return_exceptions=True,
        )
        listing = list(rows)
        for page, result in enumerate(pages, start=1):
            if isinstance(result, Exception):
                logger.warning(f"Relationship page {page} for {lccn} failed: {result}")
                continue
            listing.extend(result[1])

        logger.debug(f"Fetched {last_page + 1} relationship pages for {lccn}: {len(listing)} rows")
        return listing

    # =========================================================================
    # Contributor works
    # =========================================================================

    async def contributor_works(
        self,
        lccn: str,
        contributor_name: str,
        navigation: NavigationState | None = None,
    ) -> ContributorWorks | None:
        """Every work of a contributor, enriched, titled and grouped."""
        token = self._epoch.begin(f"contributor:{lccn}")
        navigation = (navigation or NavigationState()).to_contributor(lccn, contributor_name)
        return await self._epoch.run(token, self._contributor_works(lccn, contributor_name, navigation, token))

    async def _contributor_works(
        self,
        lccn: str,
        contributor_name: str,
        navigation: NavigationState,
        token: EpochToken,
    ) -> ContributorWorks:
        listings = dedupe_by_uri(await self._fetch_listing(lccn, self._settings.contributor_page_cap))
        if not self._epoch.is_current(token):
            return ContributorWorks(lccn, contributor_name, ordered_groups(()), navigation=navigation)

        enriched = await gather_with_errors(*(self._enrich_work(row, contributor_name) for row in listings))
        groups = ordered_groups(enriched)
        logger.info(f"Contributor {lccn}: {len(enriched)} works in {len(groups.ordered())} title groups")
        return ContributorWorks(
            lccn=lccn,
            contributor_name=contributor_name,
            groups=groups,
            total_works=len(enriched),
            navigation=navigation,
        )

    async def _enrich_work(self, listing: WorkListing, contributor_name: str | None) -> EnrichedWork:
        """Classify and title one listing row; failures degrade to a text work."""
        graph: RecordGraph | None = None
        async with self._semaphore:
            try:
                graph = await self._loc.fetch_work_graph(listing.work_id)
            except CatalogSearchError as e:
                logger.warning(f"Work {listing.work_id} enrichment failed, defaulting to text: {e}")

        is_text, work_type = gr.classify_work(graph, listing.uri)
        raw_title = gr.work_label(listing.label, graph, listing.uri)
        display_title = extract_title(raw_title, contributor_name)
        return EnrichedWork(
            uri=listing.uri,
            label=listing.label,
            display_title=display_title,
            normalized_title=normalize_key(display_title),
            is_text=is_text,
            work_type=work_type,
            bibframe_data=graph,
        )

    # =========================================================================
    # Title click
    # =========================================================================

    async def title_matches(
        self,
        work_uri: str,
        clicked_label: str | None,
        search_value: str | None,
        navigation: NavigationState | None = None,
    ) -> TitleMatches | None:
        """
        Works by the first contributor of *work_uri*, closest to the click.

        On failure the work is excluded from later searches, unless a newer
        request has superseded this one, and the error propagates.
        """
        token = self._epoch.begin(f"title:{work_uri}")
        navigation = navigation or NavigationState.search(search_value or "")
        return await self._epoch.run(
            token, self._title_matches(token, work_uri, clicked_label, search_value, navigation)
        )

    async def _title_matches(
        self,
        token: EpochToken,
        work_uri: str,
        clicked_label: str | None,
        search_value: str | None,
        navigation: NavigationState,
    ) -> TitleMatches:
        try:
            lccn = await self.first_contributor_lccn(work_uri)
            listings = dedupe_by_uri(await self._fetch_listing(lccn, self._settings.title_page_cap))
        except CatalogSearchError:
            if self._epoch.is_current(token):
                self.exclude(work_uri)
            raise

        best = rank_contributor_works(listings, search_value, clicked_label, self._settings.best_match_limit)
        partition = partition_matches(best, self._settings.good_match_threshold)
        details = await gather_with_errors(*(self._instance_listing(match.uri) for match in partition.all()))
        return TitleMatches(
            work_uri=work_uri,
            lccn=lccn,
            partition=partition,
            details={match.uri: detail for match, detail in zip(partition.all(), details, strict=True)},
            navigation=navigation,
        )

    async def first_contributor_lccn(self, work_uri: str) -> str:
        """
        LCCN of the agent of a work's first contribution.

        A blank agent in the raw graph is retried against the processed
        graph; a still-blank agent raises MalformedGraphError.
        """
        work_id = trailing_segment(work_uri)
        graph = await self._loc.fetch_work_graph(work_id)
        agent = gr.first_agent(graph, work_uri)
        if agent is None:
            raise MalformedGraphError("Work has no contributor agent", node_id=work_uri)

        if gr.is_blank_node(agent):
            try:
                processed = await self._loc.fetch_work_graph(work_id, processed=True)
                agent = gr.first_agent(processed, work_uri) or agent
            except CatalogSearchError as e:
                logger.warning(f"Processed graph for {work_id} unavailable: {e}")

        if gr.is_blank_node(agent):
            raise MalformedGraphError("Unable to resolve contributor - blank node found", node_id=agent)
        return trailing_segment(agent)

    # =========================================================================
    # Instances
    # =========================================================================

    async def work_instances(
        self,
        work_uris: Iterable[str],
        title: str,
        navigation: NavigationState | None = None,
    ) -> WorkInstances | None:
        """
        Instances of a collapsed group, sorted by numeric id.

        Raises:
            InvalidQueryError: No work URI given
        """
        uris = tuple(dict.fromkeys(uri.strip() for uri in work_uris if uri and uri.strip()))
        if not uris:
            raise InvalidQueryError(
                None,
                "No work URI given",
                context=ErrorContext(
                    tool_name="get_work_instances",
                    suggestion="Pass the work URIs listed under a title group",
                    example='get_work_instances(work_uris="http://id.loc.gov/resources/works/123", title="Emma")',
                ),
            )
        token = self._epoch.begin(f"instances:{title}")
        navigation = (navigation or NavigationState()).to_instances(uris, title)
        return await self._epoch.run(token, self._work_instances(uris, title, navigation))

    async def _work_instances(self, uris: tuple[str, ...], title: str, navigation: NavigationState) -> WorkInstances:
        listings = await gather_with_errors(*(self._instance_listing(uri) for uri in uris))
        ordered = sorted(listings, key=lambda listing: listing.numeric_id)
        return WorkInstances(title=title, instances=tuple(ordered), navigation=navigation)

    async def _instance_listing(self, work_uri: str) -> InstanceListing:
        work_id = trailing_segment(work_uri)
        instance_uri = work_uri.replace(WORKS_PATH, INSTANCES_PATH)
        async with self._semaphore:
            try:
                graph = await self._loc.fetch_instance_graph(work_id)
            except CatalogSearchError as e:
                logger.warning(f"Instance {work_id} unavailable: {e}")
                return InstanceListing(uri=instance_uri, label=f"Instance {work_id}", work_id=work_id)

        instance = gr.find_node(graph, instance_uri)
        return InstanceListing(
            uri=instance_uri,
            label=gr.instance_label(graph, instance_uri),
            work_id=work_id,
            publication=gr.emphasize_newest_year(gr.publication_statement(instance)),
            responsibility_statement=gr.responsibility_statement(instance),
        )

    # =========================================================================
    # Detail view
    # =========================================================================

    async def instance_summary(self, instance_uri: str) -> Summary | None:
        """Detail view of an instance and the work it shares an id with."""
        if not trailing_segment(instance_uri or ""):
            raise InvalidQueryError(
                instance_uri,
                "Not an instance URI",
                context=ErrorContext(
                    tool_name="get_instance_summary",
                    suggestion="Pass an instance URI from get_work_instances or get_title_matches",
                    example='get_instance_summary(instance_uri="http://id.loc.gov/resources/instances/123")',
                ),
            )
        token = self._epoch.begin(f"summary:{instance_uri}")
        return await self._epoch.run(token, self._instance_summary(instance_uri))

    async def _instance_summary(self, instance_uri: str) -> Summary:
        instance_id = trailing_segment(instance_uri)
        work_uri = instance_uri.replace("/instances/", "/works/")
        work_id = trailing_segment(work_uri)

        results = await gather_with_errors(
            self._loc.fetch_work_graph(work_id, processed=True),
            self._loc.fetch_instance_graph(instance_id, processed=True),
            return_exceptions=True,
        )
        _raise_first_error(results)
        work_graph, instance_graph = results

        work = gr.main_node(work_graph, work_uri)
        instance = gr.main_node(instance_graph, instance_uri)

        contributors = await gather_with_errors(
            *(self._resolve_agent(work_graph, agent) for agent in gr.contribution_agents(work_graph, work))
        )
        subjects = await gather_with_errors(*(self._resolve_subject(work_graph, s) for s in gr.subject_refs(work)))

        return Summary(
            work_uri=work_uri,
            instance_uri=instance_uri,
            title=gr.work_title(work_graph, work),
            contributors=tuple(c for c in contributors if c is not None),
            publication_statement=gr.publication_statement(instance),
            extent=gr.extent(instance_graph, instance),
            isbn=tuple(gr.isbns(instance_graph, instance)),
            language=tuple(gr.language_codes(work)),
            subjects=tuple(s for s in subjects if s is not None),
            subject_display_limit=self._settings.subject_display_limit,
        )

    async def _resolve_agent(self, graph: RecordGraph, agent: str) -> ContributorRef | None:
        """Contributor name from the name authority, else the LCCN."""
        if gr.is_blank_node(agent):
            label = gr.blank_label(graph, agent)
            return ContributorRef(name=label) if label else None

        lccn = trailing_segment(agent)
        name: str | None = None
        try:
            name = gr.authoritative_label(await self._loc.fetch_name_authority(lccn), agent, lccn)
        except CatalogSearchError as e:
            logger.warning(f"Contributor {lccn} lookup failed: {e}")
        return ContributorRef(name=name or lccn, uri=agent)

    async def _resolve_subject(self, graph: RecordGraph, subject: str) -> SubjectRef | None:
        """Subject label from the hub or subject authority, else the identifier."""
        if gr.is_blank_node(subject):
            label = gr.blank_subject_label(graph, subject)
            return SubjectRef(label=label) if label else None

        subject_id = trailing_segment(subject)
        label: str | None = None
        try:
            if gr.is_uuid(subject_id):
                label = gr.hub_label(await self._loc.fetch_hub(subject_id), subject)
            else:
                label = gr.subject_label(await self._loc.fetch_subject(subject_id), subject)
        except CatalogSearchError as e:
            logger.warning(f"Subject {subject_id} lookup failed: {e}")
        return SubjectRef(label=label or subject_id, uri=subject)
