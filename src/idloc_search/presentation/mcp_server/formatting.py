"""
Markdown rendering of catalog views for MCP tool responses.
"""

from __future__ import annotations

from collections.abc import Mapping

from idloc_search.application.search import (
    ContributorWorks,
    SearchResults,
    TitleMatches,
    WorkInstances,
    initials,
)
from idloc_search.domain.entities import (
    InstanceListing,
    NavigationKind,
    NavigationState,
    PublicationStatement,
    Summary,
    TitleGroup,
    WikidataProfile,
)


def format_publication(statement: PublicationStatement) -> str:
    """Statement text with every occurrence of the newest year in bold."""
    return "".join(f"**{text}**" if emphasized else text for text, emphasized in statement.segments())


def format_back(navigation: NavigationState) -> str:
    """Hint describing the tool call that returns to the previous view."""
    back = navigation.back()
    if back.kind is NavigationKind.CONTRIBUTOR_WORKS:
        return f'↩️ Back: `get_contributor_works(lccn="{back.lccn}", contributor_name="{back.contributor_name}")`'
    if back.query:
        return f'↩️ Back: `search_catalog(query="{back.query}")`'
    return ""


def format_search_results(results: SearchResults) -> str:
    if results.is_empty:
        if len(results.query) < 2:
            return "Enter at least two characters to search."
        return f"No results for **{results.query}**."

    lines: list[str] = [f"# Results for: {results.query}", ""]

    if results.is_numeric:
        lines.append("## Instances")
        for hit in results.instances:
            lines.append(f"- {hit.suggest_label or hit.label} — {hit.uri}")
        return "\n".join(lines)

    lines.append("## Contributors")
    if not results.contributors:
        lines.append("No contributors found")
    for candidate in results.contributors:
        more = candidate.hit.more
        line = f"- [{initials(candidate.display_name)}] **{candidate.display_name}**"
        if candidate.lccn:
            line += f" (`{candidate.lccn}`)"
        if candidate.contributions:
            line += f", {candidate.contributions} contributions"
        lines.append(line)
        if more.birthdates:
            lines.append(f"  - Born: {more.birthdates[0]}")
        if more.occupations:
            lines.append(f"  - {', '.join(more.occupations)}")

    lines += ["", "## Titles"]
    if not results.titles:
        lines.append("No titles found")
    for scored in results.titles:
        hit = scored.hit
        lines.append(f"- **{hit.suggest_label or hit.label}** — {hit.uri}")
        if hit.v_label and hit.v_label != hit.a_label:
            lines.append(f"  - {hit.v_label}")
        if len(hit.more.contributors) > 1:
            lines.append(f"  - Contributors: {', '.join(hit.more.contributors[1:])}")
        if hit.more.languages:
            lines.append(f"  - Language: {', '.join(hit.more.languages)}")
    return "\n".join(lines)


def _format_group(group: TitleGroup) -> str:
    title = group.canonical_display_title
    if not group.is_text:
        suffix = f" _({group.work_type})_" if group.work_type else ""
        return f"- {title}{suffix} — {group.primary.uri}"
    if group.count > 1:
        return f"- **{title}** ({group.count} works): {', '.join(group.uris)}"
    return f"- {title} — {group.primary.uri}"


def format_contributor_works(view: ContributorWorks) -> str:
    groups = view.groups
    if groups.is_empty:
        return f"No works found for **{view.contributor_name}**."

    lines = [f"# Works by {view.contributor_name}", f"{view.total_works} works", ""]
    sections = (
        ("Multiple Instances", groups.multiple_instances),
        ("Single Instance", groups.single_instance),
        ("Non-Text Works", groups.non_text),
    )
    for heading, section in sections:
        if section:
            lines.append(f"## {heading}")
            lines.extend(_format_group(group) for group in section)
            lines.append("")

    back = format_back(view.navigation)
    if back:
        lines.append(back)
    return "\n".join(lines).rstrip()


def _format_instance_details(listing: InstanceListing | None) -> list[str]:
    if listing is None:
        return []
    details = []
    if listing.responsibility_statement:
        details.append(f"  - By: {listing.responsibility_statement}")
    if listing.publication:
        details.append(f"  - Published: {format_publication(listing.publication)}")
    return details or ["  - No additional details available"]


def format_title_matches(view: TitleMatches) -> str:
    partition = view.partition
    if not partition.all():
        return "No matching works found."

    lines = ["# Titles - Please Select Instance", ""]
    for match in partition.good:
        lines.append(f"- **{match.label}** — {match.uri}")
        lines.extend(_format_instance_details(view.details.get(match.uri)))
    if partition.poor:
        lines += ["", "---", ""]
        for match in partition.poor:
            lines.append(f"- {match.label} — {match.uri}")
            lines.extend(_format_instance_details(view.details.get(match.uri)))

    back = format_back(view.navigation)
    if back:
        lines += ["", back]
    return "\n".join(lines)


def format_work_instances(view: WorkInstances) -> str:
    if not view.instances:
        return "No instances found."

    lines = [f"# {view.title} - All Instances", ""]
    for listing in view.instances:
        lines.append(f"- **{listing.label}** — {listing.uri}")
        lines.extend(_format_instance_details(listing))

    back = format_back(view.navigation)
    if back:
        lines += ["", back]
    return "\n".join(lines)


def format_summary(summary: Summary) -> str:
    lines = ["# Instance Details", ""]
    if summary.title:
        lines += [f"## {summary.title}", ""]

    if summary.contributors:
        lines.append("**Contributors:**")
        for contributor in summary.contributors:
            lines.append(f"- [{contributor.name}]({contributor.uri})" if contributor.uri else f"- {contributor.name}")
        lines.append("")
    if summary.publication_statement:
        lines.append(f"**Publication:** {summary.publication_statement}")
    if summary.extent:
        lines.append(f"**Extent:** {summary.extent}")
    if summary.isbn:
        lines.append(f"**ISBN:** {', '.join(summary.isbn)}")
    if summary.language:
        lines.append(f"**Language:** {', '.join(summary.language)}")
    if summary.display_subjects:
        lines += ["", "**Subjects:**"]
        for subject in summary.display_subjects:
            lines.append(f"- [{subject.label}]({subject.uri})" if subject.uri else f"- {subject.label}")

    lines += [
        "",
        f"🖊️ [Open in Marva Editor]({summary.editor_url})",
        f"🔗 [View on id.loc.gov]({summary.work_uri})",
    ]
    return "\n".join(lines)


def format_profiles(profiles: Mapping[str, WikidataProfile], requested: list[str]) -> str:
    if not profiles:
        return "No Wikidata profiles found."

    lines = ["# Wikidata Profiles", ""]
    for lccn in requested:
        profile = profiles.get(lccn)
        if profile is None:
            continue
        lines.append(f"## {profile.label or lccn} (`{lccn}`)")
        if profile.description:
            lines.append(f"- {profile.description}")
        if profile.birth_date or profile.death_date:
            lines.append(f"- Dates: {profile.birth_date or '?'} – {profile.death_date or ''}".rstrip())
        if profile.image:
            lines.append(f"- Image: {profile.image}")
        if profile.item:
            lines.append(f"- Wikidata: {profile.item}")
        lines.append("")
    return "\n".join(lines).rstrip()
