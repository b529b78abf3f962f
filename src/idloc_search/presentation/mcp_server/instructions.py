"""
MCP Server Instructions - usage guide for AI agents.
"""

from __future__ import annotations

SERVER_INSTRUCTIONS = """
id.loc.gov Search MCP Server - find and disambiguate Library of Congress records

═══════════════════════════════════════════════════════════════════════════════
🎯 TYPICAL FLOW
═══════════════════════════════════════════════════════════════════════════════

1. search_catalog(query="rowling")
   → contributors (with LCCN) and ranked titles (with work URI)

2a. Contributor known → get_contributor_works(lccn="n97108433", contributor_name="Rowling, J. K.")
    → works grouped by title: Multiple Instances, Single Instance, Non-Text
    → a group with several works → get_work_instances(work_uris="uri1,uri2", title="...")

2b. Title known → get_title_matches(work_uri="http://id.loc.gov/resources/works/123",
                                   clicked_label="Harry Potter and the...", query="rowling")
    → closest works by the same contributor, good matches first

3. get_instance_summary(instance_uri="http://id.loc.gov/resources/instances/123")
   → title, contributors, publication, extent, ISBN, language, subjects, editor link

═══════════════════════════════════════════════════════════════════════════════
💡 NOTES
═══════════════════════════════════════════════════════════════════════════════

- A digits-only query searches instances by identifier.
- Queries under two characters return nothing.
- get_contributor_profiles(lccns="n97108433") adds Wikidata descriptions,
  images and dates; search_catalog prefetches them in the background.
- When get_title_matches fails the work is excluded; rerun search_catalog.
- Every view ends with a "Back" hint naming the call that returns to the
  previous view.
"""
