"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from idloc_search.domain.entities import RecordGraph, SearchHit, WorkListing
from idloc_search.domain.entities.graph import BF, BFLC, MADS, RDF_VALUE, RDFS_LABEL

WORK_URI = "http://id.loc.gov/resources/works/123"
INSTANCE_URI = "http://id.loc.gov/resources/instances/123"
AGENT_URI = "http://id.loc.gov/rwo/agents/n97108433"
NAME_URI = "http://id.loc.gov/authorities/names/n97108433"
SUBJECT_URI = "http://id.loc.gov/authorities/subjects/sh85147229"
HUB_UUID = "0d8c4e3a-1b2c-4d5e-8f90-123456789abc"
HUB_URI = f"http://id.loc.gov/resources/hubs/{HUB_UUID}"


# ============================================================
# JSON-LD payloads
# ============================================================


@pytest.fixture
def work_payload():
    """Raw BIBFRAME work document for work 123."""
    return [
        {
            "@id": WORK_URI,
            "@type": [f"{BF}Work", f"{BF}Text", f"{BF}Monograph"],
            f"{BF}title": [{"@id": "_:t1"}],
            f"{BF}contribution": [{"@id": "_:c1"}],
            f"{BF}language": [{"@id": "http://id.loc.gov/vocabulary/languages/eng"}],
            f"{BF}subject": [{"@id": SUBJECT_URI}, {"@id": HUB_URI}, {"@id": "_:s1"}],
            f"{BFLC}aap": [{"@value": "Rowling, J. K. Harry Potter and the philosopher's stone"}],
        },
        {
            "@id": "_:t1",
            "@type": [f"{BF}Title"],
            f"{BF}mainTitle": [{"@value": "Harry Potter and the philosopher's stone"}],
            f"{BF}subtitle": [{"@value": "a novel"}],
        },
        {"@id": "_:c1", f"{BF}agent": [{"@id": AGENT_URI}]},
        {"@id": "_:s1", f"{RDFS_LABEL}": [{"@value": "Wizards -- Fiction"}]},
    ]


@pytest.fixture
def instance_payload():
    """Raw BIBFRAME instance document for instance 123."""
    return [
        {
            "@id": INSTANCE_URI,
            "@type": [f"{BF}Instance", f"{BF}Print"],
            f"{BF}title": [{"@id": "_:it"}],
            f"{BF}publicationStatement": [{"@value": "London : Bloomsbury, 1997, c2001"}],
            f"{BF}responsibilityStatement": [{"@value": "J.K. Rowling"}],
            f"{BF}extent": [{"@id": "_:e"}],
            f"{BF}identifiedBy": [{"@id": "_:i1"}, {"@id": "_:i2"}],
        },
        {"@id": "_:it", f"{BF}mainTitle": [{"@value": "Harry Potter and the philosopher's stone"}]},
        {"@id": "_:e", RDFS_LABEL: [{"@value": "223 p. ; 20 cm"}]},
        {"@id": "_:i1", "@type": [f"{BF}Isbn"], RDF_VALUE: [{"@value": "0747532699"}]},
        {"@id": "_:i2", "@type": [f"{BF}Lccn"], RDF_VALUE: [{"@value": "97123456"}]},
    ]


@pytest.fixture
def name_authority_payload():
    return [
        {
            "@id": NAME_URI,
            "@type": [f"{MADS}PersonalName", f"{MADS}Authority"],
            f"{MADS}authoritativeLabel": [{"@value": "Rowling, J. K."}],
        }
    ]


@pytest.fixture
def work_graph(work_payload):
    return RecordGraph.from_json(work_payload)


@pytest.fixture
def instance_graph(instance_payload):
    return RecordGraph.from_json(instance_payload)


@pytest.fixture
def name_authority_graph(name_authority_payload):
    return RecordGraph.from_json(name_authority_payload)


# ============================================================
# Suggest hits
# ============================================================


@pytest.fixture
def make_hit():
    """Factory for SearchHit built from a suggest2-style dict."""

    def _make(uri, label, *, token=None, contributors=(), languages=("English",), contributions=None):
        return SearchHit.from_dict(
            {
                "uri": uri,
                "token": token,
                "aLabel": label,
                "suggestLabel": label,
                "contributions": contributions,
                "more": {"contributors": list(contributors), "languages": list(languages)},
            }
        )

    return _make


@pytest.fixture
def harry_potter_hits(make_hit):
    """Two title hits: one credited to the queried author, one not."""
    return [
        make_hit(
            "http://id.loc.gov/resources/works/2",
            "Quidditch through the ages",
            token="2",
            contributors=["Whisp, Kennilworthy"],
        ),
        make_hit(
            "http://id.loc.gov/resources/works/1",
            "Rowling, J. K. Harry Potter and the chamber of secrets",
            token="1",
            contributors=["Rowling, J. K."],
        ),
    ]


# ============================================================
# Mock clients
# ============================================================


@pytest.fixture
def mock_loc_client(work_graph, instance_graph, name_authority_graph):
    """LOCClient double returning the fixture graphs."""
    client = AsyncMock()
    client.suggest_names.return_value = []
    client.suggest_works.return_value = []
    client.suggest_instances.return_value = []
    client.fetch_work_graph.return_value = work_graph
    client.fetch_instance_graph.return_value = instance_graph
    client.fetch_name_authority.return_value = name_authority_graph
    client.fetch_subject.return_value = RecordGraph()
    client.fetch_hub.return_value = RecordGraph()
    client.fetch_relationship_page.return_value = (
        0,
        [WorkListing(WORK_URI, "Rowling, J. K. Harry Potter and the philosopher's stone")],
    )
    return client


@pytest.fixture
def mock_wikidata_client():
    client = AsyncMock()
    client.fetch_profiles.return_value = {}
    return client
