"""Tests for the id.loc.gov and Wikidata clients."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from idloc_search.domain.entities import WorkListing
from idloc_search.infrastructure.sources import LOCClient, WikidataClient
from idloc_search.infrastructure.sources.wikidata import build_profile_query
from idloc_search.shared.exceptions import NetworkError


def _json_response(payload):
    response = MagicMock()
    response.status_code = 200
    response.is_success = True
    response.json.return_value = payload
    return response


def _mock_get(client, payload):
    client._client.get = AsyncMock(return_value=_json_response(payload))
    return client._client.get


# ============================================================
# LOCClient
# ============================================================


class TestLOCClientInit:
    async def test_defaults(self):
        client = LOCClient()
        assert client._base_url == "https://id.loc.gov"
        assert client._timeout == 30.0
        assert client._client.headers["Accept"] == "application/json"

    async def test_user_agent(self):
        client = LOCClient(user_agent="idloc-test/1.0")
        assert client._client.headers["User-Agent"] == "idloc-test/1.0"


class TestSuggest:
    async def test_names(self):
        client = LOCClient()
        get = _mock_get(client, {"hits": [{"uri": "http://id.loc.gov/authorities/names/n1", "token": "n1"}]})

        hits = await client.suggest_names("rowling")

        assert hits[0].token == "n1"
        assert hits[0].is_lccn
        url, params = get.call_args.args[0], get.call_args.kwargs["params"]
        assert url == "https://id.loc.gov/authorities/names/suggest2/"
        assert params["q"] == "rowling*"
        assert params["rdftype"] == "PersonalName"

    async def test_works_sends_both_rdftypes(self):
        client = LOCClient()
        get = _mock_get(client, {"hits": []})

        assert await client.suggest_works("potter") == []

        params = get.call_args.kwargs["params"]
        assert ("rdftype", "Monograph") in params
        assert ("rdftype", "Text") in params
        assert ("q", "potter") in params

    async def test_instances(self):
        client = LOCClient()
        get = _mock_get(client, {"hits": [{"uri": "http://id.loc.gov/resources/instances/1", "suggestLabel": "A"}]})
        hits = await client.suggest_instances("12345")
        assert hits[0].label == "A"
        assert get.call_args.args[0].endswith("/resources/instances/suggest2/")

    async def test_malformed_payload(self):
        client = LOCClient()
        _mock_get(client, ["not", "an", "object"])
        assert await client.suggest_names("x") == []


class TestGraphs:
    async def test_raw_work_graph(self):
        client = LOCClient()
        get = _mock_get(client, [{"@id": "http://id.loc.gov/resources/works/1"}])
        graph = await client.fetch_work_graph("1")
        assert len(graph) == 1
        assert get.call_args.args[0] == "https://id.loc.gov/resources/works/1.bibframe_raw.json"

    async def test_processed_instance_graph(self):
        client = LOCClient()
        get = _mock_get(client, [])
        await client.fetch_instance_graph("1", processed=True)
        assert get.call_args.args[0] == "https://id.loc.gov/resources/instances/1.bibframe.json"

    async def test_authority_endpoints(self):
        client = LOCClient()
        get = _mock_get(client, [])
        await client.fetch_name_authority("n1")
        await client.fetch_subject("sh1")
        await client.fetch_hub("abc")
        urls = [c.args[0] for c in get.call_args_list]
        assert urls == [
            "https://id.loc.gov/authorities/names/n1.json",
            "https://id.loc.gov/authorities/subjects/sh1.json",
            "https://id.loc.gov/resources/hubs/abc.json",
        ]


class TestRelationshipPage:
    async def test_parses_rows(self):
        client = LOCClient()
        get = _mock_get(
            client,
            {"summary": {"totalPages": "3"}, "results": [{"uri": "u:1", "label": "Emma"}, "junk"]},
        )

        total, rows = await client.fetch_relationship_page("n1", 2)

        assert total == 3
        assert rows == [WorkListing("u:1", "Emma")]
        params = get.call_args.kwargs["params"]
        assert params == {"label": "http://id.loc.gov/authorities/names/n1", "page": 2}

    async def test_missing_summary(self):
        client = LOCClient()
        _mock_get(client, {"results": []})
        assert await client.fetch_relationship_page("n1", 0) == (0, [])

    async def test_non_object(self):
        client = LOCClient()
        _mock_get(client, [])
        assert await client.fetch_relationship_page("n1", 0) == (0, [])

    async def test_unreachable_page_uses_client_retries_only(self):
        client = LOCClient()
        client._client.get = AsyncMock(side_effect=httpx.ConnectError("refused"))
        with patch("idloc_search.infrastructure.sources.base_client.asyncio.sleep", new_callable=AsyncMock) as sleep:
            with pytest.raises(NetworkError):
                await client.fetch_relationship_page("n1", 4)
        assert client._client.get.await_count == client._MAX_RETRIES + 1
        assert sleep.await_count == client._MAX_RETRIES


# ============================================================
# Wikidata
# ============================================================


class TestBuildProfileQuery:
    def test_filters_and_dedupes(self):
        query = build_profile_query(["n1", "bad token", "n1", "n22"])
        assert query.count('"n1"') == 1
        assert '"n22"' in query
        assert "bad token" not in query
        assert "wdt:P244" in query

    def test_none_when_empty(self):
        assert build_profile_query(["nope"]) is None
        assert build_profile_query([]) is None


class TestWikidataClient:
    async def test_first_row_wins(self):
        client = WikidataClient()
        _mock_get(
            client,
            {
                "results": {
                    "bindings": [
                        {
                            "lccn": {"value": "n1"},
                            "item": {"value": "http://www.wikidata.org/entity/Q1"},
                            "itemLabel": {"value": "First"},
                            "birthDate": {"value": "1965-07-31T00:00:00Z"},
                        },
                        {"lccn": {"value": "n1"}, "itemLabel": {"value": "Second"}},
                        {"item": {"value": "no lccn"}},
                    ]
                }
            },
        )

        profiles = await client.fetch_profiles(["n1"])

        assert list(profiles) == ["n1"]
        assert profiles["n1"].label == "First"
        assert profiles["n1"].birth_date.startswith("1965")

    async def test_no_valid_lccn_skips_request(self):
        client = WikidataClient()
        get = _mock_get(client, {})
        assert await client.fetch_profiles(["bad"]) == {}
        get.assert_not_called()

    async def test_sends_sparql(self):
        client = WikidataClient(user_agent="idloc-test/1.0")
        get = _mock_get(client, {"results": {"bindings": []}})
        await client.fetch_profiles(["n1"])
        assert get.call_args.args[0] == "https://query.wikidata.org/sparql"
        assert "VALUES ?lccn" in get.call_args.kwargs["params"]["query"]
        assert client._client.headers["User-Agent"] == "idloc-test/1.0"

    @pytest.mark.parametrize("payload", [[], {"results": None}, {}])
    async def test_malformed_payload(self, payload):
        client = WikidataClient(min_interval=0.0)
        _mock_get(client, payload)
        assert await client.fetch_profiles(["n1"]) == {}
