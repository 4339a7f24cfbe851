import json
from typing import TYPE_CHECKING, Any

import pytest
from aioresponses import aioresponses
from fastmcp import FastMCP
from fastmcp.client import Client

from exa_search_mcp.clients.exa import ExaClient
from exa_search_mcp.main import build_mcp
from exa_search_mcp.models.search import HighlightsContentsOptions, TextContentsOptions, TextSearchResult
from exa_search_mcp.servers.search import SearchServer, build_contents
from tests.conftest import CONTENTS_URL, SEARCH_URL, SIMILAR_URL, sent_body

if TYPE_CHECKING:
    from fastmcp.client.client import CallToolResult


@pytest.fixture
def search_server(exa_client: ExaClient):
    return SearchServer(exa_client=exa_client)


@pytest.fixture
def fastmcp_server(exa_client: ExaClient):
    return build_mcp(exa_client=exa_client)


@pytest.fixture
def fastmcp_client(fastmcp_server: FastMCP[None]):
    return Client(transport=fastmcp_server)


def test_init(exa_client: ExaClient):
    assert SearchServer(exa_client=exa_client)


def test_build_contents():
    assert build_contents(include_text=False, max_characters=None, highlights_query=None) is None

    contents = build_contents(include_text=True, max_characters=None, highlights_query=None)
    assert contents is not None
    assert contents.text is True
    assert contents.highlights is None

    contents = build_contents(include_text=True, max_characters=100, highlights_query="python")
    assert contents is not None
    assert contents.text == TextContentsOptions(max_characters=100)
    assert contents.highlights == HighlightsContentsOptions(query="python")

    contents = build_contents(include_text=False, max_characters=100, highlights_query="python")
    assert contents is not None
    assert contents.text is None


async def test_search(search_server: SearchServer, mock_api: aioresponses, search_payload: dict[str, Any]):
    mock_api.post(SEARCH_URL, payload=search_payload)

    response = await search_server.search("exa", search_type="keyword", num_results=2)

    assert sent_body(mock_api, SEARCH_URL) == {"query": "exa", "type": "keyword", "numResults": 2}
    assert len(response.results) == 2


async def test_search_with_text(search_server: SearchServer, mock_api: aioresponses):
    mock_api.post(SEARCH_URL, payload={"results": [{"title": "T", "url": "u", "id": "1", "text": "Hello"}]})

    response = await search_server.search("exa", use_autoprompt=True, include_text=True, max_characters=100)

    assert sent_body(mock_api, SEARCH_URL) == {"query": "exa", "useAutoprompt": True, "contents": {"text": {"maxCharacters": 100}}}
    assert isinstance(response.results[0], TextSearchResult)


async def test_find_similar_with_highlights(search_server: SearchServer, mock_api: aioresponses):
    mock_api.post(SIMILAR_URL, payload={"results": [{"title": "T", "url": "u", "id": "1", "highlights": ["h"], "highlightScores": [0.1]}]})

    await search_server.find_similar("https://exa.ai", exclude_source_domain=True, highlights_query="search")

    assert sent_body(mock_api, SIMILAR_URL) == {
        "url": "https://exa.ai",
        "excludeSourceDomain": True,
        "contents": {"highlights": {"query": "search"}},
    }


async def test_get_contents(search_server: SearchServer, mock_api: aioresponses):
    mock_api.post(CONTENTS_URL, payload={"results": [{"title": "T", "url": "u", "id": "id1", "text": "Hello"}]})

    response = await search_server.get_contents(["id1"])

    assert sent_body(mock_api, CONTENTS_URL) == {"ids": ["id1"], "text": True}
    assert response.results[0].text == "Hello"  # pyright: ignore[reportAttributeAccessIssue]


async def test_list_tools(fastmcp_client: Client[Any]):
    async with fastmcp_client as client:
        tools = await client.list_tools()

    assert sorted(tool.name for tool in tools) == ["find_similar", "get_contents", "search"]


async def test_call_search_tool(fastmcp_client: Client[Any], mock_api: aioresponses, search_payload: dict[str, Any]):
    mock_api.post(SEARCH_URL, payload=search_payload)

    async with fastmcp_client as client:
        response: CallToolResult = await client.call_tool("search", arguments={"query": "exa", "num_results": 2})

    assert sent_body(mock_api, SEARCH_URL) == {"query": "exa", "numResults": 2}

    content = json.loads(response.content[0].text)  # pyright: ignore[reportAttributeAccessIssue]
    assert [result["id"] for result in content["results"]] == ["https://exa.ai", "https://example.com/untitled"]


async def test_search_sends_explicit_false(search_server: SearchServer, mock_api: aioresponses):
    mock_api.post(SEARCH_URL, payload={"results": []})

    await search_server.search("exa", use_autoprompt=False)

    assert sent_body(mock_api, SEARCH_URL) == {"query": "exa", "useAutoprompt": False}


async def test_find_similar_sends_explicit_false(search_server: SearchServer, mock_api: aioresponses):
    mock_api.post(SIMILAR_URL, payload={"results": []})

    await search_server.find_similar("https://exa.ai", exclude_source_domain=False)

    assert sent_body(mock_api, SIMILAR_URL) == {"url": "https://exa.ai", "excludeSourceDomain": False}


async def test_find_similar_omits_unset_flags(search_server: SearchServer, mock_api: aioresponses):
    mock_api.post(SIMILAR_URL, payload={"results": []})

    await search_server.find_similar("https://exa.ai")

    assert sent_body(mock_api, SIMILAR_URL) == {"url": "https://exa.ai"}
