from typing import Any

import pytest
from aioresponses import aioresponses
from yarl import URL

from exa_search_mcp.clients.exa import ExaClient

TEST_API_KEY = "test-api-key"
TEST_BASE_URL = "https://api.exa.test"

SEARCH_URL = f"{TEST_BASE_URL}/search"
SIMILAR_URL = f"{TEST_BASE_URL}/findSimilar"
CONTENTS_URL = f"{TEST_BASE_URL}/contents"


def sent_body(m: aioresponses, url: str, call: int = 0) -> dict[str, Any]:
    return m.requests[("POST", URL(url))][call].kwargs["json"]


def sent_headers(m: aioresponses, url: str, call: int = 0) -> dict[str, str]:
    return m.requests[("POST", URL(url))][call].kwargs["headers"]


@pytest.fixture
async def exa_client():
    client = ExaClient(api_key=TEST_API_KEY, base_url=TEST_BASE_URL)
    try:
        yield client
    finally:
        await client.close()


@pytest.fixture
def mock_api():
    with aioresponses() as m:
        yield m


@pytest.fixture
def search_payload():
    return {
        "results": [
            {
                "title": "Exa Labs",
                "url": "https://exa.ai",
                "publishedDate": "2024-01-01",
                "author": "Exa",
                "score": 0.92,
                "id": "https://exa.ai",
            },
            {
                "title": None,
                "url": "https://example.com/untitled",
                "id": "https://example.com/untitled",
            },
        ],
        "autopromptString": "Here is a link to the Exa homepage:",
    }
