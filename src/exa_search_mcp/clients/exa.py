import json
from collections.abc import Sequence
from http import HTTPStatus
from types import TracebackType
from typing import Any, Self, overload

from aiohttp import ClientSession
from fastmcp.utilities.logging import get_logger

from exa_search_mcp.config import ExaConfig, resolve_config
from exa_search_mcp.errors import ExaInputError, ExaRequestError
from exa_search_mcp.models.search import (
    ContentsOptions,
    ContentsSearchResponse,
    FindSimilarAndContentsOptions,
    FindSimilarOptions,
    RegularSearchAndContentsOptions,
    RegularSearchOptions,
    SearchResponse,
    SearchResult,
    result_type_for,
)

logger = get_logger(__name__)

CONTENT_TYPE = "application/json"
USER_AGENT = "exa-search-mcp 0.1.0"

SEARCH_ENDPOINT = "/search"
SIMILAR_SEARCH_ENDPOINT = "/findSimilar"
CONTENTS_ENDPOINT = "/contents"


def split_contents(options: ContentsOptions | None) -> dict[str, Any]:
    """Render options to a request body, moving `text` and `highlights` under `contents`.

    When neither is requested, `contents` defaults to `{"text": True}`.
    """

    body: dict[str, Any] = options.to_request() if options is not None else {}

    contents = {key: body.pop(key) for key in ("text", "highlights") if key in body}

    body["contents"] = contents or {"text": True}

    return body


def normalize_ids(ids: str | Sequence[str] | Sequence[SearchResult]) -> list[str]:
    """Flatten an id, a sequence of ids, or a sequence of prior results into a list of ids."""

    if not ids:
        msg = "Must provide at least one ID"
        raise ExaInputError(msg)

    if isinstance(ids, str):
        ids = [ids]

    request_ids: list[str] = []

    for item in ids:
        if isinstance(item, SearchResult):
            request_ids.append(item.id)
        elif isinstance(item, str) and item:
            request_ids.append(item)
        else:
            msg = f"Expected a non-empty ID or a SearchResult, got {item!r}"
            raise ExaInputError(msg)

    return request_ids


class ExaClient:
    """An async client for the Exa search API."""

    config: ExaConfig
    session: ClientSession | None

    def __init__(self, api_key: str | None = None, base_url: str | None = None, session: ClientSession | None = None):
        self.config = resolve_config(api_key=api_key, base_url=base_url)
        self.session = session
        self._owns_session = session is None

        self.headers: dict[str, str] = {
            "x-api-key": self.config.api_key,
            "Content-Type": CONTENT_TYPE,
            "User-Agent": USER_AGENT,
        }

    @property
    def base_url(self) -> str:
        return self.config.base_url

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc_value: BaseException | None, traceback: TracebackType | None
    ) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP session, if the client created it."""

        if self._owns_session and self.session is not None:
            await self.session.close()
            self.session = None

    async def _request(self, endpoint: str, method: str, body: dict[str, Any] | None = None) -> Any:  # noqa: ANN401
        if self.session is None:
            self.session = ClientSession()

        logger.debug(f"{method} {endpoint}")

        async with self.session.request(
            method=method,
            url=self.base_url + endpoint,
            headers=self.headers,
            json=body,
        ) as response:
            if not HTTPStatus.OK <= response.status < HTTPStatus.MULTIPLE_CHOICES:
                message = self._read_error(response.status, await response.text())
                logger.warning(f"{method} {endpoint} failed with status {response.status}: {message}")
                raise ExaRequestError(status=response.status, message=message)

            return await response.json(content_type=None)

    @staticmethod
    def _read_error(status: int, text: str) -> str | None:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError:
            logger.debug(f"Error body for status {status} is not JSON")
            return text or None

        if isinstance(payload, dict) and "error" in payload:
            error = payload["error"]
            return error if isinstance(error, str) else json.dumps(error)

        return text or None

    async def search(self, query: str, options: RegularSearchOptions | None = None) -> SearchResponse[SearchResult]:
        """Perform a search with an Exa prompt-engineered query.

        Args:
            query: The query string.
            options: Additional search options.

        Returns:
            A list of relevant search results.
        """

        body = {"query": query, **(options.to_request() if options is not None else {})}

        payload = await self._request(SEARCH_ENDPOINT, "POST", body)

        return SearchResponse[SearchResult].model_validate(payload)

    async def search_and_contents(self, query: str, options: RegularSearchAndContentsOptions | None = None) -> ContentsSearchResponse:
        """Perform a search with an Exa prompt-engineered query and return the contents of the documents.

        Text is extracted for every result unless the options ask for `text` or `highlights` explicitly.
        """

        body = {"query": query, **split_contents(options)}

        payload = await self._request(SEARCH_ENDPOINT, "POST", body)

        return SearchResponse[result_type_for(options)].model_validate(payload)  # type: ignore[return-value]

    async def find_similar(self, url: str, options: FindSimilarOptions | None = None) -> SearchResponse[SearchResult]:
        """Find links similar to the provided URL.

        Args:
            url: The URL for which to find similar links.
            options: Additional options for finding similar links.

        Returns:
            A list of similar search results.
        """

        body = {"url": url, **(options.to_request() if options is not None else {})}

        payload = await self._request(SIMILAR_SEARCH_ENDPOINT, "POST", body)

        return SearchResponse[SearchResult].model_validate(payload)

    async def find_similar_and_contents(self, url: str, options: FindSimilarAndContentsOptions | None = None) -> ContentsSearchResponse:
        """Find links similar to the provided URL and return the contents of the documents."""

        body = {"url": url, **split_contents(options)}

        payload = await self._request(SIMILAR_SEARCH_ENDPOINT, "POST", body)

        return SearchResponse[result_type_for(options)].model_validate(payload)  # type: ignore[return-value]

    @overload
    async def get_contents(self, ids: str, options: ContentsOptions | None = None) -> ContentsSearchResponse: ...

    @overload
    async def get_contents(self, ids: Sequence[str], options: ContentsOptions | None = None) -> ContentsSearchResponse: ...

    @overload
    async def get_contents(self, ids: Sequence[SearchResult], options: ContentsOptions | None = None) -> ContentsSearchResponse: ...

    async def get_contents(
        self, ids: str | Sequence[str] | Sequence[SearchResult], options: ContentsOptions | None = None
    ) -> ContentsSearchResponse:
        """Retrieve the contents of documents.

        Args:
            ids: A document ID, a list of document IDs, or a list of results from a previous search.
            options: Which contents to retrieve for each document.

        Returns:
            The documents with their contents.

        Raises:
            ExaInputError: If no IDs were provided.
        """

        body = {"ids": normalize_ids(ids), **(options.to_request() if options is not None else {})}

        payload = await self._request(CONTENTS_ENDPOINT, "POST", body)

        return SearchResponse[result_type_for(options)].model_validate(payload)  # type: ignore[return-value]
