from typing import Annotated, Any, ClassVar, Literal

from fastmcp.utilities.logging import get_logger
from pydantic import BaseModel, ConfigDict, Field

from exa_search_mcp.clients.exa import ExaClient
from exa_search_mcp.models.search import (
    ContentsOptions,
    ContentsSearchResponse,
    FindSimilarAndContentsOptions,
    FindSimilarOptions,
    HighlightsContentsOptions,
    RegularSearchAndContentsOptions,
    RegularSearchOptions,
    SearchResponse,
    SearchResult,
    TextContentsOptions,
)

logger = get_logger(__name__)

NUM_RESULTS = Annotated[int | None, Field(description="The number of results to return. If None, the server default is used.")]
INCLUDE_DOMAINS = Annotated[list[str] | None, Field(description="Only return results from these domains, i.e. 'arxiv.org'.")]
EXCLUDE_DOMAINS = Annotated[list[str] | None, Field(description="Never return results from these domains.")]
START_PUBLISHED_DATE = Annotated[
    str | None, Field(description="Only return results published on or after this ISO-8601 date, i.e. '2024-01-31'.")
]
END_PUBLISHED_DATE = Annotated[
    str | None, Field(description="Only return results published on or before this ISO-8601 date, i.e. '2024-12-31'.")
]
CATEGORY = Annotated[str | None, Field(description="A data category to focus on, i.e. 'company'.")]
INCLUDE_TEXT = Annotated[bool, Field(description="Whether to include the extracted text of each result.")]
MAX_CHARACTERS = Annotated[int | None, Field(description="The maximum number of characters of text to return for each result.")]
HIGHLIGHTS_QUERY = Annotated[
    str | None, Field(description="If provided, return highlights from each result that are relevant to this query.")
]


def build_contents(include_text: bool, max_characters: int | None, highlights_query: str | None) -> ContentsOptions | None:
    """Build the contents options for a tool call, or None if the caller did not ask for contents."""

    if not include_text and highlights_query is None:
        return None

    text: TextContentsOptions | Literal[True] | None = None
    if include_text:
        text = TextContentsOptions(max_characters=max_characters) if max_characters is not None else True

    highlights = HighlightsContentsOptions(query=highlights_query) if highlights_query is not None else None

    return ContentsOptions(text=text, highlights=highlights)


class SearchServer(BaseModel):
    model_config: ClassVar[ConfigDict] = ConfigDict(arbitrary_types_allowed=True)

    exa_client: ExaClient = Field(default_factory=ExaClient)

    async def search(
        self,
        query: Annotated[str, Field(description="The query to search for.")],
        search_type: Annotated[
            str | None, Field(description="The type of search, i.e. 'keyword' or 'neural'. If None, the server decides.")
        ] = None,
        use_autoprompt: Annotated[
            bool | None, Field(description="Whether to let Exa rewrite the query into a search-optimized form. If None, the server decides.")
        ] = None,
        num_results: NUM_RESULTS = None,
        include_domains: INCLUDE_DOMAINS = None,
        exclude_domains: EXCLUDE_DOMAINS = None,
        start_published_date: START_PUBLISHED_DATE = None,
        end_published_date: END_PUBLISHED_DATE = None,
        category: CATEGORY = None,
        include_text: INCLUDE_TEXT = False,
        max_characters: MAX_CHARACTERS = None,
        highlights_query: HIGHLIGHTS_QUERY = None,
    ) -> SearchResponse[SearchResult] | ContentsSearchResponse:
        """Search the web with Exa and return the matching results, optionally with their contents."""

        search_filters: dict[str, Any] = dict(
            type=search_type,
            use_autoprompt=use_autoprompt,
            num_results=num_results,
            include_domains=include_domains,
            exclude_domains=exclude_domains,
            start_published_date=start_published_date,
            end_published_date=end_published_date,
            category=category,
        )

        if (contents := build_contents(include_text, max_characters, highlights_query)) is None:
            logger.info(f"Searching for {query}")
            return await self.exa_client.search(query, options=RegularSearchOptions(**search_filters))

        logger.info(f"Searching for {query} with contents")
        return await self.exa_client.search_and_contents(
            query,
            options=RegularSearchAndContentsOptions(**search_filters, **dict(contents)),
        )

    async def find_similar(
        self,
        url: Annotated[str, Field(description="The URL of the page to find similar pages for.")],
        exclude_source_domain: Annotated[
            bool | None, Field(description="Whether to exclude results from the domain of the URL. If None, the server decides.")
        ] = None,
        num_results: NUM_RESULTS = None,
        include_domains: INCLUDE_DOMAINS = None,
        exclude_domains: EXCLUDE_DOMAINS = None,
        start_published_date: START_PUBLISHED_DATE = None,
        end_published_date: END_PUBLISHED_DATE = None,
        category: CATEGORY = None,
        include_text: INCLUDE_TEXT = False,
        max_characters: MAX_CHARACTERS = None,
        highlights_query: HIGHLIGHTS_QUERY = None,
    ) -> SearchResponse[SearchResult] | ContentsSearchResponse:
        """Find pages that are similar to the given URL, optionally with their contents."""

        similar_filters: dict[str, Any] = dict(
            exclude_source_domain=exclude_source_domain,
            num_results=num_results,
            include_domains=include_domains,
            exclude_domains=exclude_domains,
            start_published_date=start_published_date,
            end_published_date=end_published_date,
            category=category,
        )

        if (contents := build_contents(include_text, max_characters, highlights_query)) is None:
            logger.info(f"Finding pages similar to {url}")
            return await self.exa_client.find_similar(url, options=FindSimilarOptions(**similar_filters))

        logger.info(f"Finding pages similar to {url} with contents")
        return await self.exa_client.find_similar_and_contents(
            url,
            options=FindSimilarAndContentsOptions(**similar_filters, **dict(contents)),
        )

    async def get_contents(
        self,
        ids: Annotated[list[str], Field(description="The IDs of the documents to retrieve, as returned by a previous search.")],
        max_characters: MAX_CHARACTERS = None,
        highlights_query: HIGHLIGHTS_QUERY = None,
    ) -> ContentsSearchResponse:
        """Retrieve the text (and optionally highlights) of documents returned by a previous search."""

        contents = build_contents(True, max_characters, highlights_query)

        logger.info(f"Retrieving contents of {len(ids)} documents")
        return await self.exa_client.get_contents(ids, options=contents)
