from datetime import datetime
from typing import Annotated, Any, ClassVar, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

Domain = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ExaModel(BaseModel):
    """Base model for payloads exchanged with the Exa API. Attributes are snake_case, the wire format is camelCase."""

    model_config: ClassVar[ConfigDict] = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_request(self) -> dict[str, Any]:
        """Render the fields the caller set to a JSON-ready request fragment."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class BaseSearchOptions(ExaModel):
    num_results: int | None = Field(default=None, gt=0, description="Number of search results to return.")
    include_domains: list[Domain] | None = Field(default=None, description="Only return results from these domains.")
    exclude_domains: list[Domain] | None = Field(default=None, description="Never return results from these domains.")
    start_crawl_date: str | None = Field(default=None, description="Only return results crawled on or after this ISO-8601 date.")
    end_crawl_date: str | None = Field(default=None, description="Only return results crawled on or before this ISO-8601 date.")
    start_published_date: str | None = Field(default=None, description="Only return results published on or after this ISO-8601 date.")
    end_published_date: str | None = Field(default=None, description="Only return results published on or before this ISO-8601 date.")
    category: str | None = Field(default=None, description="A data category to focus on, i.e. 'company'.")

    @field_validator("start_crawl_date", "end_crawl_date", "start_published_date", "end_published_date")
    @classmethod
    def _validate_iso_date(cls, value: str | None) -> str | None:
        if value is not None:
            datetime.fromisoformat(value)
        return value


class RegularSearchOptions(BaseSearchOptions):
    use_autoprompt: bool | None = Field(default=None, description="Let the server rewrite the query into a search-optimized form.")
    type: str | None = Field(default=None, description="The type of search, i.e. 'keyword' or 'neural'.")


class FindSimilarOptions(BaseSearchOptions):
    exclude_source_domain: bool | None = Field(default=None, description="Exclude results from the domain of the source URL.")


class TextContentsOptions(ExaModel):
    max_characters: int | None = Field(default=None, gt=0, description="The maximum number of characters to return.")
    include_html_tags: bool | None = Field(default=None, description="Keep the HTML tags in the returned text.")


class HighlightsContentsOptions(ExaModel):
    query: str | None = Field(default=None, description="The query used to pick the highlights.")
    num_sentences: int | None = Field(default=None, gt=0, description="The number of sentences in each highlight.")
    highlights_per_url: int | None = Field(default=None, gt=0, description="The number of highlights to return for each URL.")


class ContentsOptions(ExaModel):
    """Which contents to extract for each result. `True` requests a component with the server defaults."""

    text: TextContentsOptions | Literal[True] | None = None
    highlights: HighlightsContentsOptions | Literal[True] | None = None


class RegularSearchAndContentsOptions(RegularSearchOptions, ContentsOptions):
    pass


class FindSimilarAndContentsOptions(FindSimilarOptions, ContentsOptions):
    pass


class SearchResult(ExaModel, extra="allow"):
    title: str | None
    url: str
    published_date: str | None = None
    author: str | None = None
    score: float | None = None
    id: str


class TextSearchResult(SearchResult):
    text: str


class HighlightsSearchResult(SearchResult):
    highlights: list[str]
    highlight_scores: list[float]


class TextAndHighlightsSearchResult(TextSearchResult, HighlightsSearchResult):
    pass


ResultT = TypeVar("ResultT", bound=SearchResult)


class SearchResponse(ExaModel, Generic[ResultT], extra="allow"):
    results: list[ResultT]
    autoprompt_string: str | None = None


ContentsSearchResponse = (
    SearchResponse[TextSearchResult] | SearchResponse[HighlightsSearchResult] | SearchResponse[TextAndHighlightsSearchResult]
)


def result_type_for(options: ContentsOptions | None) -> type[SearchResult]:
    """Pick the result variant the requested contents produce. Requesting neither text nor highlights yields text."""

    with_highlights = options is not None and options.highlights is not None
    with_text = options is None or options.text is not None or not with_highlights

    if with_text and with_highlights:
        return TextAndHighlightsSearchResult
    if with_highlights:
        return HighlightsSearchResult
    return TextSearchResult
