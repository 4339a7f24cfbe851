from .clients.exa import ExaClient
from .errors import ExaConfigurationError, ExaError, ExaInputError, ExaRequestError
from .models.search import (
    ContentsOptions,
    FindSimilarAndContentsOptions,
    FindSimilarOptions,
    HighlightsContentsOptions,
    HighlightsSearchResult,
    RegularSearchAndContentsOptions,
    RegularSearchOptions,
    SearchResponse,
    SearchResult,
    TextAndHighlightsSearchResult,
    TextContentsOptions,
    TextSearchResult,
)

__all__ = [
    "ContentsOptions",
    "ExaClient",
    "ExaConfigurationError",
    "ExaError",
    "ExaInputError",
    "ExaRequestError",
    "FindSimilarAndContentsOptions",
    "FindSimilarOptions",
    "HighlightsContentsOptions",
    "HighlightsSearchResult",
    "RegularSearchAndContentsOptions",
    "RegularSearchOptions",
    "SearchResponse",
    "SearchResult",
    "TextAndHighlightsSearchResult",
    "TextContentsOptions",
    "TextSearchResult",
]
