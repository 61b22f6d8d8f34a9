from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SearchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = Field(default="", description="Link text of the search hit.")
    url: str = Field(default="", description="Raw `href` of the hit (relative or absolute).")
    description: str = Field(default="", description="Full text of the result list item.")


class QueryOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: str = Field(description="Free-text search query.")
    check_keywords: bool = Field(
        default=True, description="Search in module names and titles."
    )
    search_contents: bool = Field(
        default=False, description="Search in docstrings and code."
    )


class ExtractedContent(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str = Field(default="", description="Flattened text of the detail page body.")
    diagnostics: tuple[str, ...] = Field(
        default=(), description="Ordered notes about the extraction (URL, title, misses)."
    )


class PageSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str = Field(description="`window.location.href` after navigation settled.")
    title: str = Field(default="", description="`document.title` of the loaded page.")
    html: str = Field(default="", description="Serialized DOM of the loaded page.")
