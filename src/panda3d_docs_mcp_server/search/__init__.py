"""Search the Panda3D Sphinx docs (result page fetch, parsing, selection)."""
from __future__ import annotations

from ..models import QueryOptions, SearchResult
from ..scrape.page import DocsPage
from ..settings import Settings
from ..utils.trace import TraceLog
from .sphinx import (
    MAX_RESULTS,
    build_search_url,
    find_showbase_class_index,
    parse_search_results,
    resolve_url,
    select_result_index,
)

__all__ = [
    "MAX_RESULTS",
    "build_search_url",
    "fetch_search_results",
    "find_showbase_class_index",
    "parse_search_results",
    "resolve_url",
    "select_result_index",
]


async def fetch_search_results(
    page: DocsPage,
    options: QueryOptions,
    *,
    settings: Settings,
    trace: TraceLog,
) -> list[SearchResult]:
    """Load the search page in `page` and parse the first result entries.

    The result list is rendered client-side by Sphinx's `searchtools.js`, so the
    page must settle (network idle) before the DOM is read.
    """
    search_url = build_search_url(options, settings)
    trace.emit(f"Searching URL: {search_url}")
    trace.emit(
        "Options: "
        f"check_keywords={str(options.check_keywords).lower()}, "
        f"search_contents={str(options.search_contents).lower()}"
    )
    await page.goto(search_url)

    trace.emit("Extracting search results...")
    snapshot = await page.snapshot()
    return parse_search_results(snapshot.html)
