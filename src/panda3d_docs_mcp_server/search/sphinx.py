from __future__ import annotations

from urllib.parse import urlencode, urlsplit

from bs4 import BeautifulSoup

from ..models import QueryOptions, SearchResult
from ..settings import Settings
from ..utils.trace import TraceLog

RESULT_ITEM_SELECTOR = ".search li"
MAX_RESULTS = 10

# Fixed override: for the bare "showbase" query, prefer the ShowBase class
# reference over the manual pages that Sphinx lists first.
SHOWBASE_QUERY = "showbase"
SHOWBASE_TITLE_MARKER = "showbase.showbase.showbase"


def build_search_url(options: QueryOptions, settings: Settings) -> str:
    """Build the Sphinx search page URL for `options`.

    `check_keywords` searches module names and titles; `search_contents`
    switches the search area to docstrings and code.
    """
    params = {
        "q": options.query,
        "check_keywords": "yes" if options.check_keywords else "no",
        "area": "project" if options.search_contents else "default",
    }
    return f"{settings.search_url}?{urlencode(params)}"


def parse_search_results(html: str, *, limit: int = MAX_RESULTS) -> list[SearchResult]:
    soup = BeautifulSoup(html or "", "html.parser")
    results: list[SearchResult] = []
    for item in soup.select(RESULT_ITEM_SELECTOR)[:limit]:
        link = item.select_one("a")
        href = link.get("href") if link is not None else None
        results.append(
            SearchResult(
                title=link.get_text().strip() if link is not None else "",
                url=href if isinstance(href, str) else "",
                description=item.get_text().strip(),
            )
        )
    return results


def find_showbase_class_index(query: str, results: list[SearchResult]) -> int | None:
    if query.lower() != SHOWBASE_QUERY:
        return None
    for index, result in enumerate(results):
        if SHOWBASE_TITLE_MARKER in result.title.lower():
            return index
    return None


def select_result_index(
    query: str, results: list[SearchResult], trace: TraceLog | None = None
) -> int:
    """Pick the result whose page is fetched for the detailed section.

    Always the first hit, except for the ShowBase override above.
    """
    index = find_showbase_class_index(query, results)
    if index is None:
        return 0
    if trace is not None:
        trace.emit(f"Found ShowBase class at index {index}")
    return index


def resolve_url(url: str, settings: Settings) -> str:
    if urlsplit(url).scheme:
        return url
    if url.startswith("/"):
        return f"{settings.base_url}{url}"
    return f"{settings.section_url}/{url}"
