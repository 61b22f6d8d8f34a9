from __future__ import annotations

import logging

from .content import extract_content
from .errors import DocsFetchError
from .models import QueryOptions
from .report import format_no_results, format_report
from .scrape import PageProvider, get_browser_session
from .search import fetch_search_results, resolve_url, select_result_index
from .settings import Settings, get_settings
from .utils.trace import TraceLog

LOGGER = logging.getLogger(__name__)


async def search_docs(
    options: QueryOptions,
    *,
    pages: PageProvider | None = None,
    settings: Settings | None = None,
) -> str:
    """Search the Panda3D docs and return the formatted `get_docs` report.

    One tab is opened per call and closed on every exit path. Any failure while
    loading or parsing pages is re-raised as `DocsFetchError` carrying this
    call's trace.

    Known limitation: no overall deadline is applied here; a hung navigation is
    bounded only by the browser layer's navigation timeout.
    """
    settings = settings or get_settings()
    query = options.query
    trace = TraceLog(logger=LOGGER)
    LOGGER.info('Searching Panda3D docs for: "%s"', query)

    try:
        if pages is None:
            pages = await get_browser_session()
        async with pages.open_page() as page:
            results = await fetch_search_results(page, options, settings=settings, trace=trace)
            if not results:
                trace.emit("No results found")
                return format_no_results(query)
            trace.emit(f"Found {len(results)} results")

            resolved_urls = [resolve_url(r.url, settings) for r in results]
            best_index = select_result_index(query, results, trace)
            best_url = resolved_urls[best_index]
            trace.emit(f"Getting detailed content from: {best_url}")
            extracted = await extract_content(page, best_url, trace)
            trace.extend(extracted.diagnostics)

            if extracted.text:
                trace.emit(f"Got {len(extracted.text)} characters of content")
            else:
                trace.emit("No content found on result page")

            report = format_report(query, results, resolved_urls, extracted.text, trace.snapshot())
    except Exception as exc:
        message = str(exc) or type(exc).__name__
        LOGGER.error("Search failed: %s", message)
        trace.emit(f"Error: {message}")
        raise DocsFetchError(message, trace.snapshot()) from exc

    LOGGER.info('Successfully completed search for "%s"', query)
    return report
