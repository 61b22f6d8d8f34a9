from __future__ import annotations

from typing import Iterable, Sequence

from .models import SearchResult

DIVIDER = "=" * 40


def format_no_results(query: str) -> str:
    return f'No documentation found for "{query}"'


def format_results_list(query: str, results: Sequence[SearchResult], resolved_urls: Sequence[str]) -> str:
    content = f'Found {len(results)} results for "{query}":\n\n'
    for i, (result, url) in enumerate(zip(results, resolved_urls), start=1):
        content += f"{i}. {result.title}\n   {url}\n"
        if result.description:
            content += f"   {result.description}\n"
        content += "\n"
    return content


def format_report(
    query: str,
    results: Sequence[SearchResult],
    resolved_urls: Sequence[str],
    detail_text: str,
    trace: Iterable[str],
) -> str:
    """
    Render the `get_docs` text payload.

    Section order is fixed: results list, optional detailed documentation (only
    when `detail_text` is non-empty), debug log. MCP clients display this text
    as-is, so dividers and blank lines are part of the format.
    """
    content = format_results_list(query, results, resolved_urls)
    if detail_text:
        content += "\nDetailed documentation:\n"
        content += DIVIDER + "\n\n"
        content += detail_text

    content += "\n\nDebug Log:\n"
    content += DIVIDER + "\n"
    content += "\n".join(trace)
    return content
