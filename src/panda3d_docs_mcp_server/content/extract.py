from __future__ import annotations

import re

from bs4 import BeautifulSoup

from ..models import ExtractedContent, PageSnapshot
from ..scrape.page import DocsPage
from ..utils.trace import TraceLog

MAIN_CONTENT_SELECTOR = ".document"
# Sphinx's pilcrow anchors next to every heading/definition.
REMOVED_SELECTOR = ".headerlink"

_LINE_ENDINGS = re.compile(r"\r\n?")
_BLANK_RUNS = re.compile(r"\n{3,}")


def clean_text(raw: str) -> str:
    """
    Flatten DOM text into trimmed, non-empty lines.

    Line endings are normalized to `\\n`, each line is stripped, empty lines are
    dropped and any run of 3+ newlines is collapsed to exactly 2. Applying this
    twice yields the same result as applying it once.
    """
    text = _LINE_ENDINGS.sub("\n", raw or "")
    lines = [line.strip() for line in text.split("\n")]
    joined = "\n".join(line for line in lines if line)
    return _BLANK_RUNS.sub("\n\n", joined)


def extract_document_text(snapshot: PageSnapshot) -> ExtractedContent:
    diagnostics = [f"Page URL: {snapshot.url}", f"Page title: {snapshot.title}"]

    soup = BeautifulSoup(snapshot.html or "", "html.parser")
    container = soup.select_one(MAIN_CONTENT_SELECTOR)
    if container is None:
        diagnostics.append(f"No {MAIN_CONTENT_SELECTOR} element found")
        return ExtractedContent(text="", diagnostics=tuple(diagnostics))

    for element in container.select(REMOVED_SELECTOR):
        element.decompose()

    return ExtractedContent(text=clean_text(container.get_text()), diagnostics=tuple(diagnostics))


async def extract_content(
    page: DocsPage, url: str, trace: TraceLog | None = None
) -> ExtractedContent:
    """Navigate `page` to `url` and extract the main documentation body.

    A page without a `.document` container yields empty text plus a diagnostic;
    callers treat that as "no detail available", not as a failure.
    """
    await page.goto(url)
    if trace is not None:
        trace.emit("Extracting page content...")
    snapshot = await page.snapshot()
    return extract_document_text(snapshot)
