from __future__ import annotations

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from panda3d_docs_mcp_server.models import QueryOptions, SearchResult
from panda3d_docs_mcp_server.settings import Settings
from panda3d_docs_mcp_server.utils.trace import TraceLog


SETTINGS = Settings(base_url="https://docs.panda3d.org", docs_version="1.10", docs_language="python")


def _search_page(items: list[str]) -> str:
    return (
        "<html><body><div id='search-results'><h2>Search Results</h2>"
        "<ul class='search'>" + "".join(items) + "</ul></div></body></html>"
    )


def _item(title: str, href: str, context: str = "") -> str:
    return f"<li><a href='{href}'>{title}</a> <span>{context}</span></li>"


class TestBuildSearchUrl(unittest.TestCase):
    def test_default_options(self) -> None:
        from panda3d_docs_mcp_server.search import build_search_url

        url = build_search_url(QueryOptions(query="NodePath"), SETTINGS)
        self.assertEqual(
            url,
            "https://docs.panda3d.org/1.10/python/search?q=NodePath&check_keywords=yes&area=default",
        )

    def test_flags_and_encoding(self) -> None:
        from panda3d_docs_mcp_server.search import build_search_url

        options = QueryOptions(query="render pipeline&co", check_keywords=False, search_contents=True)
        url = build_search_url(options, SETTINGS)
        self.assertEqual(
            url,
            "https://docs.panda3d.org/1.10/python/search"
            "?q=render+pipeline%26co&check_keywords=no&area=project",
        )


class TestParseSearchResults(unittest.TestCase):
    def test_parses_title_href_and_description(self) -> None:
        from panda3d_docs_mcp_server.search import parse_search_results

        html = _search_page(
            [
                _item(
                    "panda3d.core.NodePath",
                    "reference/panda3d.core.NodePath.html?highlight=nodepath",
                    "(Python class, in panda3d.core)",
                )
            ]
        )
        results = parse_search_results(html)

        self.assertEqual(len(results), 1)
        self.assertEqual(results[0].title, "panda3d.core.NodePath")
        self.assertEqual(results[0].url, "reference/panda3d.core.NodePath.html?highlight=nodepath")
        self.assertEqual(
            results[0].description, "panda3d.core.NodePath (Python class, in panda3d.core)"
        )

    def test_truncates_to_ten_results(self) -> None:
        from panda3d_docs_mcp_server.search import MAX_RESULTS, parse_search_results

        html = _search_page([_item(f"Page {i}", f"page{i}.html") for i in range(25)])
        results = parse_search_results(html)

        self.assertEqual(MAX_RESULTS, 10)
        self.assertEqual(len(results), 10)
        self.assertEqual(results[-1].title, "Page 9")

    def test_item_without_link_has_empty_title_and_url(self) -> None:
        from panda3d_docs_mcp_server.search import parse_search_results

        results = parse_search_results(_search_page(["<li>  Just some text  </li>"]))

        self.assertEqual(results, [SearchResult(title="", url="", description="Just some text")])

    def test_page_without_result_container(self) -> None:
        from panda3d_docs_mcp_server.search import parse_search_results

        html = "<html><body><ul><li><a href='x.html'>Nav</a></li></ul></body></html>"
        self.assertEqual(parse_search_results(html), [])
        self.assertEqual(parse_search_results(""), [])


class TestSelectResultIndex(unittest.TestCase):
    RESULTS = [
        SearchResult(title="Starting Panda3D", url="introduction/starting-panda3d.html"),
        SearchResult(title="ShowBase", url="programming/showbase.html"),
        SearchResult(
            title="direct.showbase.ShowBase.ShowBase",
            url="reference/direct.showbase.ShowBase.html#direct.showbase.ShowBase.ShowBase",
        ),
    ]

    def test_defaults_to_first_result(self) -> None:
        from panda3d_docs_mcp_server.search import select_result_index

        self.assertEqual(select_result_index("NodePath", self.RESULTS), 0)
        self.assertEqual(select_result_index("showbase class", self.RESULTS), 0)

    def test_showbase_query_prefers_class_reference(self) -> None:
        from panda3d_docs_mcp_server.search import select_result_index

        trace = TraceLog()
        self.assertEqual(select_result_index("ShowBase", self.RESULTS, trace), 2)
        self.assertEqual(len(trace), 1)
        self.assertIn("Found ShowBase class at index 2", trace.render())

    def test_showbase_query_without_class_reference_falls_back(self) -> None:
        from panda3d_docs_mcp_server.search import select_result_index

        trace = TraceLog()
        self.assertEqual(select_result_index("showbase", self.RESULTS[:2], trace), 0)
        self.assertEqual(len(trace), 0)


class TestResolveUrl(unittest.TestCase):
    def test_absolute_url_is_unchanged(self) -> None:
        from panda3d_docs_mcp_server.search import resolve_url

        url = "https://discourse.panda3d.org/t/some-topic/123"
        self.assertEqual(resolve_url(url, SETTINGS), url)

    def test_root_relative_path(self) -> None:
        from panda3d_docs_mcp_server.search import resolve_url

        self.assertEqual(
            resolve_url("/1.10/cpp/index.html", SETTINGS),
            "https://docs.panda3d.org/1.10/cpp/index.html",
        )

    def test_relative_path_uses_default_section(self) -> None:
        from panda3d_docs_mcp_server.search import resolve_url

        self.assertEqual(
            resolve_url("reference/panda3d.core.NodePath.html", SETTINGS),
            "https://docs.panda3d.org/1.10/python/reference/panda3d.core.NodePath.html",
        )
        self.assertEqual(resolve_url("", SETTINGS), "https://docs.panda3d.org/1.10/python/")


if __name__ == "__main__":
    unittest.main()
