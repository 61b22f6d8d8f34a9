from __future__ import annotations

import sys
import unittest
from pathlib import Path
from unittest.mock import AsyncMock

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from panda3d_docs_mcp_server.errors import DocsFetchError, InvalidDocsArgumentsError
from panda3d_docs_mcp_server.models import QueryOptions


class TestDocsArguments(unittest.TestCase):
    def test_validation(self) -> None:
        from panda3d_docs_mcp_server.tools import is_valid_docs_args

        self.assertTrue(is_valid_docs_args({"query": "NodePath"}))
        self.assertTrue(is_valid_docs_args({"query": ""}))
        for bad in (None, [], "NodePath", {}, {"query": 42}, {"query": None}):
            self.assertFalse(is_valid_docs_args(bad), msg=repr(bad))

    def test_flag_defaults(self) -> None:
        from panda3d_docs_mcp_server.tools import parse_docs_args

        self.assertEqual(
            parse_docs_args({"query": "NodePath"}),
            QueryOptions(query="NodePath", check_keywords=True, search_contents=False),
        )

    def test_check_keywords_only_disabled_by_explicit_false(self) -> None:
        from panda3d_docs_mcp_server.tools import parse_docs_args

        self.assertFalse(parse_docs_args({"query": "q", "check_keywords": False}).check_keywords)
        self.assertTrue(parse_docs_args({"query": "q", "check_keywords": None}).check_keywords)
        self.assertTrue(parse_docs_args({"query": "q", "check_keywords": 0}).check_keywords)
        self.assertTrue(parse_docs_args({"query": "q", "search_contents": 1}).search_contents)

    def test_invalid_arguments_raise(self) -> None:
        from panda3d_docs_mcp_server.tools import parse_docs_args

        with self.assertRaises(InvalidDocsArgumentsError):
            parse_docs_args({"q": "NodePath"})


class TestDispatchToolCall(unittest.IsolatedAsyncioTestCase):
    async def test_success(self) -> None:
        from panda3d_docs_mcp_server.tools import ToolSuccess, dispatch_tool_call

        lookup = AsyncMock(return_value="Found 1 results")
        outcome = await dispatch_tool_call("get_docs", {"query": "NodePath"}, lookup=lookup)

        self.assertEqual(outcome, ToolSuccess(text="Found 1 results"))
        lookup.assert_awaited_once_with(QueryOptions(query="NodePath"))

    async def test_unknown_tool_is_rejected_before_lookup(self) -> None:
        from panda3d_docs_mcp_server.tools import ToolFailure, dispatch_tool_call

        lookup = AsyncMock()
        outcome = await dispatch_tool_call("get_manual", {"query": "NodePath"}, lookup=lookup)

        self.assertIsInstance(outcome, ToolFailure)
        self.assertEqual(outcome.kind, "unknown_operation")
        self.assertEqual(outcome.message, "Unknown tool: get_manual")
        self.assertTrue(outcome.is_client_error)
        lookup.assert_not_awaited()

    async def test_invalid_arguments_are_rejected_before_lookup(self) -> None:
        from panda3d_docs_mcp_server.tools import ToolFailure, dispatch_tool_call

        lookup = AsyncMock()
        outcome = await dispatch_tool_call("get_docs", {"query": ["NodePath"]}, lookup=lookup)

        self.assertIsInstance(outcome, ToolFailure)
        self.assertEqual(outcome.kind, "invalid_input")
        self.assertEqual(outcome.message, "Invalid documentation arguments")
        lookup.assert_not_awaited()

    async def test_fetch_failure_keeps_trace(self) -> None:
        from panda3d_docs_mcp_server.tools import ToolFailure, dispatch_tool_call

        trace = ("[t0] Searching URL: x", "[t1] Error: boom")
        lookup = AsyncMock(side_effect=DocsFetchError("boom", trace))
        outcome = await dispatch_tool_call("get_docs", {"query": "NodePath"}, lookup=lookup)

        self.assertIsInstance(outcome, ToolFailure)
        self.assertEqual(outcome.kind, "fetch_failure")
        self.assertFalse(outcome.is_client_error)
        self.assertEqual(outcome.trace, trace)
        self.assertTrue(outcome.message.startswith("Failed to fetch Panda3D documentation: boom"))
        self.assertTrue(outcome.message.endswith("[t1] Error: boom"))

    def test_failure_kinds_map_to_jsonrpc_codes(self) -> None:
        from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND

        from panda3d_docs_mcp_server.tools import ToolFailure

        self.assertEqual(ToolFailure("invalid_input", "bad").error_code, INVALID_PARAMS)
        self.assertEqual(ToolFailure("unknown_operation", "nope").error_code, METHOD_NOT_FOUND)
        error = ToolFailure("fetch_failure", "boom").to_error_data()
        self.assertEqual((error.code, error.message), (INTERNAL_ERROR, "boom"))


if __name__ == "__main__":
    unittest.main()
