from __future__ import annotations

import os
import sys
from pathlib import Path

import anyio


def ensure_src_on_sys_path(repo_root: Path) -> None:
    """Allow running this script directly (e.g., from an IDE) without installing the package."""
    src_dir = repo_root / "src"
    src_str = str(src_dir)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


def parse_bool(raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if value in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default


def call_tool_text(result: object) -> str:
    """
    `mcp.call_tool()` returns a `CallToolResult`; its text blocks are joined.
    """
    result = getattr(result, "content", result)
    if isinstance(result, tuple):
        result = result[0]
    if isinstance(result, list):
        return "\n".join(str(getattr(item, "text", item)) for item in result)
    return str(result)


async def main() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    ensure_src_on_sys_path(repo_root)

    from panda3d_docs_mcp_server.scrape import shutdown_browser_session
    from panda3d_docs_mcp_server.server import mcp

    query = sys.argv[1] if len(sys.argv) > 1 else "NodePath"

    # This calls the MCP tool handler directly (no MCP host required).
    try:
        result = await mcp.call_tool(
            "get_docs",
            arguments={
                "query": query,
                "check_keywords": parse_bool(os.environ.get("CHECK_KEYWORDS"), default=True),
                "search_contents": parse_bool(os.environ.get("SEARCH_CONTENTS"), default=False),
            },
        )
    finally:
        await shutdown_browser_session()

    print(call_tool_text(result))


if __name__ == "__main__":
    # Run example:
    #   PYTHONPATH=src python examples/script_run_mcp_tools.py ShowBase
    anyio.run(main)
