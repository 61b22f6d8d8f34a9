from __future__ import annotations

import argparse
import contextlib
import logging
import os
import signal
import sys
import time
from typing import Any, AsyncIterator, Literal

from mcp import types
from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.shared.exceptions import McpError

from . import __version__
from .scrape import shutdown_browser_session, shutdown_browser_session_sync
from .tools import GET_DOCS_TOOL, ToolFailure, dispatch_tool_call
from .utils.logging import configure_logging

configure_logging()
LOGGER = logging.getLogger(__name__)

BANNER = """
╔═════════════════════════════════════════════╗
║                                             ║
║            Panda3D MCP Server               ║
║                                             ║
╚═════════════════════════════════════════════╝
"""

USAGE_MESSAGE = """
This is an MCP tool server for Panda3D documentation.
It should be used as a tool in an MCP client configuration, for example:

{
  "panda3d-docs": {
    "command": "mcp-panda3d-docs",
    "args": ["--stdio"],
    "env": {},
    "timeout": 60,
    "transportType": "stdio"
  }
}

If you're seeing this message, the server is running correctly but isn't
connected to an MCP client. The server will wait for MCP protocol messages.

Press Ctrl+C to exit.
"""

_STARTED_AT = time.monotonic()


@contextlib.asynccontextmanager
async def _lifespan(_server: FastMCP) -> AsyncIterator[None]:
    uptime = time.monotonic() - _STARTED_AT
    LOGGER.info("Server ready! Started in %.2fs", uptime)
    LOGGER.info("Waiting for MCP requests...")
    try:
        yield
    finally:
        # The browser goes first; the transport is closed by FastMCP after we return.
        LOGGER.info("Cleaning up resources...")
        await shutdown_browser_session()


class DocsMCP(FastMCP):
    """
    FastMCP app whose tool calls all go through `dispatch_tool_call`.

    Invalid arguments and unknown tools are answered with JSON-RPC errors
    (`INVALID_PARAMS`, `METHOD_NOT_FOUND`). A failed lookup is a tool result
    with `isError` set, its text carrying the cause and the debug log.
    """

    def _setup_handlers(self) -> None:
        super()._setup_handlers()
        # Replaces the FastMCP handler so `McpError` reaches the session as a
        # JSON-RPC error response.
        self._mcp_server.request_handlers[types.CallToolRequest] = self._handle_call_tool

    async def _handle_call_tool(self, req: types.CallToolRequest) -> types.ServerResult:
        return types.ServerResult(await self.call_tool(req.params.name, req.params.arguments or {}))

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> types.CallToolResult:  # type: ignore[override]
        outcome = await dispatch_tool_call(name, arguments)
        if isinstance(outcome, ToolFailure):
            if outcome.is_client_error:
                raise McpError(outcome.to_error_data())
            return types.CallToolResult(
                content=[types.TextContent(type="text", text=outcome.message)],
                isError=True,
            )
        return types.CallToolResult(content=[types.TextContent(type="text", text=outcome.text)])


mcp = DocsMCP(
    "panda3d-docs",
    instructions=(
        "Look up the Panda3D manual and API reference (docs.panda3d.org): searches the docs, "
        "returns the top results and the text of the best-matching page."
    ),
    lifespan=_lifespan,
)

Transport = Literal["stdio", "sse", "streamable-http"]


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcp-panda3d-docs",
        description="MCP server: Panda3D documentation search + page extraction.",
    )

    transport_group = parser.add_mutually_exclusive_group()
    transport_group.add_argument(
        "--transport",
        choices=("stdio", "sse", "streamable-http"),
        help="Transport to use (default: stdio).",
    )
    transport_group.add_argument(
        "--stdio",
        dest="transport",
        action="store_const",
        const="stdio",
        help="Run using stdio transport (default).",
    )
    transport_group.add_argument(
        "--sse",
        dest="transport",
        action="store_const",
        const="sse",
        help="Run using SSE transport.",
    )
    transport_group.add_argument(
        "--http",
        "--streamable-http",
        dest="transport",
        action="store_const",
        const="streamable-http",
        help="Run using Streamable HTTP transport.",
    )

    parser.add_argument(
        "--host",
        default=None,
        help="Bind host for HTTP/SSE transports (overrides FASTMCP_HOST).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Bind port for HTTP/SSE transports (overrides FASTMCP_PORT).",
    )
    parser.add_argument(
        "--mount-path",
        default=None,
        help="Mount path for SSE transport (if supported by the runtime).",
    )
    return parser


def _resolve_transport(raw: str | None) -> Transport:
    if raw in ("stdio", "sse", "streamable-http"):
        return raw
    return "stdio"


def _resolve_host_port(host: str | None, port: int | None) -> tuple[str, int]:
    resolved_host = host or os.environ.get("FASTMCP_HOST", "127.0.0.1")
    resolved_port_raw = str(port) if port is not None else os.environ.get("FASTMCP_PORT", "8000")
    try:
        resolved_port = int(resolved_port_raw)
    except ValueError:
        resolved_port = 8000
    return resolved_host, resolved_port


def _is_running_standalone() -> bool:
    try:
        return sys.stdin.isatty() and sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def _install_signal_handlers() -> None:
    def _handle(signum: int, _frame: object) -> None:
        LOGGER.info("Received %s signal, shutting down...", signal.Signals(signum).name)
        raise KeyboardInterrupt

    signal.signal(signal.SIGTERM, _handle)


def main(argv: list[str] | None = None) -> None:
    """
    Entrypoint for running the MCP server.

    Notes:
    - MCP clients launch this server over stdio by default.
    - HTTP/SSE transports are useful for containerized and gateway deployments.
    - On SIGINT/SIGTERM the browser session is closed before the process exits.
    """
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    transport = _resolve_transport(args.transport)

    LOGGER.info(BANNER)
    LOGGER.info("Initializing Panda3D MCP Server v%s...", __version__)

    if transport in ("sse", "streamable-http"):
        host, port = _resolve_host_port(args.host, args.port)
        # FastMCP settings are the source of truth for host/port in HTTP transports.
        for key, value in (("host", host), ("port", port)):
            if hasattr(mcp, "settings") and hasattr(mcp.settings, key):
                setattr(mcp.settings, key, value)

    if transport == "stdio" and _is_running_standalone():
        LOGGER.info("Detected standalone mode (running in terminal)")
        print(USAGE_MESSAGE, file=sys.stderr)

    _install_signal_handlers()
    LOGGER.info("Starting MCP server...")
    try:
        try:
            mcp.run(transport=transport, mount_path=args.mount_path)
        except TypeError:
            # Backward-compat: older MCP SDKs may not accept `mount_path`.
            mcp.run(transport=transport)
    except KeyboardInterrupt:
        LOGGER.info("Shutting down...")
    finally:
        shutdown_browser_session_sync()
        LOGGER.info("Server closed successfully.")


@mcp.tool(name=GET_DOCS_TOOL, structured_output=False)
async def get_docs(
    query: str,
    check_keywords: bool = True,
    search_contents: bool = False,
) -> str:
    """Get Panda3D documentation for a class, function, or module.

    Args:
    - query: Search query (e.g. "NodePath", "ShowBase", "editor").
    - check_keywords: Search in module names and titles (default: true).
    - search_contents: Search in docstrings and code (default: false).

    Returns:
    - Plain text: the numbered list of up to 10 search results (title, URL, summary),
      then the text of the best-matching page under "Detailed documentation:", then a
      "Debug Log:" section with timestamped steps of this lookup.
    - `No documentation found for "<query>"` when the search has no hits.

    Notes:
    - Pages are rendered in a headless browser, so a call usually takes a few seconds.
    - For the query "ShowBase" the ShowBase class reference is preferred over manual pages.
    """
    outcome = await dispatch_tool_call(
        GET_DOCS_TOOL,
        {
            "query": query,
            "check_keywords": check_keywords,
            "search_contents": search_contents,
        },
    )
    if isinstance(outcome, ToolFailure):
        raise ToolError(outcome.message)
    return outcome.text
