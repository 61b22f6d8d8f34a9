from __future__ import annotations

import argparse

TRANSPORT_FLAGS = frozenset({"--stdio", "--sse", "--http", "--streamable-http", "--transport"})


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="panda3d-docs-mcp-server",
        description="Wrapper CLI for the Panda3D documentation MCP server.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "start-mcp-server",
        help="Start the MCP server (stdio by default).",
        description=(
            "Start the Panda3D documentation MCP server. Arguments after the command "
            "(optionally after `--`) are forwarded to the server."
        ),
    )
    return parser


def _has_transport_flag(argv: list[str]) -> bool:
    return any(arg.split("=", 1)[0] in TRANSPORT_FLAGS for arg in argv)


def main(argv: list[str] | None = None) -> None:
    from .server import main as server_main

    parser = _build_arg_parser()
    _args, forwarded_args = parser.parse_known_args(argv)

    if forwarded_args[:1] == ["--"]:
        forwarded_args = forwarded_args[1:]

    if not _has_transport_flag(forwarded_args):
        forwarded_args = ["--stdio", *forwarded_args]

    server_main(forwarded_args)
