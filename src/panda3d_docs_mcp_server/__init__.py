"""MCP server exposing Panda3D documentation lookup."""

__version__ = "0.1.2"
