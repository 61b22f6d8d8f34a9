from __future__ import annotations


class DocsToolError(RuntimeError):
    """Base class for failures surfaced to the MCP client."""

    kind = "internal"


class InvalidDocsArgumentsError(DocsToolError):
    kind = "invalid_input"


class UnknownToolError(DocsToolError):
    kind = "unknown_operation"

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class DocsFetchError(DocsToolError):
    """Loading or parsing a documentation page failed.

    Carries the cause and the request's trace so the client can diagnose the
    failure without access to server logs.
    """

    kind = "fetch_failure"

    def __init__(self, cause: str, trace: tuple[str, ...] = ()) -> None:
        self.cause = cause
        self.trace = tuple(trace)
        super().__init__(
            f"Failed to fetch Panda3D documentation: {cause}\n\nDebug Log:\n" + "\n".join(self.trace)
        )


class NavigationTimeoutError(TimeoutError):
    """A page did not reach network idle within the navigation timeout."""

    def __init__(self, url: str, timeout_seconds: float) -> None:
        super().__init__(f"Navigation timeout of {timeout_seconds:g}s exceeded for {url}")
        self.url = url
        self.timeout_seconds = timeout_seconds


class BrowserUnavailableError(RuntimeError):
    pass
