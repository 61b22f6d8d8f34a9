from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Awaitable, Callable, Literal, Union, cast

from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND, ErrorData

from .errors import DocsFetchError, DocsToolError, InvalidDocsArgumentsError, UnknownToolError
from .lookup import search_docs
from .models import QueryOptions

LOGGER = logging.getLogger(__name__)

GET_DOCS_TOOL = "get_docs"

FailureKind = Literal["invalid_input", "unknown_operation", "fetch_failure"]

# JSON-RPC error codes reported for each failure kind.
ERROR_CODES: dict[str, int] = {
    "invalid_input": INVALID_PARAMS,
    "unknown_operation": METHOD_NOT_FOUND,
    "fetch_failure": INTERNAL_ERROR,
}


@dataclass(frozen=True)
class ToolSuccess:
    text: str


@dataclass(frozen=True)
class ToolFailure:
    kind: FailureKind
    message: str
    trace: tuple[str, ...] = ()

    @property
    def is_client_error(self) -> bool:
        return self.kind != "fetch_failure"

    @property
    def error_code(self) -> int:
        return ERROR_CODES[self.kind]

    def to_error_data(self) -> ErrorData:
        return ErrorData(code=self.error_code, message=self.message)


ToolOutcome = Union[ToolSuccess, ToolFailure]


def is_valid_docs_args(arguments: object) -> bool:
    return isinstance(arguments, Mapping) and isinstance(arguments.get("query"), str)


def parse_docs_args(arguments: object) -> QueryOptions:
    """Validate raw `get_docs` arguments.

    `check_keywords` is on unless explicitly `false`; `search_contents` is on
    only for truthy values.
    """
    if not is_valid_docs_args(arguments):
        raise InvalidDocsArgumentsError("Invalid documentation arguments")
    args = cast(Mapping[str, object], arguments)
    return QueryOptions(
        query=cast(str, args["query"]),
        check_keywords=args.get("check_keywords") is not False,
        search_contents=bool(args.get("search_contents")),
    )


def _failure_from(exc: DocsToolError) -> ToolFailure:
    trace = exc.trace if isinstance(exc, DocsFetchError) else ()
    return ToolFailure(kind=exc.kind, message=str(exc), trace=trace)  # type: ignore[arg-type]


async def dispatch_tool_call(
    name: str,
    arguments: object,
    *,
    lookup: Callable[[QueryOptions], Awaitable[str]] | None = None,
) -> ToolOutcome:
    """Route one tool call to the docs lookup and fold errors into an outcome.

    Arguments are validated before any browser work; unknown tools and invalid
    arguments never reach `lookup`.
    """
    LOGGER.info("Received CallTool request for tool: %s", name)
    try:
        if name != GET_DOCS_TOOL:
            raise UnknownToolError(name)
        options = parse_docs_args(arguments)
        LOGGER.info('Processing get_docs request with query: "%s"', options.query)
        text = await (lookup or search_docs)(options)
    except DocsToolError as exc:
        failure = _failure_from(exc)
        if failure.is_client_error:
            LOGGER.warning("Rejected %s call: %s", name, failure.message)
        else:
            LOGGER.error("get_docs failed: %s", exc.cause if isinstance(exc, DocsFetchError) else exc)
        return failure

    LOGGER.info("Returning search results")
    return ToolSuccess(text=text)
