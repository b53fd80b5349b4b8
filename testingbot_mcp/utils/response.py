"""Standardized response envelopes for MCP tool invocations."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from mcp.types import CallToolResult, TextContent


class FailureKind(str, Enum):
    """Why an invocation did not produce a result."""
    NOT_FOUND = "operation not found"
    INVALID_ARGUMENTS = "invalid arguments"
    HANDLER_ERROR = "handler error"


# Recovery hint appended to each failure text, per failure kind
FAILURE_HINTS: Dict[FailureKind, str] = {
    FailureKind.NOT_FOUND: "Please list the available tools and try again.",
    FailureKind.INVALID_ARGUMENTS: "Please check the arguments and try again.",
    FailureKind.HANDLER_ERROR: "Please check your credentials and try again.",
}


@dataclass(frozen=True)
class ResponseEnvelope:
    """Uniform result of every invocation.

    The shape never changes between success and failure: an ordered list of
    text blocks plus an ``is_error`` flag.
    """
    content: List[Dict[str, str]] = field(default_factory=list)
    is_error: bool = False
    failure_kind: Optional[FailureKind] = None

    @property
    def text(self) -> str:
        """All text blocks joined together."""
        return "\n".join(block["text"] for block in self.content)

    def to_dict(self) -> Dict[str, Any]:
        """Protocol-neutral representation."""
        return {
            "content": [dict(block) for block in self.content],
            "isError": self.is_error,
        }

    def to_text_content(self) -> List[TextContent]:
        """Content blocks as MCP ``TextContent`` objects."""
        return [TextContent(type="text", text=block["text"]) for block in self.content]

    def to_call_tool_result(self) -> CallToolResult:
        """Envelope as an MCP ``CallToolResult``."""
        return CallToolResult(content=self.to_text_content(), isError=self.is_error)


def readable_operation_name(name: str) -> str:
    """Turn a camelCase operation name into lower-case words.

    >>> readable_operation_name("getTestsForBuild")
    'get tests for build'
    """
    return re.sub(r"([A-Z])", r" \1", name).lower().strip()


def success_envelope(text: str) -> ResponseEnvelope:
    """Create a successful response envelope.

    Args:
        text: Human-readable result text

    Returns:
        Envelope with a single text block and ``is_error`` False
    """
    return ResponseEnvelope(content=[{"type": "text", "text": text}], is_error=False)


def failure_envelope(
    operation_name: str,
    reason: str,
    kind: FailureKind = FailureKind.HANDLER_ERROR
) -> ResponseEnvelope:
    """Create an error response envelope.

    The text always reads ``Failed to <readable name>: <reason>. <hint>``.

    Args:
        operation_name: Name of the operation that failed (may be unknown)
        reason: Human-readable failure reason
        kind: Failure kind, selects the recovery hint

    Returns:
        Envelope with a single text block and ``is_error`` True
    """
    readable = readable_operation_name(operation_name) or "run tool"
    reason = reason.rstrip(".") or "unknown error"
    text = f"Failed to {readable}: {reason}. {FAILURE_HINTS[kind]}"

    return ResponseEnvelope(
        content=[{"type": "text", "text": text}],
        is_error=True,
        failure_kind=kind
    )
