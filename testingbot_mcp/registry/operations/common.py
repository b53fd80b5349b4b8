"""Parameter builders and response helpers shared by operation groups."""

from typing import Any, List, Tuple

from ..schema import ParamKind, ParamSpec

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10


def pagination_params(noun: str) -> Tuple[ParamSpec, ParamSpec]:
    """offset/limit pair used by every listing operation."""
    return (
        ParamSpec(
            "offset",
            ParamKind.INTEGER,
            description="Offset for pagination (default: 0)",
            minimum=0,
            default=0,
        ),
        ParamSpec(
            "limit",
            ParamKind.INTEGER,
            description=(
                f"Number of {noun} to retrieve "
                f"(default: {DEFAULT_PAGE_SIZE}, max: {MAX_PAGE_SIZE})"
            ),
            minimum=1,
            maximum=MAX_PAGE_SIZE,
            default=DEFAULT_PAGE_SIZE,
        ),
    )


def session_id_param(description: str = "The session ID of the test") -> ParamSpec:
    return ParamSpec("sessionId", ParamKind.STRING, description=description,
                     required=True, non_empty=True)


def response_items(response: Any) -> List[Any]:
    """List payload of a paginated or bare-list API response."""
    if isinstance(response, list):
        return response
    if isinstance(response, dict):
        data = response.get("data")
        if isinstance(data, list):
            return data
    return []


def response_object(response: Any) -> Any:
    """Object payload, unwrapping a ``data`` envelope when present."""
    if isinstance(response, dict) and isinstance(response.get("data"), dict):
        return response["data"]
    return response if response is not None else {}


def page_heading(title: str, limit: int, offset: int) -> str:
    return f"## {title} (showing {limit} from offset {offset})\n"
