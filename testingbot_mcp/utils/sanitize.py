"""Input sanitizing and log redaction helpers."""

import re
from typing import Any, Dict

REDACTED = "***"

_SESSION_ID_PATTERN = re.compile(r"[^a-zA-Z0-9_-]")
_SENSITIVE_KEY_PATTERN = re.compile(r"secret|password|token|api_?key|credential", re.IGNORECASE)


def sanitize_session_id(session_id: str) -> str:
    """Strip everything except letters, digits, dash and underscore."""
    return _SESSION_ID_PATTERN.sub("", str(session_id))


def redact_arguments(arguments: Any) -> Any:
    """Return a copy of ``arguments`` safe to write to the logs.

    Values stored under keys that look like credentials are replaced, nested
    mappings and lists are walked recursively.
    """
    if isinstance(arguments, dict):
        redacted: Dict[str, Any] = {}
        for key, value in arguments.items():
            if _SENSITIVE_KEY_PATTERN.search(str(key)):
                redacted[key] = REDACTED
            else:
                redacted[key] = redact_arguments(value)
        return redacted

    if isinstance(arguments, (list, tuple)):
        return [redact_arguments(item) for item in arguments]

    return arguments
