"""Tests for response envelopes, URL helpers and sanitizing."""

import pytest
from mcp.types import CallToolResult, TextContent

from testingbot_mcp.utils.response import (
    FAILURE_HINTS,
    FailureKind,
    failure_envelope,
    readable_operation_name,
    success_envelope,
)
from testingbot_mcp.utils.sanitize import REDACTED, redact_arguments, sanitize_session_id
from testingbot_mcp.utils.urls import encode_uri_component, is_valid_url


# ============================================================================
# Envelopes
# ============================================================================

@pytest.mark.parametrize("name,expected", [
    ("getBrowsers", "get browsers"),
    ("getTestsForBuild", "get tests for build"),
    ("createCdpSession", "create cdp session"),
    ("stopTest", "stop test"),
    ("", ""),
])
def test_readable_operation_name(name, expected):
    """camelCase names split into lower-case words."""
    assert readable_operation_name(name) == expected


def test_success_envelope():
    """Success carries one text block and no error flag."""
    envelope = success_envelope("done")

    assert envelope.to_dict() == {"content": [{"type": "text", "text": "done"}], "isError": False}
    assert envelope.failure_kind is None


def test_failure_envelope_text():
    """Failure text follows 'Failed to <name>: <reason>. <hint>'."""
    envelope = failure_envelope("uploadRemoteFile", "Invalid URL provided.")

    assert envelope.is_error
    assert envelope.text == (
        "Failed to upload remote file: Invalid URL provided. "
        "Please check your credentials and try again."
    )


def test_failure_envelope_same_shape_as_success():
    """Both outcomes share the envelope shape."""
    failure = failure_envelope("getTests", "boom").to_dict()
    success = success_envelope("ok").to_dict()

    assert set(failure) == set(success)
    assert set(failure["content"][0]) == set(success["content"][0])


@pytest.mark.parametrize("kind", list(FailureKind))
def test_failure_hint_per_kind(kind):
    """Every failure kind appends its recovery hint."""
    envelope = failure_envelope("getTests", "boom", kind)

    assert envelope.failure_kind == kind
    assert envelope.text.endswith(FAILURE_HINTS[kind])


def test_failure_envelope_unknown_name():
    """An empty operation name still produces readable text."""
    envelope = failure_envelope("", "", FailureKind.NOT_FOUND)

    assert envelope.text.startswith("Failed to run tool: unknown error.")


def test_mcp_conversion():
    """Envelopes convert to MCP content and results."""
    envelope = failure_envelope("getTests", "boom")

    content = envelope.to_text_content()
    result = envelope.to_call_tool_result()

    assert content == [TextContent(type="text", text=envelope.text)]
    assert isinstance(result, CallToolResult)
    assert result.isError is True


# ============================================================================
# URLs
# ============================================================================

@pytest.mark.parametrize("value,expected", [
    ("https://example.com", True),
    ("http://localhost:8080/path?q=1", True),
    ("ftp://files.example.com/app.apk", True),
    ("example.com", False),
    ("not a url", False),
    ("", False),
    ("   ", False),
    (None, False),
    (42, False),
])
def test_is_valid_url(value, expected):
    """Only absolute URLs are accepted."""
    assert is_valid_url(value) is expected


def test_encode_uri_component():
    """Reserved characters are percent-encoded, unreserved marks kept."""
    assert encode_uri_component("https://a.com/?q=a b&x=(1)!") == (
        "https%3A%2F%2Fa.com%2F%3Fq%3Da%20b%26x%3D(1)!"
    )


# ============================================================================
# Sanitizing
# ============================================================================

def test_sanitize_session_id():
    """Only letters, digits, dash and underscore survive."""
    assert sanitize_session_id("abc-123_X/../;rm -rf") == "abc-123_Xrm-rf"


def test_redact_arguments_nested():
    """Credential-like keys are masked at any depth."""
    arguments = {
        "sessionId": "abc",
        "api_key": "k",
        "extraCapabilities": {"password": "p", "idleTimeout": 60},
        "browsers": [{"token": "t", "os": "WIN11"}],
    }

    redacted = redact_arguments(arguments)

    assert redacted == {
        "sessionId": "abc",
        "api_key": REDACTED,
        "extraCapabilities": {"password": REDACTED, "idleTimeout": 60},
        "browsers": [{"token": REDACTED, "os": "WIN11"}],
    }
    assert arguments["api_key"] == "k"
