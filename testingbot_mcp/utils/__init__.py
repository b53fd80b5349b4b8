"""Shared helpers for testingbot-mcp-server."""

from .response import (
    FailureKind,
    ResponseEnvelope,
    failure_envelope,
    readable_operation_name,
    success_envelope,
)
from .sanitize import redact_arguments, sanitize_session_id
from .urls import encode_uri_component, is_valid_url

__all__ = [
    'FailureKind',
    'ResponseEnvelope',
    'failure_envelope',
    'readable_operation_name',
    'success_envelope',
    'redact_arguments',
    'sanitize_session_id',
    'encode_uri_component',
    'is_valid_url',
]
