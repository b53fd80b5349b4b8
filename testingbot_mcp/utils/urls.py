"""URL helpers shared by argument validation and session locators."""

from urllib.parse import quote

from pydantic import AnyUrl, TypeAdapter, ValidationError

_URL_ADAPTER = TypeAdapter(AnyUrl)

# Unreserved characters kept as-is inside a URI component
_URI_COMPONENT_SAFE = "-_.!~*'()"


def is_valid_url(value: str) -> bool:
    """Check that ``value`` is a syntactically valid absolute URL."""
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        return False
    return True


def encode_uri_component(value: str) -> str:
    """Percent-encode a value for use inside a query string.

    >>> encode_uri_component("https://example.com/?a=1&b=2")
    'https%3A%2F%2Fexample.com%2F%3Fa%3D1%26b%3D2'
    """
    return quote(value, safe=_URI_COMPONENT_SAFE)
