"""Link URL validation and normalization for the link dialog."""

from __future__ import annotations

from pydantic import AnyUrl, TypeAdapter, ValidationError

_URL_ADAPTER = TypeAdapter(AnyUrl)
_LOCAL_PREFIXES = ("/", "#", "mailto:")


def _parses_with_host(url: str) -> bool:
    try:
        parsed = _URL_ADAPTER.validate_python(url)
    except ValidationError:
        return False
    return bool(parsed.host)


def format_url(url: str) -> str:
    """Return the URL a link will point at.

    Root-relative paths, anchors, ``mailto:`` and URLs with a scheme are kept
    as typed; a bare host such as ``example.com`` gets ``https://``.
    """
    url = url.strip()
    if not url or url.startswith(_LOCAL_PREFIXES) or "://" in url:
        return url
    return f"https://{url}"


def is_valid_url(url: str) -> bool:
    """Accept absolute URLs with a host, ``/`` paths, ``#`` anchors and ``mailto:``."""
    url = url.strip()
    if not url or any(ch.isspace() for ch in url):
        return False
    if url.startswith(_LOCAL_PREFIXES):
        return url != "mailto:"
    return _parses_with_host(format_url(url))
