"""Decompose an absolute URL into domain, path, query mapping, and fragment."""

from urllib.parse import parse_qsl, urlsplit

from event_etl.errors import InvalidUrlError
from event_etl.models import Address


def _has_control_chars(value: str) -> bool:
    return any(ord(c) < 0x20 or ord(c) == 0x7F for c in value)


def decompose_url(url: str) -> Address:
    """Split *url* into an :class:`Address`.

    The query string is percent-decoded and, when a key repeats, the last
    occurrence wins. The fragment keeps its leading ``#``.

    Raises:
        InvalidUrlError: if *url* is not an absolute URL with scheme and host.
    """
    if not isinstance(url, str):
        raise InvalidUrlError(f"URL must be a string, got {type(url).__name__}")

    raw = url.strip()
    if not raw or _has_control_chars(raw):
        raise InvalidUrlError(f"Malformed URL: {url!r}")

    try:
        parts = urlsplit(raw)
        parts.port  # raises ValueError for a non-numeric or out-of-range port
    except ValueError as exc:
        raise InvalidUrlError(f"Malformed URL {url!r}: {exc}") from exc

    if not parts.scheme:
        raise InvalidUrlError(f"URL has no scheme: {url!r}")
    if not parts.hostname or " " in parts.netloc:
        raise InvalidUrlError(f"URL has no valid host: {url!r}")

    return Address(
        domain=parts.hostname,
        path=parts.path,
        query=dict(parse_qsl(parts.query, keep_blank_values=True)),
        fragment=f"#{parts.fragment}" if parts.fragment else "",
    )
