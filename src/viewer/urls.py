"""
URL checks for the address bar.

normalize_url() accepts anything with a scheme and, for network schemes,
a host — the same inputs a browser address bar would treat as a URL
rather than a search term.
"""

from urllib.parse import urlsplit

from src.exceptions import InvalidUrlError

__all__ = ["normalize_url"]

# Schemes that are meaningful without a host part
_HOSTLESS_SCHEMES = {"file", "about", "data"}


def normalize_url(text: str) -> str:
    """
    Strip *text* and check that it is a loadable URL.

    Raises:
        InvalidUrlError: text is blank, or lacks a scheme / host.
    """
    url = (text or "").strip()
    if not url:
        raise InvalidUrlError("Please enter a URL")

    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise InvalidUrlError("Please enter a valid URL") from exc

    if not parts.scheme:
        raise InvalidUrlError("Please enter a valid URL")
    if parts.scheme.lower() not in _HOSTLESS_SCHEMES and not parts.netloc:
        raise InvalidUrlError("Please enter a valid URL")
    return url
