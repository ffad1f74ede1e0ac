# backend/app/services/session_generation/zoom_link.py
"""Meeting link normalization for generated sessions."""

from typing import Iterable, Optional
from urllib.parse import urlsplit, urlunsplit

from ...core.constants import MAX_MEETING_LINK_LENGTH
from ...core.exceptions import ValidationException

_ALLOWED_SCHEMES = ("http", "https")


def _invalid(reason: str) -> ValidationException:
    return ValidationException(
        "Invalid zoom link",
        code="INVALID_ZOOM_LINK",
        details={"field": "zoomLink", "reason": reason},
    )


def normalize_zoom_link(
    raw: Optional[str], allowed_hosts: Iterable[str] = ()
) -> Optional[str]:
    """
    Validate and normalize an optional meeting URL.

    Blank input means "no link" and returns None. Plain http links are
    upgraded to https.

    Raises:
        ValidationException: If the value is not an acceptable absolute URL
    """
    if raw is None:
        return None
    value = raw.strip()
    if not value:
        return None

    if len(value) > MAX_MEETING_LINK_LENGTH:
        raise _invalid("too_long")
    if any(ch.isspace() for ch in value):
        raise _invalid("whitespace")

    try:
        parts = urlsplit(value)
    except ValueError:
        raise _invalid("malformed")

    scheme = parts.scheme.lower()
    if scheme not in _ALLOWED_SCHEMES:
        raise _invalid("scheme")

    host = (parts.hostname or "").lower()
    if not host:
        raise _invalid("host")

    hosts = {h.lower() for h in allowed_hosts}
    if hosts and not any(host == h or host.endswith(f".{h}") for h in hosts):
        raise _invalid("host_not_allowed")

    return urlunsplit(("https", parts.netloc, parts.path, parts.query, parts.fragment))
