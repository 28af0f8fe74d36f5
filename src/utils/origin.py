from urllib.parse import urlparse
from typing import Optional, Tuple

Origin = Tuple[str, str, int]

_DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443}


def url_origin(url: Optional[str]) -> Optional[Origin]:
    """Return ``(scheme, host, port)`` for a URL, or None if it has no usable origin."""
    if not url or not isinstance(url, str):
        return None
    try:
        parsed = urlparse(url.strip())
        scheme = parsed.scheme.lower()
        host = (parsed.hostname or "").lower()
        port = parsed.port
    except ValueError:
        return None

    if not scheme or not host:
        return None
    if port is None:
        port = _DEFAULT_PORTS.get(scheme)
        if port is None:
            return None
    return scheme, host, port


def same_origin(left: Optional[str], right: Optional[str]) -> bool:
    a = url_origin(left)
    b = url_origin(right)
    return a is not None and a == b


def is_https(url: Optional[str]) -> bool:
    return bool(url) and url.strip().lower().startswith("https:")
