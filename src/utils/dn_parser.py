import re
from typing import List, Optional, Tuple

# Stands in for a comma that is part of a value while the DN is split.
_COMMA_SENTINEL = "\x00"

_QUOTED_SEGMENT_RE = re.compile(r'"([^"]*)"')
_ESCAPED_COMMA_RE = re.compile(r"\\+,")


def _protect_quoted(match: "re.Match") -> str:
    return match.group(1).replace(",", _COMMA_SENTINEL)


def parse_distinguished_name(dn: Optional[str]) -> List[Tuple[str, str]]:
    """
    Decompose a distinguished name into ordered ``(key, value)`` pairs.

    Commas inside double-quoted values and backslash-escaped commas are kept
    as part of the value. Each segment is split on its first ``=``; segments
    without one are dropped.
    """
    if not dn:
        return []

    protected = _ESCAPED_COMMA_RE.sub(_COMMA_SENTINEL, dn)
    protected = _QUOTED_SEGMENT_RE.sub(_protect_quoted, protected)

    out: List[Tuple[str, str]] = []
    for part in protected.split(","):
        if "=" not in part:
            continue
        key, _, value = part.partition("=")
        key = key.replace(_COMMA_SENTINEL, ",").strip()
        value = value.replace(_COMMA_SENTINEL, ",").strip()
        out.append((key, value))
    return out


def common_name(dn: Optional[str]) -> Optional[str]:
    for key, value in parse_distinguished_name(dn):
        if key.upper() == "CN" and value:
            return value
    return None
