from typing import Optional

from config.constants import CIPHER_SUITE_PREFIX, CIPHER_WEAKNESS_RULES


def detect_weakness(cipher_suite: Optional[str]) -> Optional[str]:
    """
    Return the first weakness reason for an IANA-style cipher suite name.

    Names that do not start with ``TLS_`` cannot be evaluated and yield None.
    Static RSA key exchange is checked before mode and cipher markers.
    """
    if not cipher_suite or not isinstance(cipher_suite, str):
        return None
    if not cipher_suite.startswith(CIPHER_SUITE_PREFIX):
        return None

    for rule in CIPHER_WEAKNESS_RULES:
        marker = rule["marker"]
        if rule["match"] == "prefix":
            hit = cipher_suite.startswith(marker)
        else:
            hit = marker in cipher_suite
        if hit:
            return rule["reason"]
    return None
