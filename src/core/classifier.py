from typing import Optional, Tuple

from config.constants import TRUST_REASONS
from ..models.connection import ConnectionRecord
from ..models.trust import SecurityState, TrustLevel
from .weakness import detect_weakness


def classify(record: ConnectionRecord) -> TrustLevel:
    state = record.raw_state

    if state is SecurityState.INSECURE:
        return TrustLevel.INSECURE

    # A "secure" verdict without any certificate is treated as a broken chain.
    if state is SecurityState.BROKEN or (state is SecurityState.SECURE and not record.has_certificates):
        return TrustLevel.BROKEN

    if state is SecurityState.WEAK or detect_weakness(record.cipher_suite) is not None:
        return TrustLevel.WEAK

    return TrustLevel.SECURE


def describe(record: ConnectionRecord) -> Tuple[TrustLevel, Optional[str]]:
    level = classify(record)
    if level is TrustLevel.SECURE:
        return level, None
    if level is TrustLevel.WEAK:
        return level, detect_weakness(record.cipher_suite) or TRUST_REASONS["weak"]
    return level, TRUST_REASONS[level.value]
