from enum import Enum

class SecurityState(Enum):
    """Coarse connection state as reported by the platform."""
    SECURE = "secure"
    WEAK = "weak"
    BROKEN = "broken"
    INSECURE = "insecure"


class TrustLevel(Enum):
    SECURE = "secure"
    WEAK = "weak"
    BROKEN = "broken"
    INSECURE = "insecure"

    @property
    def label(self) -> str:
        return self.value.capitalize()
