from dataclasses import dataclass
from typing import Any, Dict, Optional

from .trust import TrustLevel


@dataclass(frozen=True)
class IconDescriptor:
    """Either a named default icon (``default_path``) or a coloured badge."""
    level: Optional[TrustLevel] = None
    background: Optional[str] = None
    glyph_variant: Optional[str] = None
    glyph: Optional[bytes] = None
    size: int = 32
    default_path: Optional[str] = None

    @property
    def is_default(self) -> bool:
        return self.default_path is not None

    @property
    def is_badge(self) -> bool:
        return self.background is not None and self.glyph_variant is not None

    def to_dict(self) -> Dict[str, Any]:
        if self.is_default:
            return {"kind": "default", "path": self.default_path, "level": self.level.value if self.level else None}
        return {
            "kind": "badge",
            "level": self.level.value if self.level else None,
            "background": self.background,
            "glyph_variant": self.glyph_variant,
            "size": self.size,
        }
